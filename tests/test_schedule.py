from datetime import datetime, timezone, timedelta

import pytest

from sqlcron import get_next_start
from sqlcron.core.schedule import validate_interval


NOW = datetime(2024, 3, 1, 12, 0, 0, 300000, tzinfo=timezone.utc)


def test_one_shot_has_no_next_start():
    assert get_next_start(None, NOW - timedelta(seconds=5), now=NOW) is None
    assert get_next_start("", NOW - timedelta(seconds=5), now=NOW) is None


def test_future_start_is_kept():
    start = NOW + timedelta(minutes=5)
    assert get_next_start("* * * * * *", start, now=NOW) == start


def test_start_equal_to_floor_is_kept():
    start = NOW + timedelta(milliseconds=2000)
    assert get_next_start("* * * * * *", start, next_delay=2000, now=NOW) == start


def test_skips_first_occurrence():
    # 12:00:00.3 -> first occurrence at or after is 12:00:01, use 12:00:02
    next_start = get_next_start("* * * * * *", NOW - timedelta(seconds=1), now=NOW)
    assert next_start == datetime(2024, 3, 1, 12, 0, 2, tzinfo=timezone.utc)


def test_floor_on_occurrence_counts_as_first():
    now = NOW.replace(microsecond=0)
    next_start = get_next_start("* * * * * *", now - timedelta(seconds=1), now=now)
    assert next_start == datetime(2024, 3, 1, 12, 0, 1, tzinfo=timezone.utc)


def test_next_delay_moves_floor():
    next_start = get_next_start(
        "* * * * * *",
        NOW - timedelta(seconds=1),
        next_delay=60 * 1000,
        now=NOW,
    )
    assert next_start == datetime(2024, 3, 1, 12, 1, 2, tzinfo=timezone.utc)


def test_minute_interval():
    next_start = get_next_start("0 * * * * *", NOW - timedelta(hours=1), now=NOW)
    assert next_start == datetime(2024, 3, 1, 12, 2, 0, tzinfo=timezone.utc)


def test_stop_at_bounds_next_start():
    stop_at = NOW + timedelta(milliseconds=1500)
    assert (
        get_next_start("* * * * * *", NOW - timedelta(seconds=1), stop_at, now=NOW)
        is None
    )

    stop_at = NOW + timedelta(seconds=10)
    assert get_next_start(
        "* * * * * *", NOW - timedelta(seconds=1), stop_at, now=NOW
    ) == datetime(2024, 3, 1, 12, 0, 2, tzinfo=timezone.utc)


def test_malformed_interval_has_no_next_start():
    assert get_next_start("61 * * * * *", NOW - timedelta(seconds=1), now=NOW) is None


def test_validate_interval():
    validate_interval("*/10 30 9-17 * * mon-fri")
    with pytest.raises(ValueError):
        validate_interval("* * * * *")
    with pytest.raises(ValueError):
        validate_interval("* * 25 * * *")
    with pytest.raises(ValueError):
        validate_interval(None)
