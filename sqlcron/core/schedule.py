import logging
from datetime import datetime, timezone, timedelta

from croniter import croniter


logger = logging.getLogger(__name__)


def validate_interval(interval: str) -> None:
    """Make sure the interval is a valid six-field cron expression.

    The fields are seconds, minutes, hours, day of month, month and day of
    week, in that order.

    Raises:
        ValueError: If the expression cannot be parsed.
    """
    if not isinstance(interval, str):
        raise ValueError("interval must be a string")
    if len(interval.split()) != 6:
        raise ValueError(
            f"Invalid cron interval {interval!r}: expected 6 fields "
            "(seconds, minutes, hours, day of month, month, day of week)"
        )
    try:
        croniter(interval, second_at_beginning=True)
    except (ValueError, KeyError) as exc:
        raise ValueError(f"Invalid cron interval {interval!r}: {exc}") from exc


def get_next_start(
    interval: str | None,
    start_at: datetime,
    stop_at: datetime | None = None,
    next_delay: int = 0,
    now: datetime | None = None,
) -> datetime | None:
    """Compute when a job becomes eligible again.

    A job whose ``start_at`` is already at or past ``now + next_delay`` keeps
    it. Otherwise the first occurrence of ``interval`` at or after that floor
    is skipped and the second one is returned, which guarantees that the job
    moves past the current heartbeat.

    Args:
        interval (str | None): Six-field cron expression, seconds first.
        start_at (datetime): Current start of the job.
        stop_at (datetime | None): Upper bound for the next start.
        next_delay (int): Minimal gap in milliseconds before the job can be
            claimed again.
        now (datetime | None): Reference time. Defaults to now (UTC).

    Returns:
        (datetime | None): The next start, or None if the job is one-shot,
        its interval is malformed or it has no occurrence before ``stop_at``.
    """
    if not interval:
        return None

    if now is None:
        now = datetime.now(timezone.utc)
    floor = now + timedelta(milliseconds=next_delay)
    if start_at >= floor:
        return start_at

    # Occurrences have whole-second resolution: everything strictly after
    # the preceding whole second is at or after the floor.
    base = floor.replace(microsecond=0)
    if base == floor:
        base -= timedelta(seconds=1)

    try:
        occurrences = croniter(interval, base, second_at_beginning=True)
        occurrences.get_next(datetime)
        next_start = occurrences.get_next(datetime)
    except (ValueError, KeyError) as exc:
        logger.warning(f"Cannot compute next start for {interval!r}: {exc}")
        return None

    if stop_at is not None and next_start > stop_at:
        return None
    return next_start
