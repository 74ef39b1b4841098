import json
from datetime import datetime, timezone, timedelta
from uuid import UUID
from typing import Any, Iterable

from sqlalchemy import ColumnElement

from sqlcron.core.base import BaseCron, to_ms
from sqlcron.core.schedule import validate_interval
from sqlcron.models.job import Job
from sqlcron.models.params import AddParams, ClaimParams, SchedulerParams


TIMESTAMP_FIELDS = (
    "start_at",
    "stop_at",
    "started_at",
    "processed_at",
    "created_at",
)
UPDATABLE_FIELDS = TIMESTAMP_FIELDS + (
    "queue",
    "payload",
    "enabled",
    "interval",
    "remove_expired",
    "processed_count",
    "locked",
    "locked_by",
    "last_error",
)
REQUIRED_FIELDS = (
    "queue",
    "enabled",
    "start_at",
    "remove_expired",
    "processed_count",
    "created_at",
)


def validate_queue_name(queue: str) -> None:
    if queue is not None and not isinstance(queue, str):
        raise ValueError("Queue name must be a string")


def validate_job_id(job_id: UUID) -> None:
    if not job_id or not isinstance(job_id, UUID):
        raise ValueError("Job ID must be a UUID")


def validate_claim_as(claim_as: str) -> None:
    if claim_as is not None and not isinstance(claim_as, str):
        raise ValueError("claim_as must be a string")


def parse_timestamp(value: datetime | int) -> int:
    """Convert a datetime or epoch milliseconds into epoch milliseconds."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return to_ms(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise ValueError("Timestamp must be a datetime or an integer")


def parse_delay(value: int | timedelta | None, name: str, default: int) -> int:
    """Convert a delay into milliseconds."""
    if value is None:
        return default
    if isinstance(value, timedelta):
        value = int(value.total_seconds() * 1000)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer or a timedelta")
    if value < 0:
        raise ValueError(f"{name} cannot be negative")
    return value


def serialize_payload(payload: Any) -> str | None:
    if isinstance(payload, str):
        return payload
    if payload is None:
        return None
    return json.dumps(payload)


def parse_criteria(
    criteria: ColumnElement[bool] | Iterable[ColumnElement[bool]] | None,
) -> tuple[Any, ...]:
    if criteria is None:
        return ()
    if isinstance(criteria, ColumnElement):
        return (criteria,)
    return tuple(criteria)


def parse_add_params(
    payload: Any | None = None,
    queue: str | None = None,
    start_at: datetime | int | None = None,
    delay: int | timedelta | None = None,
    stop_at: datetime | int | None = None,
    interval: str | None = None,
    remove_expired: bool = False,
    enabled: bool = True,
) -> AddParams:
    provided_payload = payload

    if isinstance(provided_payload, Job):
        queue = queue or provided_payload.queue
        payload = provided_payload.payload
        start_at = start_at or provided_payload.start_at
        stop_at = stop_at or provided_payload.stop_at
        interval = interval or provided_payload.interval
        remove_expired = remove_expired or provided_payload.remove_expired

    queue = queue or BaseCron.DEFAULT
    validate_queue_name(queue)

    if interval is not None:
        validate_interval(interval)

    now = datetime.now(timezone.utc)
    created_at_ms = to_ms(now)
    start_at_ms = created_at_ms if start_at is None else parse_timestamp(start_at)
    start_at_ms += parse_delay(delay, "delay", 0)

    stop_at_ms = None
    if stop_at is not None:
        stop_at_ms = parse_timestamp(stop_at)
        if stop_at_ms < start_at_ms:
            raise ValueError("stop_at cannot be earlier than start_at")

    return AddParams(
        queue=queue,
        serialized_payload=serialize_payload(payload),
        enabled=bool(enabled),
        start_at_ms=start_at_ms,
        stop_at_ms=stop_at_ms,
        interval=interval,
        remove_expired=bool(remove_expired),
        created_at_ms=created_at_ms,
    )


def parse_claim_params(
    *criteria: Any,
    claim_as: str | None = None,
    now: datetime | int | None = None,
) -> ClaimParams:
    validate_claim_as(claim_as)

    if now is None:
        now = datetime.now(timezone.utc)

    return ClaimParams(
        criteria=tuple(criteria),
        now_ms=parse_timestamp(now),
        claim_as=claim_as,
    )


def parse_update_values(values: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial update and convert it into column values.

    ``None`` unsets a field. Timestamps may be datetimes or epoch
    milliseconds, the payload is serialized like in ``add()``.
    """
    unknown = set(values) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown job fields: {', '.join(sorted(unknown))}")

    parsed: dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            if key in REQUIRED_FIELDS:
                raise ValueError(f"{key} cannot be unset")
            parsed[key] = None
        elif key in TIMESTAMP_FIELDS:
            parsed[key] = parse_timestamp(value)
        elif key == "payload":
            parsed[key] = serialize_payload(value)
        elif key == "interval":
            validate_interval(value)
            parsed[key] = value
        else:
            parsed[key] = value
    return parsed


def parse_scheduler_params(
    idle_delay: int | timedelta | None = None,
    next_delay: int | timedelta | None = None,
    tick_delay: int | timedelta | None = None,
    add_to_query: Any | None = None,
    name: str | None = None,
) -> SchedulerParams:
    validate_claim_as(name)

    return SchedulerParams(
        idle_delay=parse_delay(idle_delay, "idle_delay", 1000),
        next_delay=parse_delay(next_delay, "next_delay", 0),
        tick_delay=parse_delay(tick_delay, "tick_delay", 0),
        add_to_query=parse_criteria(add_to_query),
        name=name,
    )
