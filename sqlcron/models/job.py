import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, timedelta
from uuid import uuid4, UUID
from typing import Any

from .base_job import BaseJob
from .raw_job import RawJob


logger = logging.getLogger(__name__)


def _from_ms(value: int | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, timezone.utc)


@dataclass
class Job(BaseJob):
    id: UUID = field(default_factory=uuid4)
    """The unique identifier for the job.

    Generated on the client side as a random UUID4, so that rows created by
    independent processes never collide and can be moved between databases.
    """
    queue: str = field(default="default")
    """The kind of record this job represents.

    Schedulers can restrict themselves to one or more kinds by passing
    ``RawJob.queue == "..."`` in ``add_to_query``.
    """
    payload: Any | None = field(default=None)
    """The payload of the job."""
    enabled: bool = field(default=True)
    """Master on/off switch.

    Only enabled jobs are ever claimed. A job is disabled automatically once
    a one-shot job has been handled, or when its handler fails. Disabled jobs
    stay disabled until they are explicitly re-enabled.
    """
    start_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    """The earliest moment the job may be claimed.

    After each successful run of a recurring job this is moved forward to the
    next occurrence of ``interval``.

    Represented as a datetime object in UTC. In database, this is stored as
    a Unix epoch timestamp in milliseconds in UTC timezone.
    """
    stop_at: datetime | None = field(default=None)
    """The last moment the job may be claimed. None means unbounded."""
    interval: str | None = field(default=None)
    """Six-field cron expression, seconds first, e.g. ``*/5 * * * * *``.

    Jobs without an interval are one-shot jobs: they run once and then get
    disabled (or deleted, when ``remove_expired`` is set).
    """
    remove_expired: bool = field(default=False)
    """Delete the job once it has no further occurrence."""
    started_at: datetime | None = field(default=None)
    """The time of the latest successful claim."""
    processed_at: datetime | None = field(default=None)
    """The time when handling of the job last completed."""
    processed_count: int = field(default=0)
    """The number of successful handler invocations."""
    locked: bool | None = field(default=None)
    """Set while some scheduler instance is processing the job."""
    locked_by: str | None = field(default=None)
    """The name of the scheduler that holds the lock, if it has one."""
    last_error: str | None = field(default=None)
    """The error message of the latest failed handler invocation."""
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    """The time when the job was inserted."""
    _failed: bool = field(default=False)

    @property
    def processing(self) -> bool:
        """True if the latest claim has not been followed by a completion."""
        if self.started_at is None:
            return False
        return self.processed_at is None or self.processed_at < self.started_at

    @property
    def process_duration(self) -> timedelta | None:
        """How long the latest completed run took."""
        if self.started_at is None or self.processed_at is None:
            return None
        if self.processed_at < self.started_at:
            return None
        return self.processed_at - self.started_at

    @staticmethod
    def from_raw_job(raw_job: RawJob) -> "Job":
        payload = Job.deserialize_payload(raw_job.payload)

        job = Job(
            id=raw_job.id,
            queue=raw_job.queue,
            payload=payload,
            enabled=raw_job.enabled,
            start_at=_from_ms(raw_job.start_at),
            stop_at=_from_ms(raw_job.stop_at),
            interval=raw_job.interval,
            remove_expired=bool(raw_job.remove_expired),
            started_at=_from_ms(raw_job.started_at),
            processed_at=_from_ms(raw_job.processed_at),
            processed_count=raw_job.processed_count,
            locked=raw_job.locked,
            locked_by=raw_job.locked_by,
            last_error=raw_job.last_error,
            created_at=_from_ms(raw_job.created_at),
        )

        return job

    def fail(self, exception: str | Exception | None = None) -> None:
        """Fail the job without raising an exception.

        The scheduler treats a job marked this way exactly like a job whose
        handler raised: the error message is stored in ``last_error`` and
        the job is disabled.

        Warning: This method should be called inside a scheduler handler
        only.

        Args:
            exception (str | Exception | None): The reason of the failure.
                Its string representation becomes the error message.
        """
        self._failed = True
        if exception:
            self.last_error = str(exception)

    @staticmethod
    def deserialize_payload(serialized_payload: str | None) -> Any | None:
        if not serialized_payload:
            return None

        try:
            return json.loads(serialized_payload)
        except json.JSONDecodeError:
            logger.debug(
                f"Failed to deserialize payload using JSON: {serialized_payload}"
            )
            return serialized_payload
