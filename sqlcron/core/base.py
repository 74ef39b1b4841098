from datetime import datetime
from uuid import UUID
from typing import Any, Callable, TypeVar

from sqlalchemy import (
    Delete,
    Select,
    Update,
    delete,
    or_,
    select,
    update,
)

from sqlcron.models.raw_job import RawJob
from sqlcron.core.events import JOB_ERROR, TICK_COMPLETED


DecoratedCallable = TypeVar("DecoratedCallable", bound=Callable[..., Any])


class StopScheduler(BaseException):
    """Raise inside a handler to stop the scheduler that invoked it.

    The current job is still treated as handled successfully.
    """

    pass


class CronError(Exception):
    pass


class NoEligibleJob(CronError):
    """No job matched the eligibility filter during a heartbeat."""

    def __init__(self) -> None:
        super().__init__("No eligible job")


class JobFailed(CronError):
    """The handler marked the job as failed with ``job.fail()``."""

    pass


def to_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


class BaseCron:
    """This class exists for proper type hinting and dependency inversion.

    Statements shared by the synchronous and the asynchronous store live here,
    so both of them mutate jobs in exactly the same way.
    """

    DEFAULT = "default"

    TICK = TICK_COMPLETED
    ERROR = JOB_ERROR

    @staticmethod
    def _eligible_statement(now_ms: int, criteria: tuple[Any, ...]) -> Select:
        stmt = (
            select(RawJob)
            .where(
                RawJob.enabled.is_(True),
                RawJob.locked.is_(None),
                RawJob.start_at <= now_ms,
                or_(RawJob.stop_at.is_(None), RawJob.stop_at >= now_ms),
                *criteria,
            )
            .order_by(RawJob.start_at)
            .limit(1)
            .with_for_update(skip_locked=True)
        )
        return stmt

    @staticmethod
    def _lock_statement(
        job_id: UUID, now_ms: int, claim_as: str | None
    ) -> Update:
        # The "locked IS NULL" guard turns the claim into a conditional
        # update, so a concurrent claimer that read the same row updates
        # nothing on databases without row locks.
        stmt = (
            update(RawJob)
            .where(RawJob.id == job_id, RawJob.locked.is_(None))
            .values(locked=True, locked_by=claim_as, started_at=now_ms)
        )
        return stmt

    @staticmethod
    def _reschedule_statement(
        job_id: UUID, next_start: datetime, processed_at: int
    ) -> Update:
        stmt = (
            update(RawJob)
            .where(RawJob.id == job_id)
            .values(
                locked=None,
                locked_by=None,
                last_error=None,
                processed_at=processed_at,
                processed_count=RawJob.processed_count + 1,
                start_at=to_ms(next_start),
            )
        )
        return stmt

    @staticmethod
    def _retire_statement(job_id: UUID, processed_at: int) -> Update:
        stmt = (
            update(RawJob)
            .where(RawJob.id == job_id)
            .values(
                enabled=False,
                locked=None,
                locked_by=None,
                last_error=None,
                processed_at=processed_at,
                processed_count=RawJob.processed_count + 1,
            )
        )
        return stmt

    @staticmethod
    def _failed_statement(job_id: UUID, error: str) -> Update:
        stmt = (
            update(RawJob)
            .where(RawJob.id == job_id)
            .values(
                enabled=False,
                locked=None,
                locked_by=None,
                last_error=error,
            )
        )
        return stmt

    @staticmethod
    def _enable_statement(job_id: UUID, start_at: int | None) -> Update:
        values: dict[str, Any] = dict(
            enabled=True,
            locked=None,
            locked_by=None,
            last_error=None,
        )
        if start_at is not None:
            values["start_at"] = start_at
        stmt = update(RawJob).where(RawJob.id == job_id).values(**values)
        return stmt

    @staticmethod
    def _unlock_statement(job_id: UUID) -> Update:
        stmt = (
            update(RawJob)
            .where(RawJob.id == job_id, RawJob.locked.is_not(None))
            .values(locked=None, locked_by=None)
        )
        return stmt

    @staticmethod
    def _update_statement(job_id: UUID, values: dict[str, Any]) -> Update:
        return update(RawJob).where(RawJob.id == job_id).values(**values)

    @staticmethod
    def _delete_statement(job_id: UUID) -> Delete:
        return delete(RawJob).where(RawJob.id == job_id)
