from datetime import datetime, timezone
from uuid import uuid4, UUID
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, BigInteger, String, Uuid
from sqlalchemy.orm import mapped_column, Mapped

from .params import AddParams
from .base_sql import BaseSQL


def now_ms() -> int:
    return int(
        datetime.now(timezone.utc).timestamp() * 1000
    )  # pragma: no cover


class RawJob(BaseSQL):
    __tablename__ = "cron_jobs"
    __table_args__ = (
        Index(
            "ix_cron_jobs_eligible",
            "enabled",
            "locked",
            "start_at",
            "stop_at",
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    queue: Mapped[str] = mapped_column(String, nullable=False, index=True)
    payload: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    start_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_ms
    )
    stop_at: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    interval: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    remove_expired: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    started_at: Mapped[Optional[int]] = mapped_column(
        BigInteger, nullable=True
    )
    processed_at: Mapped[Optional[int]] = mapped_column(
        BigInteger, nullable=True
    )
    processed_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    locked: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    locked_by: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_error: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=now_ms
    )

    @staticmethod
    def from_add_params(add_params: AddParams) -> "RawJob":
        return RawJob(
            id=uuid4(),
            queue=add_params.queue,
            payload=add_params.serialized_payload,
            enabled=add_params.enabled,
            start_at=add_params.start_at_ms,
            stop_at=add_params.stop_at_ms,
            interval=add_params.interval,
            remove_expired=add_params.remove_expired,
            started_at=None,
            processed_at=None,
            processed_count=0,
            locked=None,
            locked_by=None,
            last_error=None,
            created_at=add_params.created_at_ms,
        )
