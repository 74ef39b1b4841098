from dataclasses import dataclass
from datetime import datetime
from uuid import UUID
from typing import Any


@dataclass
class BaseJob:
    id: UUID
    queue: str
    payload: Any | None
    enabled: bool
    start_at: datetime
    stop_at: datetime | None
    interval: str | None
    remove_expired: bool
    started_at: datetime | None
    processed_at: datetime | None
    processed_count: int
    locked: bool | None
    locked_by: str | None
    last_error: str | None
    created_at: datetime
