from dataclasses import dataclass
from typing import Any


@dataclass
class AddParams:
    queue: str
    serialized_payload: str | None
    enabled: bool
    start_at_ms: int
    stop_at_ms: int | None
    interval: str | None
    remove_expired: bool
    created_at_ms: int


@dataclass
class ClaimParams:
    criteria: tuple[Any, ...]
    now_ms: int
    claim_as: str | None


@dataclass
class SchedulerParams:
    idle_delay: int
    next_delay: int
    tick_delay: int
    add_to_query: tuple[Any, ...]
    name: str | None
