from .core_sync import Cron, Scheduler
from .core_async import AsyncCron, AsyncScheduler
from .base import StopScheduler, CronError, NoEligibleJob, JobFailed
from .events import Events, AsyncEvents
from .schedule import get_next_start, validate_interval


__all__ = [
    "Cron",
    "Scheduler",
    "AsyncCron",
    "AsyncScheduler",
    "StopScheduler",
    "CronError",
    "NoEligibleJob",
    "JobFailed",
    "Events",
    "AsyncEvents",
    "get_next_start",
    "validate_interval",
]
