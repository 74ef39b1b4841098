from .core import (
    Cron,
    AsyncCron,
    Scheduler,
    AsyncScheduler,
    StopScheduler,
    CronError,
    NoEligibleJob,
    JobFailed,
    get_next_start,
)
from .models import Job, RawJob


__all__ = [
    "Cron",
    "AsyncCron",
    "Scheduler",
    "AsyncScheduler",
    "StopScheduler",
    "CronError",
    "NoEligibleJob",
    "JobFailed",
    "get_next_start",
    "Job",
    "RawJob",
]
