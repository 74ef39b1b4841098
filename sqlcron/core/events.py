import inspect
import logging
from typing import Any, Callable


logger = logging.getLogger(__name__)

TICK_COMPLETED = "tick-completed"
JOB_ERROR = "job-error"
EVENT_NAMES = (TICK_COMPLETED, JOB_ERROR)


class Events:
    """Per-scheduler registry of lifecycle observers.

    Observers are notified synchronously, in subscription order. They can't
    influence scheduling: any exception an observer raises is logged and
    dropped.

    Examples:

        >>> def on_error(exc, job):
        ...     print(f"Job {job.id if job else None} failed: {exc}")
        >>> scheduler.events.subscribe(Cron.ERROR, on_error)
        >>> scheduler.events.unsubscribe(Cron.ERROR, on_error)
    """

    def __init__(self) -> None:
        self.observers: dict[str, list[Callable[..., Any]]] = {}

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in EVENT_NAMES:
            raise ValueError(
                f"Unknown event {event!r}, expected one of {EVENT_NAMES}"
            )
        if not callable(callback):
            raise ValueError("Callback must be callable")
        self.observers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> bool:
        """Remove a callback. Returns False if it was not subscribed."""
        callbacks = self.observers.get(event, [])
        if callback not in callbacks:
            return False
        callbacks.remove(callback)
        return True

    def emit(self, event: str, *args: Any) -> None:
        for callback in list(self.observers.get(event, [])):
            try:
                callback(*args)
            except Exception as exc:
                logger.error(
                    f"Observer {callback!r} of {event!r} failed: {exc}",
                    exc_info=exc,
                )


class AsyncEvents(Events):
    """Same as ``Events``, but coroutine callbacks are awaited."""

    async def emit(self, event: str, *args: Any) -> None:
        for callback in list(self.observers.get(event, [])):
            try:
                result = callback(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.error(
                    f"Observer {callback!r} of {event!r} failed: {exc}",
                    exc_info=exc,
                )
