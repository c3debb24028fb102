"""Collector — records task, build and live-reload events into an EventLog.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe to call from the event loop and from build worker threads.

"""

from __future__ import annotations

from typing import Literal

from specsite.observability.events import (
    BuildEvent,
    CleanEvent,
    ReloadEvent,
    TaskEvent,
    now_ns,
)
from specsite.observability.log import EventLog


class Collector:
    """Event collector shared by the task runner, builder and dev server.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_task(
        self,
        name: str,
        state: Literal["running", "succeeded", "failed"],
        *,
        duration_ms: float = 0.0,
        error: str = "",
    ) -> None:
        """Record a task state transition."""
        self._log.append(
            TaskEvent(
                name=name,
                state=state,
                duration_ms=duration_ms,
                error=error,
                timestamp_ns=now_ns(),
            )
        )

    def record_clean(self, path: str, removed: int) -> None:
        """Record an output-directory clean."""
        self._log.append(CleanEvent(path=path, removed=removed, timestamp_ns=now_ns()))

    def record_build(
        self,
        source: str,
        target: str,
        *,
        files_written: int = 0,
        ok: bool = True,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a finished document build."""
        self._log.append(
            BuildEvent(
                source=source,
                target=target,
                files_written=files_written,
                ok=ok,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_reload(self, path: str, clients_notified: int) -> None:
        """Record a live-reload notification."""
        self._log.append(
            ReloadEvent(
                path=path,
                clients_notified=clients_notified,
                timestamp_ns=now_ns(),
            )
        )
