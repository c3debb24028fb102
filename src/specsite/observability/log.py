"""Event log — bounded, thread-safe store of task, build and reload events.

Builds run in worker threads while the task runner and the dev server
record from the event loop, so every access goes through one lock.
"""

import threading
from collections import Counter, deque
from collections.abc import Iterable
from typing import Any

from specsite.observability.events import BuildEvent, StackEvent, TaskEvent


def _subject(event: StackEvent) -> str:
    """The path or name an event is about, for substring filtering."""
    if isinstance(event, TaskEvent):
        return event.name
    if isinstance(event, BuildEvent):
        return event.source
    return event.path


def _is_failure(event: StackEvent) -> bool:
    if isinstance(event, TaskEvent):
        return event.state == "failed"
    if isinstance(event, BuildEvent):
        return not event.ok
    return False


class EventLog:
    """Ring buffer of recent events; the oldest are dropped once full.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 10_000) -> None:
        self._max_events = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        with self._lock:
            self._events.append(event)

    def append_many(self, events: Iterable[StackEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def _snapshot(self) -> list[StackEvent]:
        with self._lock:
            return list(self._events)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        path: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Return matching events, newest first.

        Args:
            event_type: Keep only instances of this event class.
            since_ns: Keep only events stamped at or after this time.
            path: Keep only events whose path, build source or task name
                contains this substring.
            limit: Maximum number of events returned.

        """
        matched: list[StackEvent] = []
        for event in reversed(self._snapshot()):
            if len(matched) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if path is not None and path not in _subject(event):
                continue
            matched.append(event)
        return matched

    def failures(self) -> list[TaskEvent | BuildEvent]:
        """Failed task transitions and failed builds, oldest first."""
        return [event for event in self._snapshot() if _is_failure(event)]  # type: ignore[misc]

    def last_build(self) -> BuildEvent | None:
        """The most recent build event, successful or not."""
        for event in reversed(self._snapshot()):
            if isinstance(event, BuildEvent):
                return event
        return None

    def recent(self, n: int = 20) -> list[StackEvent]:
        """The *n* most recent events, oldest first."""
        return self._snapshot()[-n:]

    def clear(self) -> int:
        """Drop every event; returns how many were dropped."""
        with self._lock:
            dropped = len(self._events)
            self._events.clear()
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        events = self._snapshot()
        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": dict(Counter(type(event).__name__ for event in events)),
            "failures": sum(1 for event in events if _is_failure(event)),
        }
