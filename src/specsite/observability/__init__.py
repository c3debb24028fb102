"""Observability — a unified event model for tasks, builds and live reload.

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from the event loop and build worker threads.

Quick Start:
    >>> from specsite.observability import Collector, EventLog
    >>> log = EventLog()
    >>> collector = Collector(log)
    >>> collector.record_build("src/index.html", "docs", files_written=1)

"""

from specsite.observability.collector import Collector
from specsite.observability.events import (
    BuildEvent,
    CleanEvent,
    ReloadEvent,
    StackEvent,
    TaskEvent,
    now_ns,
)
from specsite.observability.log import EventLog

__all__ = [
    "BuildEvent",
    "CleanEvent",
    "Collector",
    "EventLog",
    "ReloadEvent",
    "StackEvent",
    "TaskEvent",
    "now_ns",
]
