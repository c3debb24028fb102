"""Event model for build and dev-server observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Task runner events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TaskEvent:
    """A named task changed state.

    Attributes:
        name: Task name.
        state: The state the task entered.
        duration_ms: Time since the task started (0 when it starts).
        error: Error message for failed tasks, empty otherwise.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    state: Literal["running", "succeeded", "failed"]
    duration_ms: float
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Build pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CleanEvent:
    """The output directory was emptied.

    Attributes:
        path: Output directory path.
        removed: Number of top-level entries removed.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    removed: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class BuildEvent:
    """A document build finished (successfully or not).

    Attributes:
        source: Entry-point document path.
        target: Output directory path.
        files_written: Number of files copied into the output tree.
        ok: Whether the build succeeded.
        duration_ms: Time taken in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    source: str
    target: str
    files_written: int
    ok: bool
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Live reload events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReloadEvent:
    """A change notification was pushed to live-reload clients.

    Attributes:
        path: Absolute path of the changed output file.
        clients_notified: Number of clients that received the notification.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    clients_notified: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = TaskEvent | CleanEvent | BuildEvent | ReloadEvent


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
