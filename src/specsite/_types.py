"""Shared type definitions for specsite."""

from collections.abc import Awaitable, Callable
from typing import Literal

# Asset inclusion mode understood by the renderer
type AssetsMode = Literal["none", "inline", "external"]

# Filesystem change kinds reported by the watchers
type ChangeKind = Literal["created", "modified", "deleted"]

# Registered task name (e.g., "build", "start")
type TaskName = str

# Live-reload client identifier
type ClientID = str

# Zero-argument coroutine function run by a task
type TaskAction = Callable[[], Awaitable[object]]
