"""Task layer — named, composable units of work and their runner."""

from specsite.tasks.graph import Task, TaskGraph, TaskState
from specsite.tasks.registry import default_graph
from specsite.tasks.runner import TaskRun, TaskRunner

__all__ = [
    "Task",
    "TaskGraph",
    "TaskRun",
    "TaskRunner",
    "TaskState",
    "default_graph",
]
