"""Task graph — an explicit, statically constructed table of named tasks.

A task has an optional action (a zero-argument coroutine function) and a
list of dependencies.  Serial tasks run their dependencies in declared
order before their own action; parallel tasks run dependencies and action
concurrently.  A task with no action and one dependency is an alias.

The graph is validated on construction: names are unique, every dependency
exists, and there are no cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from specsite._errors import TaskError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from specsite._types import TaskAction, TaskName


class TaskState(StrEnum):
    """Lifecycle state of a task invocation."""

    NOT_STARTED = "not started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Task:
    """A named unit of work.

    Attributes:
        name: Unique task name.
        action: Coroutine function run after (or alongside) the dependencies.
        deps: Names of tasks this task composes.
        parallel: Run deps and action concurrently instead of in order.
        description: One-line help text.

    """

    name: TaskName
    action: TaskAction | None = None
    deps: tuple[TaskName, ...] = ()
    parallel: bool = False
    description: str = ""

    @property
    def is_alias(self) -> bool:
        return self.action is None and len(self.deps) == 1


class TaskGraph:
    """Directed acyclic graph of tasks, keyed by name."""

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks: dict[TaskName, Task] = {}
        for task in tasks:
            if task.name in self._tasks:
                msg = f"Duplicate task name: {task.name!r}"
                raise TaskError(msg)
            self._tasks[task.name] = task
        self._validate()

    def _validate(self) -> None:
        for task in self._tasks.values():
            for dep in task.deps:
                if dep not in self._tasks:
                    msg = f"Task {task.name!r} depends on unknown task {dep!r}"
                    raise TaskError(msg)
            if task.action is None and not task.deps:
                msg = f"Task {task.name!r} has neither an action nor dependencies"
                raise TaskError(msg)
        for name in self._tasks:
            self.order(name)

    def __getitem__(self, name: TaskName) -> Task:
        try:
            return self._tasks[name]
        except KeyError:
            known = ", ".join(sorted(self._tasks))
            msg = f"Unknown task {name!r} (known tasks: {known})"
            raise TaskError(msg) from None

    def __contains__(self, name: object) -> bool:
        return name in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def names(self) -> tuple[TaskName, ...]:
        return tuple(self._tasks)

    def order(self, name: TaskName) -> tuple[TaskName, ...]:
        """Dependency-first ordering of *name* and everything it composes.

        Raises:
            TaskError: If the task is unknown or part of a cycle.

        """
        ordered: list[TaskName] = []
        visiting: list[TaskName] = []

        def visit(current: TaskName) -> None:
            if current in ordered:
                return
            if current in visiting:
                cycle = " -> ".join([*visiting[visiting.index(current):], current])
                msg = f"Task dependency cycle: {cycle}"
                raise TaskError(msg)
            visiting.append(current)
            for dep in self[current].deps:
                visit(dep)
            visiting.pop()
            ordered.append(current)

        visit(name)
        return tuple(ordered)
