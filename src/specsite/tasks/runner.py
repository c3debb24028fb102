"""Task runner — executes tasks from a TaskGraph and tracks their state.

Failures never escape ``TaskRunner.run``: they are recorded on the
returned ``TaskRun`` and reported on stderr, the way a command-line task
runner reports a failed task and exits non-zero.
"""

from __future__ import annotations

import asyncio
import sys
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from specsite._errors import TaskError
from specsite.tasks.graph import Task, TaskGraph, TaskState

if TYPE_CHECKING:
    from specsite._types import TaskName
    from specsite.observability.collector import Collector


@dataclass(slots=True)
class TaskRun:
    """Outcome of one task invocation.

    Attributes:
        name: Task name.
        state: Current state of the invocation.
        error: The exception that failed the task, if any.
        started: ``perf_counter`` value at start (0 before start).
        finished: ``perf_counter`` value at completion (0 while running).

    """

    name: TaskName
    state: TaskState = TaskState.NOT_STARTED
    error: BaseException | None = field(default=None, compare=False)
    started: float = 0.0
    finished: float = 0.0

    @property
    def duration_ms(self) -> float:
        if not self.started:
            return 0.0
        end = self.finished or time.perf_counter()
        return (end - self.started) * 1000

    @property
    def ok(self) -> bool:
        return self.state is TaskState.SUCCEEDED


class TaskRunner:
    """Runs named tasks from a statically constructed graph.

    Args:
        graph: The task graph.
        collector: Optional observability collector for state transitions.
        verbose: Print ``Starting`` / ``Finished`` lines to stderr.

    """

    def __init__(
        self,
        graph: TaskGraph,
        collector: Collector | None = None,
        *,
        verbose: bool = True,
    ) -> None:
        self._graph = graph
        self._collector = collector
        self._verbose = verbose
        self._runs: dict[TaskName, TaskRun] = {}

    @property
    def graph(self) -> TaskGraph:
        return self._graph

    def state(self, name: TaskName) -> TaskState:
        """Last known state of *name* (``NOT_STARTED`` if never run)."""
        if name not in self._graph:
            msg = f"Unknown task {name!r}"
            raise TaskError(msg)
        run = self._runs.get(name)
        return run.state if run is not None else TaskState.NOT_STARTED

    def last_run(self, name: TaskName) -> TaskRun | None:
        return self._runs.get(name)

    async def run(self, name: TaskName) -> TaskRun:
        """Run *name* with its dependencies; never raises for task failures.

        Unknown task names produce a failed ``TaskRun`` carrying a TaskError.
        Cancellation (e.g. Ctrl-C) propagates.

        """
        try:
            task = self._graph[name]
        except Exception as exc:
            self._log(f"  {exc}")
            return TaskRun(name=name, state=TaskState.FAILED, error=exc)

        try:
            await self._execute(task)
        except Exception:
            pass  # recorded on the TaskRun by _execute
        return self._runs[name]

    async def _execute(self, task: Task) -> None:
        run = TaskRun(name=task.name, state=TaskState.RUNNING, started=time.perf_counter())
        self._runs[task.name] = run
        self._log(f"  Starting '{task.name}'...")
        if self._collector is not None:
            self._collector.record_task(task.name, "running")

        try:
            if task.parallel:
                await self._run_parallel(task)
            else:
                for dep in task.deps:
                    await self._execute(self._graph[dep])
                if task.action is not None:
                    await task.action()
        except asyncio.CancelledError:
            run.state = TaskState.FAILED
            run.finished = time.perf_counter()
            raise
        except Exception as exc:
            run.state = TaskState.FAILED
            run.error = exc
            run.finished = time.perf_counter()
            self._log(f"  '{task.name}' errored after {run.duration_ms:.0f}ms: {exc}")
            if self._collector is not None:
                self._collector.record_task(
                    task.name, "failed", duration_ms=run.duration_ms, error=str(exc),
                )
            raise

        run.state = TaskState.SUCCEEDED
        run.finished = time.perf_counter()
        self._log(f"  Finished '{task.name}' after {run.duration_ms:.0f}ms")
        if self._collector is not None:
            self._collector.record_task(task.name, "succeeded", duration_ms=run.duration_ms)

    async def _run_parallel(self, task: Task) -> None:
        """Run deps and action concurrently; the first failure cancels the rest."""
        try:
            async with asyncio.TaskGroup() as group:
                for dep in task.deps:
                    group.create_task(self._execute(self._graph[dep]))
                if task.action is not None:
                    group.create_task(task.action())
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

    def _log(self, line: str) -> None:
        if self._verbose:
            print(line, file=sys.stderr)
