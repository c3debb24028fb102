"""Rebuild loop — turns source changes into serialized document builds.

Source changes flow through a single-consumer channel:

    FileWatcher.changes()  ->  asyncio.Queue  ->  RebuildLoop consumer  ->  builder

With a positive quiet period, a burst of changes coalesces into one build
that starts once no new change has arrived for ``delay_ms``.  With a zero
delay every change triggers its own build.  Builds never overlap: the
consumer awaits each one, and the builder itself holds the output lock.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Protocol

from specsite._errors import SpecsiteError

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from specsite.build.builder import BuildResult
    from specsite.watch.watcher import ChangeEvent


class SupportsBuild(Protocol):
    async def build(self) -> BuildResult: ...


class RebuildLoop:
    """Consumes change events and re-runs the builder.

    Args:
        builder: Object with an async ``build()`` (usually a DocumentBuilder).
        delay_ms: Quiet period for coalescing bursts; 0 disables coalescing.
        initial_build: Build once before waiting for changes.

    """

    def __init__(
        self,
        builder: SupportsBuild,
        *,
        delay_ms: int = 100,
        initial_build: bool = False,
    ) -> None:
        self._builder = builder
        self._delay = delay_ms / 1000
        self._initial_build = initial_build
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue()
        self._builds = 0
        self._failures = 0

    @property
    def builds(self) -> int:
        """Number of builds attempted (successful or not)."""
        return self._builds

    @property
    def failures(self) -> int:
        """Number of builds that failed."""
        return self._failures

    async def run(self, events: AsyncIterable[ChangeEvent]) -> None:
        """Consume *events* until the source is exhausted or the task is cancelled."""
        producer = asyncio.create_task(self._pump(events))
        try:
            if self._initial_build:
                await self._rebuild(())
            while True:
                batch = await self._next_batch()
                if batch is None:
                    break
                await self._rebuild(batch)
        finally:
            if not producer.done():
                producer.cancel()
        # Surface watcher failures (e.g. missing watch root).
        await producer

    async def _pump(self, events: AsyncIterable[ChangeEvent]) -> None:
        try:
            async for event in events:
                self._queue.put_nowait(event)
        finally:
            self._queue.put_nowait(None)

    async def _next_batch(self) -> tuple[ChangeEvent, ...] | None:
        """Wait for the next change and, if coalescing, its whole burst.

        Returns None once the event source is exhausted and drained.
        """
        first = await self._queue.get()
        if first is None:
            return None
        batch = [first]
        if self._delay <= 0:
            return tuple(batch)

        while True:
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=self._delay)
            except TimeoutError:
                return tuple(batch)
            if event is None:
                # Re-queue the end marker so the next call stops the loop.
                self._queue.put_nowait(None)
                return tuple(batch)
            batch.append(event)

    async def _rebuild(self, batch: tuple[ChangeEvent, ...]) -> None:
        self._builds += 1
        if batch:
            names = ", ".join(sorted({e.path.name for e in batch}))
            print(f"  Changed: {names}", file=sys.stderr)
        try:
            result = await self._builder.build()
        except SpecsiteError as exc:
            self._failures += 1
            print(f"  Build failed: {exc}", file=sys.stderr)
            return
        print(
            f"  Rebuilt {result.total_files} file{'s' if result.total_files != 1 else ''}"
            f" in {result.duration_ms:.0f}ms",
            file=sys.stderr,
        )
