"""Reload broadcaster — pushes change notifications to live-reload clients.

Every browser tab connected to the event endpoint owns a ``ReloadClient``
with its own queue.  A change in the output tree becomes one
``{"path": <absolute path>}`` payload enqueued on every client.
"""

from __future__ import annotations

import asyncio
import itertools
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from specsite.observability.collector import Collector

_client_ids = itertools.count(1)


@dataclass(frozen=True, slots=True)
class ReloadClient:
    """A connected live-reload client.

    Attributes:
        client_id: Unique identifier for this connection.
        queue: Notifications waiting to be streamed to the client.

    """

    client_id: str = field(default_factory=lambda: f"client-{next(_client_ids)}")
    queue: asyncio.Queue[dict[str, Any]] = field(
        default_factory=asyncio.Queue, compare=False, hash=False,
    )


class ReloadBroadcaster:
    """Manages live-reload clients and fans notifications out to them.

    Thread-safe: the client set is protected by a lock.

    """

    def __init__(self, collector: Collector | None = None) -> None:
        self._clients: set[ReloadClient] = set()
        self._lock = threading.Lock()
        self._collector = collector

    @property
    def client_count(self) -> int:
        """Number of connected clients."""
        with self._lock:
            return len(self._clients)

    def connect(self, client: ReloadClient | None = None) -> ReloadClient:
        """Register a client (a fresh one if none is given) and return it."""
        client = client or ReloadClient()
        with self._lock:
            self._clients.add(client)
        return client

    def disconnect(self, client: ReloadClient) -> None:
        """Remove a client.  Unknown clients are ignored."""
        with self._lock:
            self._clients.discard(client)

    def clients(self) -> frozenset[ReloadClient]:
        """Snapshot of connected clients (no lock held on return)."""
        with self._lock:
            return frozenset(self._clients)

    def notify(self, path: Path | str) -> int:
        """Push ``{"path": <absolute resolved path>}`` to every client.

        Returns:
            Number of clients notified.

        """
        resolved = str(Path(path).resolve())
        payload = {"path": resolved}
        count = 0
        for client in self.clients():
            try:
                client.queue.put_nowait(dict(payload))
                count += 1
            except asyncio.QueueFull:
                pass  # Drop if client queue is full

        if self._collector is not None:
            self._collector.record_reload(resolved, count)
        return count

    async def client_stream(self, client: ReloadClient) -> AsyncIterator[dict[str, Any]]:
        """Async generator yielding a client's notifications as they arrive.

        Catches ``CancelledError`` (client disconnect / task cancellation)
        and ``GeneratorExit`` (generator cleanup) and always disconnects
        the client on the way out.

        """
        try:
            while True:
                yield await client.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return
        finally:
            self.disconnect(client)
