"""Dev server — serves the output tree with live reload.

A Starlette app serves the output directory as static files and exposes the
live-reload event stream.  uvicorn runs it on a socket the server binds
itself, so a port conflict surfaces as ``ServerError`` before any task work
starts, and port 0 yields a free ephemeral port.

Independently, the server watches the output directory: every change
becomes exactly one ``{"path": <absolute path>}`` notification to all
connected clients.
"""

from __future__ import annotations

import asyncio
import socket
import sys
from typing import TYPE_CHECKING

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import StreamingResponse
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from specsite._errors import ServerError
from specsite.server.broadcaster import ReloadBroadcaster
from specsite.server.livereload import EVENTS_ENDPOINT, LiveReloadMiddleware, event_stream
from specsite.watch.watcher import FileWatcher

if TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from specsite.config import SiteConfig
    from specsite.observability.collector import Collector
    from specsite.watch.watcher import ChangeEvent


def create_app(config: SiteConfig, broadcaster: ReloadBroadcaster) -> Starlette:
    """Build the Starlette app serving ``config.output_path``.

    The output directory is created if missing; StaticFiles refuses to serve
    from a directory that does not exist.
    """
    config.output_path.mkdir(parents=True, exist_ok=True)

    async def events(request: Request) -> StreamingResponse:
        client = broadcaster.connect()
        return StreamingResponse(
            event_stream(broadcaster, client),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    middleware = [Middleware(LiveReloadMiddleware)] if config.live_reload else []
    routes = [
        Route(EVENTS_ENDPOINT, events, name="specsite:events"),
        Mount(
            "/",
            app=StaticFiles(directory=config.output_path, html=True, check_dir=False),
            name="site",
        ),
    ]
    return Starlette(routes=routes, middleware=middleware)


class DevServer:
    """Static file server for the output tree, with live-reload notifications.

    Args:
        config: Frozen site configuration (host, port, output directory).
        broadcaster: Broadcaster for live-reload clients (created if omitted).
        collector: Optional observability collector.

    """

    def __init__(
        self,
        config: SiteConfig,
        broadcaster: ReloadBroadcaster | None = None,
        collector: Collector | None = None,
    ) -> None:
        self._config = config
        self._broadcaster = broadcaster or ReloadBroadcaster(collector)
        self._app = create_app(config, self._broadcaster)
        self._server: uvicorn.Server | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._socket: socket.socket | None = None
        self._watcher: FileWatcher | None = None

    @property
    def app(self) -> Starlette:
        return self._app

    @property
    def broadcaster(self) -> ReloadBroadcaster:
        return self._broadcaster

    @property
    def port(self) -> int:
        """The bound port (differs from the configured one when it was 0)."""
        if self._socket is None:
            return self._config.port
        return self._socket.getsockname()[1]

    @property
    def url(self) -> str:
        return f"http://{self._config.host}:{self.port}"

    @property
    def is_running(self) -> bool:
        return self._serve_task is not None and not self._serve_task.done()

    def _bind(self) -> socket.socket:
        host, port = self._config.host, self._config.port
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((host, port))
        except OSError as exc:
            sock.close()
            msg = f"Cannot bind dev server to {host}:{port}: {exc}"
            raise ServerError(msg) from exc
        sock.set_inheritable(True)
        return sock

    async def start(self) -> None:
        """Bind the port and start serving; returns once the server is listening.

        Raises:
            ServerError: If the port cannot be bound or the server stops
                during startup.

        """
        if self.is_running:
            return

        self._config.output_path.mkdir(parents=True, exist_ok=True)
        self._socket = self._bind()
        uv_config = uvicorn.Config(
            self._app,
            log_level="warning",
            lifespan="off",
            access_log=False,
            timeout_graceful_shutdown=1,
        )
        self._server = uvicorn.Server(uv_config)
        self._serve_task = asyncio.create_task(self._server.serve(sockets=[self._socket]))

        while not self._server.started:
            if self._serve_task.done():
                exc = self._serve_task.exception()
                self._close_socket()
                msg = f"Dev server stopped during startup: {exc}"
                raise ServerError(msg) from exc
            await asyncio.sleep(0.01)

    async def watch_output(self, events: AsyncIterable[ChangeEvent] | None = None) -> None:
        """Notify live-reload clients of every output change until cancelled.

        Args:
            events: Change source; defaults to a FileWatcher over the output tree.

        """
        if events is None:
            self._config.output_path.mkdir(parents=True, exist_ok=True)
            self._watcher = FileWatcher(
                self._config.root,
                self._config.output_patterns,
                debounce_ms=self._config.watch_debounce_ms,
            )
            events = self._watcher.changes()

        async for event in events:
            count = self._broadcaster.notify(event.path)
            print(
                f"  Reload: {event.path.name} ({count} client{'s' if count != 1 else ''})",
                file=sys.stderr,
            )

    async def serve_forever(self) -> None:
        """Start, then serve and watch the output tree until cancelled."""
        await self.start()
        assert self._serve_task is not None
        watch_task = asyncio.create_task(self.watch_output())
        try:
            done, _pending = await asyncio.wait(
                {self._serve_task, watch_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            for task in done:
                task.result()
        finally:
            watch_task.cancel()
            await asyncio.wait({watch_task})
            await self.stop()

    async def stop(self) -> None:
        """Ask uvicorn to exit and wait for it."""
        if self._watcher is not None:
            self._watcher.stop()
        if self._server is not None:
            self._server.should_exit = True
        if self._serve_task is not None:
            try:
                await asyncio.shield(self._serve_task)
            except asyncio.CancelledError:
                self._serve_task.cancel()
            self._serve_task = None
        self._close_socket()

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
