"""Server layer — static dev server with live reload.

Serves the output tree over HTTP and pushes a notification to connected
browsers whenever a file in it changes.
"""

from specsite.server.broadcaster import ReloadBroadcaster, ReloadClient
from specsite.server.dev import DevServer, create_app
from specsite.server.livereload import (
    EVENTS_ENDPOINT,
    LiveReloadMiddleware,
    inject_reload_script,
)

__all__ = [
    "EVENTS_ENDPOINT",
    "DevServer",
    "LiveReloadMiddleware",
    "ReloadBroadcaster",
    "ReloadClient",
    "create_app",
    "inject_reload_script",
]
