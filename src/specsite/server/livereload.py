"""Live reload — browser script injection and the SSE event stream.

Injects a small script into HTML responses that connects the browser to
the dev server's event endpoint.  The injected script:

1. Opens an ``EventSource`` on ``/__specsite/events``
2. Reloads the page on every ``reload`` event (stylesheet-only changes
   refresh the stylesheet links instead)
3. Reconnects and reloads after the server restarts
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request

    from specsite.server.broadcaster import ReloadBroadcaster, ReloadClient

EVENTS_ENDPOINT = "/__specsite/events"

# Injected before </body>.  Native EventSource, no client library.
RELOAD_SCRIPT = """\
<script data-specsite-reload>
(function() {
  var src = new EventSource('%s');
  src.addEventListener('reload', function(e) {
    var path = '';
    try { path = JSON.parse(e.data).path || ''; } catch (x) {}
    if (/\\.css$/.test(path)) {
      document.querySelectorAll('link[rel="stylesheet"]').forEach(function(l) {
        var url = new URL(l.href);
        url.searchParams.set('_r', Date.now());
        l.href = url.toString();
      });
      return;
    }
    location.reload();
  });
  src.onerror = function() {
    src.close();
    setTimeout(function() { location.reload(); }, 2000);
  };
})();
</script>
""" % EVENTS_ENDPOINT


def inject_reload_script(html: str) -> str:
    """Insert the reload script before ``</body>`` (or ``</html>``, or append)."""
    if "</body>" in html:
        return html.replace("</body>", RELOAD_SCRIPT + "</body>", 1)
    if "</html>" in html:
        return html.replace("</html>", RELOAD_SCRIPT + "</html>", 1)
    return html + RELOAD_SCRIPT


def format_sse(payload: dict[str, Any], event: str = "reload") -> str:
    """Encode one Server-Sent Event frame."""
    return f"event: {event}\ndata: {json.dumps(payload, sort_keys=True)}\n\n"


async def event_stream(
    broadcaster: ReloadBroadcaster,
    client: ReloadClient,
) -> AsyncIterator[str]:
    """SSE frames for one client, starting with a comment that flushes headers."""
    yield ": connected\n\n"
    async for payload in broadcaster.client_stream(client):
        yield format_sse(payload)


class LiveReloadMiddleware(BaseHTTPMiddleware):
    """Starlette middleware injecting the reload script into HTML pages.

    Only ``GET`` responses with a ``text/html`` content type and status 200
    are rewritten; everything else (assets, SSE, 304s) passes through.

    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)

        if request.method != "GET" or response.status_code != 200:
            return response
        if "text/html" not in response.headers.get("content-type", ""):
            return response

        chunks = [chunk async for chunk in response.body_iterator]  # type: ignore[attr-defined]
        body = b"".join(c if isinstance(c, bytes) else c.encode("utf-8") for c in chunks)
        html = inject_reload_script(body.decode("utf-8", errors="replace"))

        headers = {
            k: v for k, v in response.headers.items()
            if k.lower() not in ("content-length", "etag")
        }
        return Response(
            content=html,
            status_code=response.status_code,
            headers=headers,
        )
