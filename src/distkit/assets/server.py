"""Interactive surface: serve reserved asset paths during development.

:class:`AssetRequestHandler` answers ``GET``/``HEAD`` for the reserved paths
(``/favicon.png``, ``/logo.png`` by default) by resolving the asset afresh
on every request and streaming the file. Anything else, including a
reserved path whose asset cannot be resolved, is passed to the next handler:

* the upstream dev server when one is configured (proxied with
  :mod:`httpx`), or
* static files from the public directory.

Each request runs on its own thread (:class:`~http.server.ThreadingHTTPServer`)
and touches no shared mutable state, so no locking is needed.
"""

from __future__ import annotations

import functools
import logging
import mimetypes
import os
import shutil
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlsplit

import httpx

from distkit import __version__
from distkit.assets.resolver import resolve
from distkit.exceptions import AssetNotFoundError
from distkit.models import AssetSpec

logger = logging.getLogger(__name__)

# Headers that describe a single connection or the upstream encoding; they are
# not forwarded in either direction.
_HOP_HEADERS = frozenset({
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailers",
    "transfer-encoding",
    "upgrade",
    "host",
    "content-length",
    "content-encoding",
})


def content_type_for(path: Path) -> str:
    """Guess the response content type from the file name."""
    return mimetypes.guess_type(path.name)[0] or "application/octet-stream"


def routes_for(specs: Iterable[AssetSpec]) -> dict[str, AssetSpec]:
    """Map each asset's reserved serve path to its spec."""
    return {spec.serve_path: spec for spec in specs}


class AssetRequestHandler(SimpleHTTPRequestHandler):
    """Request handler for the reserved asset paths with pass-through.

    Args:
        routes: Reserved request path to :class:`~distkit.models.AssetSpec`.
        root: Project root for asset resolution.
        upstream: Base URL of the dev server receiving passed-through
            requests. When ``None``, static files are served from
            *directory*.
        directory: Static directory for pass-through without an upstream.
    """

    server_version = f"distkit/{__version__}"

    def __init__(
        self,
        *args: Any,
        routes: Mapping[str, AssetSpec],
        root: Path,
        upstream: Optional[str] = None,
        directory: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        # The base constructor handles the request, so state must be set first.
        self.routes = routes
        self.root = root
        self.upstream = upstream
        super().__init__(*args, directory=directory, **kwargs)

    def do_GET(self) -> None:
        if not self._serve_asset(head=False):
            self._pass_through(head=False)

    def do_HEAD(self) -> None:
        if not self._serve_asset(head=True):
            self._pass_through(head=True)

    def _serve_asset(self, head: bool) -> bool:
        """Stream the resolved asset for a reserved path.

        Returns:
            ``True`` when a response was sent, ``False`` when the request
            should go to the next handler.
        """
        spec = self.routes.get(urlsplit(self.path).path)
        if spec is None:
            return False

        try:
            resolved = resolve(spec, self.root)
        except AssetNotFoundError as exc:
            logger.debug("%s; passing %s through", exc, self.path)
            return False

        try:
            fh = open(resolved.source_path, "rb")
        except OSError as exc:
            # Removed between the existence check and the open.
            logger.debug("Cannot open %s: %s; passing through", resolved.source_path, exc)
            return False

        with fh:
            size = os.fstat(fh.fileno()).st_size
            self.send_response(200)
            self.send_header("Content-Type", content_type_for(resolved.source_path))
            self.send_header("Content-Length", str(size))
            self.send_header("Cache-Control", "no-cache")
            self.end_headers()
            if not head:
                shutil.copyfileobj(fh, self.wfile)
        return True

    def _pass_through(self, head: bool) -> None:
        if self.upstream:
            self._proxy(head)
        elif head:
            super().do_HEAD()
        else:
            super().do_GET()

    def _proxy(self, head: bool) -> None:
        """Forward the request to the upstream dev server and relay its answer."""
        assert self.upstream is not None
        url = self.upstream.rstrip("/") + self.path
        headers = {k: v for k, v in self.headers.items() if k.lower() not in _HOP_HEADERS}
        try:
            response = httpx.request(
                "HEAD" if head else "GET",
                url,
                headers=headers,
                follow_redirects=False,
                timeout=30.0,
            )
        except httpx.RequestError as exc:
            self.send_error(502, f"Upstream unavailable: {exc}")
            return

        body = response.content
        self.send_response(response.status_code)
        for key, value in response.headers.items():
            if key.lower() not in _HOP_HEADERS:
                self.send_header(key, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if not head:
            self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


def create_server(
    routes: Mapping[str, AssetSpec],
    root: Path,
    host: str = "127.0.0.1",
    port: int = 8080,
    upstream: Optional[str] = None,
    static_dir: Optional[Path] = None,
) -> ThreadingHTTPServer:
    """Create (but do not start) the interactive asset server.

    Args:
        routes: Reserved request paths, usually from :func:`routes_for`.
        root: Project root for asset resolution.
        host: Interface to bind.
        port: TCP port; ``0`` picks a free port.
        upstream: Dev server for passed-through requests.
        static_dir: Directory served for pass-through when there is no
            upstream.

    Returns:
        A :class:`~http.server.ThreadingHTTPServer`; call ``serve_forever()``
        to start it.
    """
    handler = functools.partial(
        AssetRequestHandler,
        routes=dict(routes),
        root=root,
        upstream=upstream,
        directory=str(static_dir) if static_dir is not None else str(root),
    )
    server = ThreadingHTTPServer((host, port), handler)
    server.daemon_threads = True
    return server
