"""Tests for the interactive asset server.

The server runs on an ephemeral port in a background thread and is driven
with httpx, the same client the server uses for pass-through.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Iterator, Optional

import httpx
import pytest

from distkit.assets.server import content_type_for, create_server, routes_for
from distkit.models import AssetSpec, default_assets


def _start(root: Path, upstream: Optional[str] = None, static_dir: Optional[Path] = None):
    server = create_server(
        routes_for(default_assets()),
        root,
        host="127.0.0.1",
        port=0,
        upstream=upstream,
        static_dir=static_dir,
    )
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    return server, f"http://{host}:{port}"


@pytest.fixture
def served(project: Path) -> Iterator[str]:
    server, base = _start(project, static_dir=project / "public")
    yield base
    server.shutdown()
    server.server_close()


class TestRoutes:
    def test_reserved_paths(self) -> None:
        assert sorted(routes_for(default_assets())) == ["/favicon.png", "/logo.png"]

    def test_content_type(self) -> None:
        assert content_type_for(Path("a.png")) == "image/png"
        assert content_type_for(Path("a.unknownext")) == "application/octet-stream"


class TestAssetRequests:
    def test_fallback_served(self, served: str) -> None:
        response = httpx.get(f"{served}/logo.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content.startswith(b"\x89PNG")
        assert response.headers["cache-control"] == "no-cache"

    def test_override_picked_up_without_restart(self, served: str, project: Path) -> None:
        first = httpx.get(f"{served}/favicon.png").content

        assets = project / "src" / "assets"
        assets.mkdir(parents=True)
        (assets / "favicon.png").write_bytes(b"\x89PNG custom")

        second = httpx.get(f"{served}/favicon.png").content
        assert second == b"\x89PNG custom"
        assert first != second

    def test_query_string_ignored(self, served: str) -> None:
        assert httpx.get(f"{served}/logo.png?v=3").status_code == 200

    def test_head(self, served: str) -> None:
        response = httpx.head(f"{served}/logo.png")
        assert response.status_code == 200
        assert int(response.headers["content-length"]) > 0
        assert response.content == b""

    def test_concurrent_requests(self, served: str) -> None:
        results: list[int] = []

        def fetch() -> None:
            results.append(httpx.get(f"{served}/favicon.png").status_code)

        threads = [threading.Thread(target=fetch) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == [200] * 8


class TestPassThrough:
    def test_static_files(self, served: str) -> None:
        response = httpx.get(f"{served}/robots.txt")
        assert response.status_code == 200
        assert response.text == "User-agent: *\n"

    def test_unknown_path_404(self, served: str) -> None:
        assert httpx.get(f"{served}/nope.js").status_code == 404

    def test_unresolvable_asset_passes_through(self, project: Path) -> None:
        spec = AssetSpec(
            logical_name="favicon",
            preferred_path="a.png",
            fallback_path="b.png",
            output_name="favicon.png",
        )
        (project / "public" / "favicon.png").write_bytes(b"from public")
        server = create_server(
            routes_for([spec]), project, port=0, static_dir=project / "public"
        )
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            host, port = server.server_address[:2]
            response = httpx.get(f"http://{host}:{port}/favicon.png")
            assert response.content == b"from public"
        finally:
            server.shutdown()
            server.server_close()

    def test_proxied_to_upstream(self, project: Path, tmp_path: Path) -> None:
        upstream_root = tmp_path / "upstream"
        upstream_root.mkdir()
        (upstream_root / "main.js").write_text("console.log('dev server')")
        upstream, upstream_base = _start(upstream_root, static_dir=upstream_root)
        server, base = _start(project, upstream=upstream_base)
        try:
            response = httpx.get(f"{base}/main.js")
            assert response.status_code == 200
            assert response.text == "console.log('dev server')"
            # Reserved paths are still answered locally.
            assert httpx.get(f"{base}/logo.png").content.startswith(b"\x89PNG")
        finally:
            for s in (server, upstream):
                s.shutdown()
                s.server_close()

    def test_upstream_down_is_502(self, project: Path) -> None:
        server, base = _start(project, upstream="http://127.0.0.1:9")
        try:
            assert httpx.get(f"{base}/main.js").status_code == 502
        finally:
            server.shutdown()
            server.server_close()
