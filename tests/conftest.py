"""Shared test fixtures for distkit.

Provides reusable fixtures for building throwaway project trees, selectors
for every build, managing output state, and running CLI commands. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from distkit.models import BuildMode, BuildSelector, Environment
from distkit.output import OutputFormat, OutputManager, reset_output, set_output

# 1x1 PNGs with distinct bytes, so tests can tell which file was picked.
CUSTOM_PNG = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x02\x00\x00\x00custom-favicon"
)
FALLBACK_PNG = b"\x89PNG\r\n\x1a\nfallback-bytes"

PACKAGE_JSON: dict[str, Any] = {
    "name": "widget-ui",
    "version": "1.2.0",
    "description": "Embeddable chat widget",
    "author": "Acme Corp",
    "license": "MIT",
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and log handler after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file"). Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clear_build_signals(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's own build environment out of the tests."""
    for var in ("BUILD_TARGET", "NODE_ENV", "DISTKIT_ROOT", "DISTKIT_CONFIG"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


@pytest.fixture
def app_dev() -> BuildSelector:
    return BuildSelector(mode=BuildMode.APPLICATION, environment=Environment.DEVELOPMENT)


@pytest.fixture
def app_prod() -> BuildSelector:
    return BuildSelector(mode=BuildMode.APPLICATION, environment=Environment.PRODUCTION)


@pytest.fixture
def lib_dev() -> BuildSelector:
    return BuildSelector(mode=BuildMode.LIBRARY, environment=Environment.DEVELOPMENT)


@pytest.fixture
def lib_prod() -> BuildSelector:
    return BuildSelector(mode=BuildMode.LIBRARY, environment=Environment.PRODUCTION)


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal project root with ``package.json`` and a public directory.

    Sets XDG_DATA_HOME below tmp_path so crash logs never touch the real
    user data directory, and changes the working directory to the project.

    Returns:
        The project root.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text(json.dumps(PACKAGE_JSON))
    public = root / "public"
    (public / "images").mkdir(parents=True)
    (public / "index.html").write_text("<html></html>")
    (public / "robots.txt").write_text("User-agent: *\n")
    (public / "images" / "bg.svg").write_text("<svg/>")

    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def custom_assets(project: Path) -> Path:
    """Drop a custom favicon into ``src/assets`` (the logo stays on its fallback)."""
    assets = project / "src" / "assets"
    assets.mkdir(parents=True)
    (assets / "favicon.png").write_bytes(CUSTOM_PNG)
    return assets


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
