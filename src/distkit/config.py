"""Project configuration with precedence resolution and atomic writes.

This module handles everything distkit reads or writes outside the build
output itself:

* **Project root** -- :func:`resolve_root` picks the directory every
  relative path is resolved against (CLI flag, then ``DISTKIT_ROOT``, then
  the current directory).
* **Project config** -- :func:`load_project_config` reads ``distkit.json``,
  ``distkit.yaml`` or ``distkit.yml`` into a
  :class:`~distkit.models.ProjectConfig`. A project without a config file
  gets the defaults.
* **Work directory** -- generated files handed to the bundler (virtual
  modules, ``bundler-options.json``) live under ``<root>/.distkit/``.
* **Data directory** -- XDG-compliant location for crash logs.

All file writes go through a temp-file-then-rename strategy
(:func:`write_text_atomic`, :func:`write_bytes_atomic`) so that a crash
mid-write never leaves a half-stamped artifact behind.
"""

from __future__ import annotations

import json
import os
import platform
import stat
import tempfile
from pathlib import Path
from typing import Any, Optional

import yaml

from distkit.exceptions import ConfigError
from distkit.models import ProjectConfig

_APP_NAME = "distkit"
_CONFIG_FILENAMES = ("distkit.json", "distkit.yaml", "distkit.yml")
WORK_DIRNAME = ".distkit"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/distkit/`` (default ``~/.local/share/distkit/``).
    On macOS/Windows: ``~/.distkit/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_work_dir(root: Path) -> Path:
    """Return ``<root>/.distkit``, creating it if necessary."""
    path = root / WORK_DIRNAME
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str | bytes) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    The replacement keeps the permission bits of an existing *path*; new
    files get ``0o644``.

    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    binary = isinstance(data, bytes)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb" if binary else "w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding=None if binary else "utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


def write_text_atomic(path: Path, data: str) -> None:
    """Atomically replace *path* with UTF-8 text."""
    _atomic_write(path, data)


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Atomically replace *path* with raw bytes."""
    _atomic_write(path, data)


def write_json_atomic(path: Path, data: Any) -> None:
    """Atomically write *data* as indented JSON with a trailing newline."""
    _atomic_write(path, json.dumps(data, indent=2) + "\n")


# --- Root and config file resolution ---


def resolve_root(cli_root: Optional[str] = None) -> Path:
    """Resolve the project root directory.

    Precedence (high to low):
        1. ``cli_root`` (the ``--root`` flag)
        2. ``DISTKIT_ROOT`` environment variable
        3. The current working directory

    Raises:
        ConfigError: If the chosen path is not an existing directory.
    """
    raw = cli_root or os.environ.get("DISTKIT_ROOT") or ""
    root = Path(raw).expanduser() if raw else Path.cwd()
    root = root.resolve()
    if not root.is_dir():
        raise ConfigError(f"Project root is not a directory: {root}")
    return root


def find_config_file(root: Path, cli_config: Optional[str] = None) -> Optional[Path]:
    """Locate the project config file.

    Precedence (high to low):
        1. ``cli_config`` (the ``--config`` flag)
        2. ``DISTKIT_CONFIG`` environment variable
        3. The first of ``distkit.json``, ``distkit.yaml``, ``distkit.yml``
           found in *root*

    Returns:
        The config file path, or ``None`` when no file is configured and
        none of the default names exists.

    Raises:
        ConfigError: If an explicitly named file does not exist.
    """
    explicit = cli_config or os.environ.get("DISTKIT_CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return path

    for filename in _CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def _parse_config_file(path: Path) -> dict[str, Any]:
    """Parse a JSON or YAML config file into a dict."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text) if text.strip() else {}
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Invalid config at {path}: expected a mapping, got {type(data).__name__}"
        )
    return data


def load_project_config(root: Path, cli_config: Optional[str] = None) -> ProjectConfig:
    """Load and validate the project configuration.

    Args:
        root: Project root used to find the default config file names.
        cli_config: Explicit config path from the ``--config`` flag.

    Returns:
        The validated :class:`~distkit.models.ProjectConfig`; defaults when
        no config file exists.

    Raises:
        ConfigError: If the file cannot be parsed or fails validation.
    """
    path = find_config_file(root, cli_config)
    if path is None:
        return ProjectConfig()
    data = _parse_config_file(path)
    try:
        return ProjectConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def resolve_project(
    cli_root: Optional[str] = None,
    cli_config: Optional[str] = None,
) -> tuple[Path, ProjectConfig]:
    """Resolve the project root and its configuration in one call.

    Returns:
        A tuple of ``(root, project_config)``.
    """
    root = resolve_root(cli_root)
    return root, load_project_config(root, cli_config)
