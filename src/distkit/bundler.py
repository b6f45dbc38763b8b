"""Adapter for the external module bundler.

The bundler is a black box: distkit runs its build command as a subprocess
in the project root and lets it write into the output directory. The
command receives the build selection three ways so that any bundler config
can pick it up:

* ``BUILD_TARGET`` and ``NODE_ENV`` -- the canonical tokens, even when the
  raw signals were blank or padded with whitespace,
* ``DISTKIT_BUNDLER_OPTIONS`` -- path of the JSON written by
  :func:`~distkit.layout.write_bundler_options`.

The subprocess runs to completion; there is no timeout or retry.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional, Sequence

from distkit.classifier import ENV_VAR, TARGET_VAR
from distkit.exceptions import BundlerError
from distkit.models import BuildSelector

logger = logging.getLogger(__name__)

OPTIONS_ENV_VAR = "DISTKIT_BUNDLER_OPTIONS"
_STDERR_TAIL_LINES = 20


def bundler_environment(
    selector: BuildSelector,
    options_path: Path,
    extra_env: Optional[Mapping[str, str]] = None,
    base_env: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """Build the environment passed to the bundler subprocess."""
    env = dict(os.environ if base_env is None else base_env)
    env.update(extra_env or {})
    env[TARGET_VAR] = selector.mode.value
    env[ENV_VAR] = selector.environment.value
    env[OPTIONS_ENV_VAR] = str(options_path)
    return env


def run_bundler(
    command: Sequence[str],
    root: Path,
    selector: BuildSelector,
    options_path: Path,
    extra_env: Optional[Mapping[str, str]] = None,
) -> None:
    """Run the bundler build command.

    Args:
        command: Argv of the build command, e.g. ``["npx", "vite", "build"]``.
        root: Working directory for the subprocess.
        selector: The classified build.
        options_path: Path of the bundler options JSON.
        extra_env: Additional environment variables from the project config.

    Raises:
        BundlerError: If the command is empty, the executable is missing, or
            the process exits non-zero.
    """
    if not command:
        raise BundlerError("No bundler command configured")

    logger.info("Running bundler: %s", " ".join(command))
    try:
        result = subprocess.run(
            list(command),
            cwd=str(root),
            env=bundler_environment(selector, options_path, extra_env),
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise BundlerError(f"Bundler executable not found: {command[0]}") from exc

    for line in (result.stdout or "").splitlines():
        logger.debug("[bundler] %s", line)

    if result.returncode != 0:
        tail = (result.stderr or "").strip().splitlines()[-_STDERR_TAIL_LINES:]
        details = "\n".join(f"  {line}" for line in tail)
        message = f"Bundler failed with exit code {result.returncode}"
        raise BundlerError(f"{message}:\n{details}" if details else message)
