"""The ``stamp`` command -- add the banner to files after the build.

Post-processing counterpart of the in-pipeline banner: use it for files the
bundler's own pipeline never shows to distkit (stylesheets extracted by a
separate step, files copied in by hand). Stamping is idempotent, so running
it over output that already carries a banner changes nothing.

Usage::

    distkit stamp                       # scripts and stylesheets in the build output
    distkit stamp dist/bundle/*.css     # explicit files
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from distkit.commands.common import exit_on_error, load_project
from distkit.output import info, success, warning

_STAMPABLE_SUFFIXES = (".js", ".mjs", ".cjs", ".css")


def _explicit_paths(files: List[Path]) -> list[Path]:
    """Check the files named on the command line.

    Raises:
        InvalidUsageError: If a named file does not exist.
    """
    from distkit.exceptions import InvalidUsageError

    paths: list[Path] = []
    for path in files:
        if not path.is_file():
            raise InvalidUsageError(f"File not found: {path}")
        if path.suffix.lower() not in _STAMPABLE_SUFFIXES:
            warning(f"Not a script or stylesheet, skipped: {path}")
            continue
        paths.append(path)
    return paths


def stamp_command(
    ctx: typer.Context,
    files: Optional[List[Path]] = typer.Argument(
        None, help="Files to stamp. Defaults to the output of the selected build."
    ),
) -> None:
    """Prepend the provenance banner to scripts and stylesheets."""
    from distkit.banner import load_metadata, stamp_files
    from distkit.classifier import classify_from_environ
    from distkit.layout import output_dir_for

    with exit_on_error():
        if files:
            paths = _explicit_paths(files)
        else:
            paths = None

        root, config = load_project(ctx)
        metadata = load_metadata(root / config.package_json)

        if paths is None:
            output_dir = output_dir_for(classify_from_environ(), config, root)
            paths = sorted(
                entry for entry in output_dir.glob("*")
                if entry.is_file() and entry.suffix.lower() in _STAMPABLE_SUFFIXES
            ) if output_dir.is_dir() else []

        if not paths:
            info("No scripts or stylesheets to stamp")
            return

        stamped = stamp_files(metadata, paths)

    success(f"Stamped {len(stamped)} of {len(paths)} file(s)")
