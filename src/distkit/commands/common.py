"""Helpers shared by the CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer

from distkit.exceptions import DistkitError
from distkit.models import ProjectConfig
from distkit.output import error


def load_project(ctx: typer.Context) -> tuple[Path, ProjectConfig]:
    """Resolve the project root and configuration from the root options."""
    from distkit.config import resolve_project

    obj = ctx.obj or {}
    return resolve_project(cli_root=obj.get("root"), cli_config=obj.get("config"))


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`~distkit.exceptions.DistkitError` and exit with its code."""
    try:
        yield
    except DistkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
