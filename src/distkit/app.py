"""Typer application and CLI entry point for distkit.

This module wires together the top-level Typer application and registers
the built-in commands (``build``, ``dist-copy``, ``serve``, ``stamp``,
``inspect``).

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
:class:`~distkit.exceptions.DistkitError` exits with the error's code;
any other exception is written to a crash log under the data directory.

See Also:
    :mod:`distkit.config`: Project root and configuration resolution.
    :mod:`distkit.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from distkit import __version__
from distkit.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="distkit",
    help="Build-mode resolution and artifact assembly for browser bundles.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from distkit.commands.build import build_app  # noqa: E402
from distkit.commands.dist import dist_copy_command  # noqa: E402
from distkit.commands.inspect import inspect_command  # noqa: E402
from distkit.commands.serve import serve_command  # noqa: E402
from distkit.commands.stamp import stamp_command  # noqa: E402

app.add_typer(build_app, name="build", help="Build the application or the library.")
app.command("dist-copy")(dist_copy_command)
app.command("serve")(serve_command)
app.command("stamp")(stamp_command)
app.command("inspect")(inspect_command)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"distkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    root: Optional[str] = typer.Option(
        None, "--root", help="Project root (default: $DISTKIT_ROOT or the current directory)."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Config file (default: distkit.json/.yaml in the root)."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~distkit.output.OutputManager` and the
    ``distkit`` log handler from CLI flags, and stores the root and config
    overrides in ``ctx.obj`` for the sub-commands.
    """
    from distkit.output import OutputManager, set_output, setup_logging

    output = OutputManager(no_color=no_color, quiet=quiet, verbose=verbose)
    set_output(output)
    setup_logging(output)

    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from distkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``distkit`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from distkit.exceptions import DistkitError
        from distkit.output import error

        if isinstance(exc, DistkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
