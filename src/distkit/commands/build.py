"""Build commands -- classify the requested build and run the pipeline.

The named commands fix both signals, like the package scripts they
replace::

    distkit build app        # application, production
    distkit build app-dev    # application, development
    distkit build lib        # library, production
    distkit build lib-dev    # library, development

``distkit build run`` reads ``BUILD_TARGET`` and ``NODE_ENV`` (or
``--target``/``--env``) and classifies them. Every command accepts
``--no-compile`` to post-process output that already exists.
"""

from __future__ import annotations

from typing import Optional

import typer

from distkit.commands.common import exit_on_error, load_project
from distkit.output import success

build_app = typer.Typer(no_args_is_help=True)

_NO_COMPILE = typer.Option(
    False, "--no-compile", help="Skip the bundler and post-process existing output."
)


def _run_build(
    ctx: typer.Context,
    raw_target: Optional[str],
    raw_env: Optional[str],
    no_compile: bool,
) -> None:
    """Classify, then run the pipeline with the discovered plugins."""
    from distkit.assets.resolver import export_path
    from distkit.classifier import classify
    from distkit.pipeline import BuildPipeline
    from distkit.plugins import PluginManager

    with exit_on_error():
        selector = classify(raw_target, raw_env)
        root, config = load_project(ctx)

        manager = PluginManager()
        manager.discover(config)
        try:
            pipeline = BuildPipeline.create(
                selector,
                root,
                config,
                manager.get_hook_runner(),
                compile=not no_compile,
            )
            result = pipeline.run()
        finally:
            manager.cleanup()

    success(f"Built {selector.target} into {export_path(result.output_dir, root)}")


@build_app.command("app")
def build_application(ctx: typer.Context, no_compile: bool = _NO_COMPILE) -> None:
    """Production build of the standalone application."""
    _run_build(ctx, "app", "production", no_compile)


@build_app.command("app-dev")
def build_application_dev(ctx: typer.Context, no_compile: bool = _NO_COMPILE) -> None:
    """Development build of the standalone application."""
    _run_build(ctx, "app", "development", no_compile)


@build_app.command("lib")
def build_library(ctx: typer.Context, no_compile: bool = _NO_COMPILE) -> None:
    """Production build of the embeddable library."""
    _run_build(ctx, "lib", "production", no_compile)


@build_app.command("lib-dev")
def build_library_dev(ctx: typer.Context, no_compile: bool = _NO_COMPILE) -> None:
    """Development build of the embeddable library."""
    _run_build(ctx, "lib", "development", no_compile)


@build_app.command("run")
def build_from_signals(
    ctx: typer.Context,
    target: Optional[str] = typer.Option(
        None, "--target", envvar="BUILD_TARGET", help="Build target: 'lib' or 'app'."
    ),
    env: Optional[str] = typer.Option(
        None, "--env", envvar="NODE_ENV", help="'production' or 'development'."
    ),
    no_compile: bool = _NO_COMPILE,
) -> None:
    """Build whatever BUILD_TARGET and NODE_ENV select.

    An unset or blank target means the application; an unset or blank
    environment means development.

    Example::

        BUILD_TARGET=lib NODE_ENV=production distkit build run
    """
    _run_build(ctx, target, env, no_compile)
