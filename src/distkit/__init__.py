"""distkit -- build-mode resolution and artifact assembly for browser widgets.

This package turns one web source tree into either a standalone browser
application or an embeddable UMD library, in development and production
variants. The module bundler itself is an external black box; distkit owns
everything around it:

* classifying the requested build from the ``BUILD_TARGET`` and
  ``NODE_ENV`` signals,
* resolving user-overridable assets (favicon, logo) with a bundled fallback,
* stamping shipped scripts and stylesheets with a provenance banner,
* mirroring the public directory into the output, and
* assembling the outputs of separate builds into one release directory.

Typical workflow::

    distkit build lib          # UMD library, production
    distkit build app-dev      # standalone app, development
    distkit dist-copy          # gather outputs into ./release

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models and dataclasses shared across the package.
    config: Project configuration loading and precedence resolution.
    classifier: Raw build signals to :class:`~distkit.models.BuildSelector`.
    pipeline: The ordered build stages driven by the plugin hooks.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.3.1"
