"""The ``serve`` command -- interactive asset server.

Serves the reserved asset paths (``/favicon.png``, ``/logo.png`` by default)
straight from the project, resolving the asset afresh on each request so a
file dropped into ``src/assets/`` shows up on the next reload. Every other
request goes to the upstream dev server (``--upstream``) or, without one, to
the public directory.
"""

from __future__ import annotations

from typing import Optional

import typer

from distkit.commands.common import exit_on_error, load_project
from distkit.output import info


def serve_command(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="TCP port."),
    upstream: Optional[str] = typer.Option(
        None, "--upstream", help="Dev server URL for everything that is not a reserved asset."
    ),
) -> None:
    """Serve reserved asset paths with fallback during development."""
    from distkit.assets.server import create_server
    from distkit.classifier import classify_from_environ
    from distkit.config import get_work_dir
    from distkit.layout import output_dir_for
    from distkit.plugins import BuildContext, PluginManager

    with exit_on_error():
        selector = classify_from_environ()
        root, config = load_project(ctx)

        manager = PluginManager()
        manager.discover(config)
        build_ctx = BuildContext(
            selector=selector,
            root=root,
            config=config,
            output_dir=output_dir_for(selector, config, root),
            work_dir=get_work_dir(root),
        )
        routes = manager.get_hook_runner().run_configure_server(build_ctx)

        server = create_server(
            routes,
            root,
            host=host or config.server.host,
            port=port if port is not None else config.server.port,
            upstream=upstream or config.server.upstream,
            static_dir=root / config.public_dir,
        )

    bound_host, bound_port = server.server_address[:2]
    info(f"Serving {', '.join(sorted(routes)) or 'no reserved paths'} on http://{bound_host}:{bound_port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        info("Stopping server")
    finally:
        server.server_close()
        manager.cleanup()
