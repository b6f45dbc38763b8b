"""Built-in CLI sub-commands for distkit.

This package groups the Typer modules that form the CLI's command tree:

* :mod:`~distkit.commands.build` -- named build commands (``app``,
  ``app-dev``, ``lib``, ``lib-dev``) and ``run`` for raw signals.
* :mod:`~distkit.commands.dist` -- ``dist-copy``, the output assembler.
* :mod:`~distkit.commands.serve` -- the interactive asset server.
* :mod:`~distkit.commands.stamp` -- post-build banner stamping.
* :mod:`~distkit.commands.inspect` -- show how a build would resolve.

Each module either exports a :class:`typer.Typer` sub-application (for the
``build`` group) or a plain callback registered directly on the root app.
"""
