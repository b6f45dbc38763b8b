"""Plugin system for distkit -- discovery, loading, and build lifecycle hooks.

Key classes:

* :class:`BuildPlugin` -- Abstract base class that all plugins extend.
* :class:`PluginManager` -- Registers built-in plugins, discovers entry
  points, and manages plugin lifecycle.
* :class:`HookRunner` -- Dispatches lifecycle hooks across loaded plugins.
* :class:`BuildContext` -- Mutable dataclass carrying one build's state
  through the hook chain.

Example:
    Typical usage from a build command::

        from distkit.plugins import PluginManager

        manager = PluginManager()
        manager.discover(config)
        runner = manager.get_hook_runner()
        runner.run_build_start(ctx)
"""

from distkit.plugins.base import BuildPlugin
from distkit.plugins.hooks import BuildContext, HookRunner
from distkit.plugins.manager import PluginManager

__all__ = ["BuildPlugin", "BuildContext", "HookRunner", "PluginManager"]
