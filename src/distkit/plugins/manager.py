"""Plugin manager -- discovery, loading, and lifecycle management.

:class:`PluginManager` registers the built-in plugins (``asset-handler`` and
``banner``), discovers third-party plugins registered as Python entry points,
applies enable/disable filtering from the project configuration, and
provides a lazily-cached :class:`~distkit.plugins.hooks.HookRunner`.

Third-party packages register plugins by declaring an entry point under the
``distkit.plugins`` group in their ``pyproject.toml``::

    [project.entry-points."distkit.plugins"]
    license-file = "my_package.plugin:LicenseFilePlugin"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Callable, Optional

from distkit.exceptions import PluginError
from distkit.models import ProjectConfig
from distkit.plugins.asset_handler import AssetHandlerPlugin
from distkit.plugins.banner import BannerPlugin
from distkit.plugins.base import BuildPlugin
from distkit.plugins.hooks import HookRunner

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "distkit.plugins"
"""The entry-point group name used for plugin discovery."""

BUILTIN_PLUGINS: dict[str, Callable[[], BuildPlugin]] = {
    "asset-handler": AssetHandlerPlugin,
    "banner": BannerPlugin,
}
"""Plugins shipped with distkit, registered before any entry point."""


class PluginManager:
    """Discovers, loads, and manages the lifecycle of build plugins.

    The *enabled* and *disabled* lists in
    :class:`~distkit.models.PluginsConfig` act as an allowlist/blocklist for
    built-in and discovered plugins alike. When *enabled* is non-empty only
    those plugins are loaded; otherwise every plugin **not** in *disabled*
    is loaded.

    Example:
        Typical usage::

            manager = PluginManager()
            manager.discover(config)
            runner = manager.get_hook_runner()
    """

    def __init__(self) -> None:
        self._plugins: dict[str, BuildPlugin] = {}
        self._hook_runner: Optional[HookRunner] = None

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    @staticmethod
    def _allowed(name: str, config: ProjectConfig) -> bool:
        enabled = set(config.plugins.enabled)
        if enabled and name not in enabled:
            logger.debug("Plugin '%s' not in enabled list, skipping", name)
            return False
        if name in config.plugins.disabled:
            logger.debug("Plugin '%s' is disabled, skipping", name)
            return False
        return True

    def discover(self, config: ProjectConfig) -> list[str]:
        """Load the built-in plugins, then those registered as entry points.

        Args:
            config: Project configuration whose ``plugins.enabled`` and
                ``plugins.disabled`` lists control which plugins are loaded.

        Returns:
            The names of the plugins that were loaded. Entry points that fail
            to load are logged as warnings and skipped.
        """
        loaded: list[str] = []

        for name, factory in BUILTIN_PLUGINS.items():
            if self._allowed(name, config):
                self.load_plugin(name, factory(), config)
                loaded.append(name)

        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            if ep.name in self._plugins or not self._allowed(ep.name, config):
                continue
            try:
                plugin_cls = ep.load()
                plugin: BuildPlugin = plugin_cls()
                self.load_plugin(ep.name, plugin, config)
                loaded.append(ep.name)
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", ep.name, exc)

        return loaded

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_plugin(self, name: str, plugin: BuildPlugin, config: ProjectConfig) -> None:
        """Initialize *plugin* and register it under *name*.

        Raises:
            PluginError: If a plugin with the same *name* is already loaded.
        """
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already loaded")

        plugin.on_init(config)
        self._plugins[name] = plugin
        self._hook_runner = None
        logger.debug("Loaded plugin '%s' v%s", name, plugin.version)

    # ------------------------------------------------------------------
    # Querying
    # ------------------------------------------------------------------

    def get_plugin(self, name: str) -> BuildPlugin:
        """Retrieve a loaded plugin by its registered name.

        Raises:
            PluginError: If no plugin with the given *name* is loaded.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin '{name}' is not loaded") from None

    def list_plugins(self) -> list[dict[str, str]]:
        return [
            {
                "name": name,
                "version": plugin.version,
                "description": plugin.description,
            }
            for name, plugin in self._plugins.items()
        ]

    # ------------------------------------------------------------------
    # Hook runner
    # ------------------------------------------------------------------

    def get_hook_runner(self) -> HookRunner:
        """Return the :class:`~distkit.plugins.hooks.HookRunner` for all loaded plugins.

        The runner is cached and rebuilt after :meth:`load_plugin` registers
        a new plugin.
        """
        if self._hook_runner is None:
            self._hook_runner = HookRunner(list(self._plugins.values()))
        return self._hook_runner

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cleanup(self) -> None:
        """Clean up all loaded plugins and reset internal state.

        A failing ``cleanup`` is logged so that the remaining plugins still
        get to release their resources.
        """
        for name, plugin in self._plugins.items():
            try:
                plugin.cleanup()
            except Exception as exc:
                logger.warning("Error cleaning up plugin '%s': %s", name, exc)
        self._plugins.clear()
        self._hook_runner = None
