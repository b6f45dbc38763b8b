"""Build context and hook runner for the plugin lifecycle.

This module provides two core components:

* :class:`BuildContext` -- A mutable dataclass carrying the state of one
  build invocation through the hook chain. The selector is fixed when the
  context is created; later stages fill in metadata and resolved assets.
* :class:`HookRunner` -- Dispatches each lifecycle hook across all loaded
  plugins in registration order.

Two dispatch styles are used:

* *first result wins* for ``resolve_id`` and ``load``: plugins are asked in
  order and the first non-``None`` answer is returned,
* *run all* for every other hook.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from distkit.models import (
    AssetSpec,
    BannerMetadata,
    BuildSelector,
    OutputArtifact,
    ProjectConfig,
    ResolvedAsset,
)
from distkit.plugins.base import BuildPlugin

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """State of one build (or serve) invocation.

    Attributes:
        selector: The classified build; never changes during the invocation.
        root: Project root.
        config: Project configuration.
        output_dir: Directory the bundler writes to.
        work_dir: Scratch directory for generated files (``.distkit``).
        metadata: Banner metadata, set by the banner plugin when the build
            needs a banner.
        aliases: Virtual module id to generated file.
        emitted: Assets copied into the output by ``close_bundle``.
    """

    selector: BuildSelector
    root: Path
    config: ProjectConfig
    output_dir: Path
    work_dir: Path
    metadata: Optional[BannerMetadata] = None
    aliases: dict[str, str] = field(default_factory=dict)
    emitted: list[ResolvedAsset] = field(default_factory=list)


class HookRunner:
    """Executes plugin hooks across all loaded plugins in registration order.

    The runner is created by
    :meth:`~distkit.plugins.manager.PluginManager.get_hook_runner` and holds
    a snapshot of the plugin list at creation time.
    """

    def __init__(self, plugins: list[BuildPlugin]) -> None:
        self._plugins = list(plugins)

    @property
    def plugins(self) -> list[BuildPlugin]:
        return list(self._plugins)

    def run_build_start(self, ctx: BuildContext) -> None:
        for plugin in self._plugins:
            plugin.build_start(ctx)

    def resolve_id(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        """Return the first non-``None`` ``resolve_id`` answer, or ``None``."""
        for plugin in self._plugins:
            resolved = plugin.resolve_id(module_id, ctx)
            if resolved is not None:
                logger.debug("Plugin '%s' resolved %s", plugin.name, module_id)
                return resolved
        return None

    def load(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        """Return the first non-``None`` ``load`` answer, or ``None``."""
        for plugin in self._plugins:
            source = plugin.load(module_id, ctx)
            if source is not None:
                logger.debug("Plugin '%s' loaded %s", plugin.name, module_id)
                return source
        return None

    def run_generate_bundle(self, ctx: BuildContext, artifacts: list[OutputArtifact]) -> None:
        for plugin in self._plugins:
            plugin.generate_bundle(ctx, artifacts)

    def run_close_bundle(self, ctx: BuildContext) -> None:
        for plugin in self._plugins:
            plugin.close_bundle(ctx)

    def run_configure_server(self, ctx: BuildContext) -> dict[str, AssetSpec]:
        """Collect the reserved request paths from every plugin."""
        routes: dict[str, AssetSpec] = {}
        for plugin in self._plugins:
            plugin.configure_server(ctx, routes)
        return routes
