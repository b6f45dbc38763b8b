"""The ``asset-handler`` built-in plugin."""

from __future__ import annotations

import logging
from typing import Optional

from distkit.assets import emit_assets
from distkit.assets import virtual
from distkit.assets.server import routes_for
from distkit.mirror import mirror
from distkit.models import AssetSpec
from distkit.plugins.base import BuildPlugin
from distkit.plugins.hooks import BuildContext

logger = logging.getLogger(__name__)


class AssetHandlerPlugin(BuildPlugin):
    """Resolve the configured assets on every surface of the build.

    * ``resolve_id``/``load`` claim ``virtual:<logical_name>`` ids and
      generate a module exporting the resolved path.
    * ``close_bundle`` copies each resolved asset into the output directory,
      then mirrors the public directory into it.
    * ``configure_server`` reserves ``/<output_name>`` for each asset.

    Neither missing assets nor copy failures fail the build.
    """

    @property
    def name(self) -> str:
        return "asset-handler"

    @property
    def description(self) -> str:
        return "Custom favicon and logo with built-in fallbacks"

    def resolve_id(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        return virtual.resolve_id(module_id, ctx.config.assets)

    def load(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        return virtual.load_module(module_id, ctx.config.assets, ctx.root)

    def close_bundle(self, ctx: BuildContext) -> None:
        ctx.emitted = emit_assets(ctx.config.assets, ctx.root, ctx.output_dir)

        public_dir = ctx.root / ctx.config.public_dir
        try:
            mirror(public_dir, ctx.output_dir, ctx.config.mirror_exclude)
        except OSError as exc:
            logger.error("Error copying public directory %s: %s", public_dir, exc)

    def configure_server(self, ctx: BuildContext, routes: dict[str, AssetSpec]) -> None:
        reserved = routes_for(ctx.config.assets)
        for path in reserved:
            logger.debug("Reserving %s for the %s asset", path, reserved[path].logical_name)
        routes.update(reserved)
