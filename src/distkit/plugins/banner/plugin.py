"""The ``banner`` built-in plugin."""

from __future__ import annotations

import logging

from distkit.banner import load_metadata, needs_banner, stamp
from distkit.models import OutputArtifact
from distkit.plugins.base import BuildPlugin
from distkit.plugins.hooks import BuildContext

logger = logging.getLogger(__name__)


class BannerPlugin(BuildPlugin):
    """Stamp a provenance banner on scripts and stylesheets.

    Metadata is read on ``build_start`` so an unreadable ``package.json``
    aborts the build before the bundler runs. Builds that do not need a
    banner (development application builds) never read the file.
    """

    @property
    def name(self) -> str:
        return "banner"

    @property
    def description(self) -> str:
        return "Provenance banner from package.json"

    def build_start(self, ctx: BuildContext) -> None:
        if not needs_banner(ctx.selector):
            logger.debug("No banner for %s builds", ctx.selector.target)
            return
        ctx.metadata = load_metadata(ctx.root / ctx.config.package_json)

    def generate_bundle(self, ctx: BuildContext, artifacts: list[OutputArtifact]) -> None:
        if ctx.metadata is None:
            return
        stamp(ctx.metadata, artifacts)
