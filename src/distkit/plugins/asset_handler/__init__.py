"""Asset-handler plugin -- optional visual assets with graceful fallback.

Wires the three surfaces of :mod:`distkit.assets` into the build lifecycle:
virtual ``virtual:<name>`` modules, emission into the build output (together
with the public directory mirror), and reserved paths on the interactive
server.
"""

from distkit.plugins.asset_handler.plugin import AssetHandlerPlugin

__all__ = ["AssetHandlerPlugin"]
