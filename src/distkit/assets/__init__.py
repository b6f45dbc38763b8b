"""Asset resolution with graceful fallback.

One resolution algorithm (:func:`~distkit.assets.resolver.resolve`) backs
three consumption surfaces:

* :mod:`~distkit.assets.virtual` -- generated ``virtual:<name>`` modules
  exporting the resolved path,
* :mod:`~distkit.assets.emitter` -- copying the resolved file into the build
  output,
* :mod:`~distkit.assets.server` -- streaming the resolved file from the
  interactive dev server.
"""

from distkit.assets.emitter import emit_asset, emit_assets
from distkit.assets.resolver import BUILTIN_PREFIX, DEFAULT_ASSETS_DIR, locate, resolve

__all__ = [
    "BUILTIN_PREFIX",
    "DEFAULT_ASSETS_DIR",
    "emit_asset",
    "emit_assets",
    "locate",
    "resolve",
]
