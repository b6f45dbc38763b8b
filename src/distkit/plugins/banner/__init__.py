"""Banner plugin -- stamp provenance banners on shipped scripts and stylesheets."""

from distkit.plugins.banner.plugin import BannerPlugin

__all__ = ["BannerPlugin"]
