"""Pick the physical file that backs a logical asset.

Resolution is a pure function of the current filesystem and the
:class:`~distkit.models.AssetSpec`: the preferred (user-supplied) file wins
whenever it exists, otherwise the fallback is used, otherwise resolution
fails with :class:`~distkit.exceptions.AssetNotFoundError`. Nothing is
cached, so an override dropped into ``src/assets/`` mid-session is picked
up by the next resolution.

Paths prefixed with ``builtin:`` address the default-asset bundle shipped in
this package (``distkit/assets/defaults/``). The bundle is versioned by
directory (``builtin:v1/favicon.png``) so a project pinning ``v1`` keeps its
defaults when newer ones ship.
"""

from __future__ import annotations

from pathlib import Path

from distkit.exceptions import AssetNotFoundError
from distkit.models import AssetSpec, ResolvedAsset

BUILTIN_PREFIX = "builtin:"
DEFAULT_ASSETS_DIR = Path(__file__).parent / "defaults"


def locate(path: str, root: Path) -> Path:
    """Turn a configured asset path into a filesystem path.

    Args:
        path: A path relative to *root*, or ``builtin:<version>/<file>``.
        root: The project root.
    """
    if path.startswith(BUILTIN_PREFIX):
        return DEFAULT_ASSETS_DIR / path[len(BUILTIN_PREFIX):]
    return root / path


def resolve(spec: AssetSpec, root: Path) -> ResolvedAsset:
    """Resolve *spec* against the filesystem as it is right now.

    Args:
        spec: The asset to resolve.
        root: The project root that relative paths are resolved against.

    Returns:
        A :class:`~distkit.models.ResolvedAsset` naming the preferred file
        (``used_fallback=False``) or the fallback file
        (``used_fallback=True``).

    Raises:
        AssetNotFoundError: If neither file exists.
    """
    preferred = locate(spec.preferred_path, root)
    if preferred.is_file():
        return ResolvedAsset(spec.logical_name, preferred, used_fallback=False)

    fallback = locate(spec.fallback_path, root)
    if fallback.is_file():
        return ResolvedAsset(spec.logical_name, fallback, used_fallback=True)

    raise AssetNotFoundError(
        f"Neither custom nor fallback {spec.logical_name} found "
        f"(tried {spec.preferred_path} and {spec.fallback_path})",
        logical_name=spec.logical_name,
    )


def export_path(path: Path, root: Path) -> str:
    """POSIX path string for *path*: relative to *root* when inside it, absolute otherwise."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
