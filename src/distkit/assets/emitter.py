"""Emission surface: copy each resolved asset into the build output."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, Optional

from distkit.assets.resolver import export_path, resolve
from distkit.exceptions import AssetNotFoundError
from distkit.models import AssetSpec, ResolvedAsset

logger = logging.getLogger(__name__)


def emit_asset(spec: AssetSpec, root: Path, output_dir: Path) -> Optional[ResolvedAsset]:
    """Copy the resolved file for *spec* to ``output_dir/<output_name>``.

    An existing file of that name is overwritten. A missing asset or a
    failed copy is logged and the asset is omitted; neither fails the build.

    Returns:
        The :class:`~distkit.models.ResolvedAsset` that was written, or
        ``None`` when the asset was omitted.
    """
    try:
        resolved = resolve(spec, root)
    except AssetNotFoundError as exc:
        logger.warning("%s; %s omitted from output", exc, spec.output_name)
        return None

    dest = output_dir / spec.output_name
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(resolved.source_path, dest)
    except OSError as exc:
        logger.error("Error copying %s: %s", spec.logical_name, exc)
        return None

    source = export_path(resolved.source_path, root)
    target = export_path(dest, root)
    if resolved.used_fallback:
        logger.info("Copied fallback %s: %s -> %s", spec.logical_name, source, target)
    else:
        logger.info("Copied custom %s: %s -> %s", spec.logical_name, source, target)
    return resolved


def emit_assets(specs: Iterable[AssetSpec], root: Path, output_dir: Path) -> list[ResolvedAsset]:
    """Emit every asset in *specs*; returns the ones actually written."""
    written: list[ResolvedAsset] = []
    for spec in specs:
        resolved = emit_asset(spec, root, output_dir)
        if resolved is not None:
            written.append(resolved)
    return written
