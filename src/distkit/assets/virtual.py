"""Virtual-import surface of the asset resolver.

UI code imports ``virtual:favicon`` or ``virtual:logo`` without knowing
whether the project ships a custom file. Before the bundler resolves
imports, distkit generates one tiny module per asset whose sole default
export is the resolved path string (not the file bytes)::

    export default "src/assets/favicon.png";

The modules are written under ``<root>/.distkit/virtual/`` and the bundler
receives an alias map from each reserved id to its generated file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from distkit.assets.resolver import export_path, resolve
from distkit.config import write_text_atomic
from distkit.exceptions import AssetNotFoundError
from distkit.models import AssetSpec
from distkit.templating import render

logger = logging.getLogger(__name__)

VIRTUAL_DIRNAME = "virtual"


def find_spec(module_id: str, specs: Iterable[AssetSpec]) -> Optional[AssetSpec]:
    """Return the asset whose reserved id is *module_id*, if any."""
    for spec in specs:
        if spec.virtual_id == module_id:
            return spec
    return None


def resolve_id(module_id: str, specs: Iterable[AssetSpec]) -> Optional[str]:
    """Claim *module_id* when it is a reserved asset id, mirroring a bundler ``resolveId`` hook."""
    return module_id if find_spec(module_id, specs) is not None else None


def load_module(module_id: str, specs: Iterable[AssetSpec], root: Path) -> Optional[str]:
    """Generate the module source for a reserved asset id.

    Resolution runs afresh on every call. When neither the preferred nor the
    fallback file exists, the module still exports the declared fallback
    path so the import never breaks the build; a warning is logged.

    Args:
        module_id: The id passed to the bundler's ``load`` hook.
        specs: Configured assets.
        root: Project root.

    Returns:
        JavaScript module source, or ``None`` if *module_id* is not reserved.
    """
    spec = find_spec(module_id, specs)
    if spec is None:
        return None

    try:
        resolved = resolve(spec, root)
    except AssetNotFoundError as exc:
        logger.warning("%s; exporting the declared fallback path", exc)
        path = spec.fallback_path
    else:
        path = export_path(resolved.source_path, root)
        if resolved.used_fallback:
            logger.info("Custom %s not found, using fallback: %s", spec.logical_name, path)
        else:
            logger.info("Using custom %s: %s", spec.logical_name, path)

    return render("virtual_module.js.j2", module_id=module_id, path=path)


def module_file_for(spec: AssetSpec, work_dir: Path) -> Path:
    """Where the generated module for *spec* is written."""
    return work_dir / VIRTUAL_DIRNAME / f"{spec.logical_name}.js"


def write_virtual_module(spec: AssetSpec, source: str, work_dir: Path) -> Path:
    """Write *source* as the generated module for *spec* and return its path."""
    path = module_file_for(spec, work_dir)
    write_text_atomic(path, source + "\n")
    logger.debug("Wrote virtual module %s -> %s", spec.virtual_id, path)
    return path
