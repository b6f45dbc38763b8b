"""Lay out the options handed to the external bundler.

The bundler config reads ``.distkit/bundler-options.json`` instead of
re-deriving output names from environment variables, so the naming rules
live in one place (:mod:`distkit.naming`) and every build mode gets the same
treatment:

================  ===========================  ===========================
                  Application                  Library
================  ===========================  ===========================
out_dir           ``dist``                     ``dist/bundle`` (emptied)
format            ``es``                       ``umd`` with a global name
externals         none                         configured host modules
sourcemap         development only             development only
minify            production only              production only
================  ===========================  ===========================
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Optional

from distkit.assets.resolver import export_path
from distkit.config import write_json_atomic
from distkit.models import BuildSelector, BundlerOptions, ProjectConfig
from distkit.naming import artifact_names, bundle_name_for, name_for, umd_name_for

logger = logging.getLogger(__name__)

OPTIONS_FILENAME = "bundler-options.json"
_FALLBACK_BUNDLE_NAME = "bundle"


def read_package_info(root: Path, config: ProjectConfig) -> dict[str, Any]:
    """Best-effort read of ``package.json`` for naming purposes.

    Unlike :func:`~distkit.banner.load_metadata` this never fails: naming
    falls back to defaults when the file is missing or malformed.
    """
    path = root / config.package_json
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.debug("Cannot read %s for naming: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def resolve_bundle_name(config: ProjectConfig, package: Mapping[str, Any]) -> str:
    """Configured ``bundle_name``, else the unscoped package name, else ``"bundle"``."""
    if config.bundle_name:
        return config.bundle_name
    name = package.get("name")
    if isinstance(name, str) and name.strip():
        return bundle_name_for(name.strip())
    return _FALLBACK_BUNDLE_NAME


def output_dir_for(selector: BuildSelector, config: ProjectConfig, root: Path) -> Path:
    """``<root>/dist`` for applications, ``<root>/dist/bundle`` for libraries."""
    out_dir = root / config.output_dir
    if selector.is_library:
        out_dir = out_dir / config.bundle_dir
    return out_dir


def bundler_options(
    selector: BuildSelector,
    config: ProjectConfig,
    root: Path,
    package: Optional[Mapping[str, Any]] = None,
    aliases: Optional[Mapping[str, str]] = None,
) -> BundlerOptions:
    """Compute the :class:`~distkit.models.BundlerOptions` for one build.

    Args:
        selector: The classified build.
        config: Project configuration.
        root: Project root; ``out_dir`` is expressed relative to it.
        package: Parsed ``package.json`` (see :func:`read_package_info`).
        aliases: Virtual module id to generated file, from the asset
            resolution stage.
    """
    package = package or {}
    bundle_name = resolve_bundle_name(config, package)
    version = str(package.get("version") or "0.0.0")

    workers = {
        source: name_for(PurePosixPath(source).stem, selector)
        for source in config.workers
    }
    define = {
        "process.env.PACKAGE_VERSION": json.dumps(version),
        "process.env.BUILD_TARGET": json.dumps(selector.mode.value),
        "process.env.NODE_ENV": json.dumps(selector.environment.value),
    }

    common: dict[str, Any] = {
        "mode": selector.mode,
        "environment": selector.environment,
        "out_dir": export_path(output_dir_for(selector, config, root), root),
        "file_names": artifact_names(bundle_name, selector),
        "worker_file_names": workers,
        "sourcemap": not selector.is_production,
        "minify": selector.is_production,
        "define": define,
        "aliases": dict(aliases or {}),
    }

    if selector.is_library:
        return BundlerOptions(
            **common,
            empty_out_dir=True,
            entry=config.library_entry,
            format="umd",
            library_name=config.umd_name or umd_name_for(bundle_name),
            externals=list(config.externals),
            external_globals=dict(config.external_globals),
        )

    # Application output shares dist/ with the library bundle, which the
    # assembler still needs, so it is never emptied.
    return BundlerOptions(
        **common,
        empty_out_dir=False,
        entry=config.app_entry,
        format="es",
    )


def write_bundler_options(options: BundlerOptions, work_dir: Path) -> Path:
    """Write *options* to ``<work_dir>/bundler-options.json`` and return the path."""
    path = work_dir / OPTIONS_FILENAME
    write_json_atomic(path, options.model_dump(mode="json"))
    logger.debug("Wrote bundler options to %s", path)
    return path
