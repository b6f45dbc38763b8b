"""Gather the outputs of independent builds into one release directory.

The assembler runs after every producing build has finished. It never
invokes a build itself: it copies pre-existing files according to a static
table of :class:`~distkit.models.AssemblyRule` entries, so it can be re-run
safely and its only side effect is file copies into the output root.

A rule whose source directory is missing is a warning, not a failure, so a
partial release can be assembled when a build stage was skipped on purpose.
A *mandatory* rule that matches nothing counts as missing as well.
The returned :class:`~distkit.models.AssembledManifest` records what
happened for every rule; the ``dist-copy`` command turns missing
*mandatory* sources into a non-zero exit.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

import pathspec

from distkit.models import (
    AssembledManifest,
    AssemblyRecord,
    AssemblyRule,
    AssemblyStatus,
    ProjectConfig,
)

logger = logging.getLogger(__name__)

# ``{bundle}`` is the bundle file stem, ``{bundle_root}`` the library output
# directory (``dist/bundle`` by default).
DEFAULT_RULES: tuple[AssemblyRule, ...] = (
    AssemblyRule(
        source_root="src/dependencies",
        source_glob="*",
        label="host-page dependencies",
    ),
    AssemblyRule(
        source_root="{bundle_root}",
        source_glob="{bundle}.*",
        mandatory=True,
        label="library bundle",
    ),
    AssemblyRule(
        source_root="{bundle_root}",
        source_glob="*-worker.*",
        label="worker chunks",
    ),
    AssemblyRule(
        source_root="src/website",
        source_glob="*.css",
        label="website stylesheets",
    ),
)


def default_rules(bundle_name: str, bundle_root: str = "dist/bundle") -> list[AssemblyRule]:
    """Expand :data:`DEFAULT_RULES` for a concrete bundle name and library output directory."""
    return [
        rule.model_copy(
            update={
                "source_root": rule.source_root.format(bundle=bundle_name, bundle_root=bundle_root),
                "source_glob": rule.source_glob.format(bundle=bundle_name, bundle_root=bundle_root),
            }
        )
        for rule in DEFAULT_RULES
    ]


def rules_for(config: ProjectConfig, bundle_name: str) -> list[AssemblyRule]:
    """The configured assembly table, or the default table when none is configured."""
    if config.assembly.rules is not None:
        return list(config.assembly.rules)
    bundle_root = f"{config.output_dir}/{config.bundle_dir}"
    return default_rules(bundle_name, bundle_root)


def _describe(rule: AssemblyRule) -> str:
    return rule.label or f"{rule.source_root}/{rule.source_glob}"


def _apply_rule(rule: AssemblyRule, output_root: Path, root: Path) -> AssemblyRecord:
    source = root / rule.source_root
    if not source.is_dir():
        logger.warning("Source directory not found for %s: %s", _describe(rule), source)
        return AssemblyRecord(
            rule=rule,
            status=AssemblyStatus.MISSING,
            reason=f"source directory not found: {rule.source_root}",
        )

    matcher = pathspec.PathSpec.from_lines("gitignore", [rule.source_glob])
    matches = sorted(
        entry for entry in source.iterdir()
        if entry.is_file() and matcher.match_file(entry.name)
    )
    if not matches:
        reason = f"no files match {rule.source_glob}"
        if rule.mandatory:
            logger.warning("No files match %s in %s", rule.source_glob, source)
            return AssemblyRecord(rule=rule, status=AssemblyStatus.MISSING, reason=reason)
        logger.info("No files match %s in %s", rule.source_glob, source)
        return AssemblyRecord(rule=rule, status=AssemblyStatus.SKIPPED, reason=reason)

    if rule.destination_name and len(matches) > 1:
        logger.warning(
            "%d files match %s but the rule renames to %s; copying only %s",
            len(matches),
            rule.source_glob,
            rule.destination_name,
            matches[0].name,
        )
        matches = matches[:1]

    copied: list[str] = []
    for entry in matches:
        dest = output_root / (rule.destination_name or entry.name)
        shutil.copyfile(entry, dest)
        logger.info("Copied %s: %s", _describe(rule), dest.name)
        copied.append(dest.name)
    return AssemblyRecord(rule=rule, status=AssemblyStatus.COPIED, files=copied)


def assemble(rules: Iterable[AssemblyRule], output_root: Path, root: Path) -> AssembledManifest:
    """Copy the files selected by *rules* into *output_root*.

    Args:
        rules: The assembly table, applied in order. A later rule copying a
            file with the same destination name overwrites an earlier one.
        output_root: The release directory; created if missing.
        root: Project root that each rule's ``source_root`` is relative to.

    Returns:
        An :class:`~distkit.models.AssembledManifest` with one record per
        rule.
    """
    output_root.mkdir(parents=True, exist_ok=True)
    manifest = AssembledManifest(output_root=str(output_root))
    for rule in rules:
        manifest.records.append(_apply_rule(rule, output_root, root))
    logger.info(
        "Assembled %d file(s) into %s", len(manifest.copied_files), output_root
    )
    return manifest
