"""Recursively mirror a directory into the build output.

Used to copy the project's ``public/`` directory into ``dist/`` once per
build. The entry-point HTML (``index.html`` by default) is excluded because
the bundler writes its own processed copy.

Mirroring is an optional enhancement: a missing source directory is logged
and skipped, never a build failure. Only regular files and directories are
mirrored. Symbolic links and special files (FIFOs, sockets, devices) are
skipped with a debug message rather than followed.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)


def mirror(source_dir: Path, dest_dir: Path, exclude_names: Iterable[str] = ()) -> None:
    """Copy *source_dir* into *dest_dir*, preserving structure.

    Args:
        source_dir: Directory to copy from. If it does not exist the call
            is a logged no-op.
        dest_dir: Directory to copy into; created as needed. Existing
            directories are reused and existing files overwritten.
        exclude_names: File names (not paths) skipped at every depth.
    """
    if not source_dir.is_dir():
        logger.info("Public directory not found, nothing to mirror: %s", source_dir)
        return

    excluded = frozenset(exclude_names)
    dest_dir.mkdir(parents=True, exist_ok=True)
    count = _mirror_tree(source_dir, dest_dir, excluded)
    logger.info("Mirrored %d file(s): %s -> %s", count, source_dir, dest_dir)


def _mirror_tree(source_dir: Path, dest_dir: Path, excluded: frozenset[str]) -> int:
    copied = 0
    for entry in sorted(source_dir.iterdir()):
        target = dest_dir / entry.name
        if entry.is_symlink():
            logger.debug("Skipping symbolic link: %s", entry)
        elif entry.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            copied += _mirror_tree(entry, target, excluded)
        elif entry.is_file():
            if entry.name in excluded:
                logger.debug("Excluded from mirror: %s", entry)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(entry, target)
            copied += 1
        else:
            logger.debug("Skipping special file: %s", entry)
    return copied
