"""Provenance banners for shipped scripts and stylesheets.

The banner is a ``/*! ... */`` comment rendered from ``package.json``
metadata::

    /*!
     * widget-ui v1.2.0
     * Embeddable chat widget
     *
     * Copyright (c) 2026 Acme Corp
     * Licensed under MIT
     *
     * Built on: 2026-10-19
     */

Stamping is idempotent: an artifact whose content already starts with the
``/*!`` sentinel is left alone. The same file can therefore pass through the
in-pipeline ``generate_bundle`` hook and the ``distkit stamp``
post-processing command and still carry exactly one banner.

Byte content is decoded as UTF-8 with ``surrogateescape`` and re-encoded the
same way, so every byte after the banner survives unchanged even when the
file is not valid UTF-8.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from distkit.config import write_bytes_atomic
from distkit.exceptions import DistkitError, MetadataUnreadableError
from distkit.models import ArtifactKind, BannerMetadata, BuildSelector, OutputArtifact
from distkit.templating import render

logger = logging.getLogger(__name__)

SENTINEL = "/*!"
ENCODING = "utf-8"

_STAMPED_KINDS = (ArtifactKind.SCRIPT, ArtifactKind.STYLESHEET)
_TEXT_FIELDS = ("name", "version", "description", "license")


def needs_banner(selector: BuildSelector) -> bool:
    """Library builds always get a banner; application builds only in production."""
    return selector.is_library or selector.is_production


def _author_text(author: Any) -> Optional[str]:
    """Flatten the ``author`` field, which npm allows as a string or an object."""
    if isinstance(author, str):
        return author.strip() or None
    if isinstance(author, dict):
        name = str(author.get("name", "")).strip()
        email = str(author.get("email", "")).strip()
        if name and email:
            return f"{name} <{email}>"
        return name or email or None
    return None


def load_metadata(path: Path, build_date: Optional[date] = None) -> BannerMetadata:
    """Read banner metadata from a ``package.json`` file.

    Args:
        path: Path to the metadata file.
        build_date: Date printed in the banner; today when omitted.

    Returns:
        The immutable :class:`~distkit.models.BannerMetadata`. Fields absent
        from the file keep their placeholder defaults.

    Raises:
        MetadataUnreadableError: If the file is missing, unreadable, not
            valid JSON, or not a JSON object.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataUnreadableError(f"Failed to read {path}: {exc}") from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MetadataUnreadableError(f"Failed to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise MetadataUnreadableError(f"Failed to parse {path}: expected a JSON object")

    fields: dict[str, Any] = {}
    for key in _TEXT_FIELDS:
        value = data.get(key)
        if value is not None and str(value).strip():
            fields[key] = str(value).strip()
    author = _author_text(data.get("author"))
    if author:
        fields["author"] = author

    return BannerMetadata(**fields, build_date=build_date or date.today())


def banner_text(metadata: BannerMetadata) -> str:
    """Render the banner for *metadata*. Always starts with :data:`SENTINEL`."""
    return render(
        "banner.j2",
        name=metadata.name,
        version=metadata.version,
        description=metadata.description,
        author=metadata.author,
        license=metadata.license,
        year=metadata.build_date.year,
        build_date=metadata.build_date.isoformat(),
    )


def _prepend(banner: str, content: Union[str, bytes]) -> Union[str, bytes]:
    if isinstance(content, bytes):
        text = content.decode(ENCODING, errors="surrogateescape")
        if text.startswith(SENTINEL):
            return content
        return f"{banner}\n{text}".encode(ENCODING, errors="surrogateescape")
    if content.startswith(SENTINEL):
        return content
    return f"{banner}\n{content}"


def stamp(metadata: BannerMetadata, artifacts: Iterable[OutputArtifact]) -> None:
    """Prepend the banner to every script and stylesheet in *artifacts*, in place.

    Artifacts of any other kind, and artifacts that already start with the
    sentinel, are left untouched. The banner is rendered afresh on every
    call.
    """
    banner = banner_text(metadata)
    for artifact in artifacts:
        if artifact.kind not in _STAMPED_KINDS:
            continue
        artifact.content = _prepend(banner, artifact.content)


def stamp_files(metadata: BannerMetadata, paths: Iterable[Path]) -> list[Path]:
    """Stamp files on disk; the post-processing counterpart of :func:`stamp`.

    Each file is rewritten atomically, and only when the banner was actually
    added.

    Returns:
        The paths that received a banner.

    Raises:
        DistkitError: If a file cannot be read.
    """
    stamped: list[Path] = []
    for path in paths:
        try:
            original = path.read_bytes()
        except OSError as exc:
            raise DistkitError(f"Cannot read {path}: {exc}") from exc

        artifact = OutputArtifact(path.name, original)
        if artifact.kind not in _STAMPED_KINDS:
            logger.debug("Not a script or stylesheet, skipping banner: %s", path.name)
            continue

        stamp(metadata, [artifact])
        if artifact.content == original:
            logger.info("Banner already present in %s", path.name)
            continue

        assert isinstance(artifact.content, bytes)
        write_bytes_atomic(path, artifact.content)
        logger.info("Added banner to %s", path.name)
        stamped.append(path)
    return stamped
