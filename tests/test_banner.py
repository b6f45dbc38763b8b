"""Tests for the banner stamper."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from distkit.banner import (
    SENTINEL,
    banner_text,
    load_metadata,
    needs_banner,
    stamp,
    stamp_files,
)
from distkit.exceptions import MetadataUnreadableError
from distkit.exit_codes import EXIT_METADATA_UNREADABLE
from distkit.models import ArtifactKind, BannerMetadata, BuildSelector, OutputArtifact


@pytest.fixture
def metadata() -> BannerMetadata:
    return BannerMetadata(
        name="widget-ui",
        version="1.2.0",
        description="Embeddable chat widget",
        author="Acme Corp",
        license="MIT",
        build_date=date(2026, 3, 14),
    )


class TestBannerText:
    def test_contains_metadata(self, metadata: BannerMetadata) -> None:
        text = banner_text(metadata)
        assert text.startswith(SENTINEL)
        assert text.rstrip().endswith("*/")
        for fragment in ("widget-ui", "v1.2.0", "Embeddable chat widget", "MIT"):
            assert fragment in text
        assert "Copyright (c) 2026 Acme Corp" in text
        assert "Built on: 2026-03-14" in text

    def test_placeholders(self) -> None:
        text = banner_text(BannerMetadata(build_date=date(2026, 1, 1)))
        assert "Unknown Package v0.0.0" in text
        assert "Unknown Author" in text
        assert "Unknown License" in text


class TestStamp:
    def test_prepends_to_scripts_and_stylesheets(self, metadata: BannerMetadata) -> None:
        script = OutputArtifact("widget-ui.min.js", "var a=1;")
        style = OutputArtifact("widget-ui.min.css", b".a{color:red}")
        stamp(metadata, [script, style])

        assert isinstance(script.content, str)
        assert script.content.startswith(SENTINEL)
        assert script.content.endswith("\nvar a=1;")
        assert isinstance(style.content, bytes)
        assert style.content.startswith(SENTINEL.encode())
        assert style.content.endswith(b"\n.a{color:red}")

    def test_other_kinds_untouched(self, metadata: BannerMetadata) -> None:
        sourcemap = OutputArtifact("widget-ui.js.map", '{"version":3}')
        image = OutputArtifact("logo.png", b"\x89PNG")
        stamp(metadata, [sourcemap, image])

        assert sourcemap.kind is ArtifactKind.OTHER
        assert sourcemap.content == '{"version":3}'
        assert image.content == b"\x89PNG"

    def test_explicit_kind_wins_over_file_name(self, metadata: BannerMetadata) -> None:
        artifact = OutputArtifact("chunk", "x", kind=ArtifactKind.SCRIPT)
        stamp(metadata, [artifact])
        assert artifact.content.startswith(SENTINEL)

    def test_idempotent(self, metadata: BannerMetadata) -> None:
        artifact = OutputArtifact("a.js", "code")
        stamp(metadata, [artifact])
        once = artifact.content
        stamp(metadata, [artifact])
        assert artifact.content == once
        assert artifact.content.count(SENTINEL) == 1

    def test_existing_banner_is_respected(self, metadata: BannerMetadata) -> None:
        artifact = OutputArtifact("a.css", "/*! third-party */\n.a{}")
        stamp(metadata, [artifact])
        assert artifact.content == "/*! third-party */\n.a{}"

    def test_non_utf8_bytes_preserved(self, metadata: BannerMetadata) -> None:
        payload = b"\xff\xfe.a{content:'\xe9'}\x00"
        artifact = OutputArtifact("a.css", payload)
        stamp(metadata, [artifact])
        assert isinstance(artifact.content, bytes)
        assert artifact.content.endswith(b"\n" + payload)
        assert artifact.content.startswith(SENTINEL.encode())


class TestNeedsBanner:
    def test_policy(
        self,
        app_dev: BuildSelector,
        app_prod: BuildSelector,
        lib_dev: BuildSelector,
        lib_prod: BuildSelector,
    ) -> None:
        assert needs_banner(lib_prod)
        assert needs_banner(lib_dev)
        assert needs_banner(app_prod)
        assert not needs_banner(app_dev)


class TestLoadMetadata:
    def test_reads_fields(self, project: Path) -> None:
        meta = load_metadata(project / "package.json", build_date=date(2026, 5, 1))
        assert meta.name == "widget-ui"
        assert meta.version == "1.2.0"
        assert meta.license == "MIT"
        assert meta.author == "Acme Corp"
        assert meta.build_date == date(2026, 5, 1)

    def test_author_object(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text(json.dumps({"author": {"name": "Ada", "email": "ada@example.com"}}))
        assert load_metadata(path).author == "Ada <ada@example.com>"

    def test_absent_fields_keep_placeholders(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{}")
        meta = load_metadata(path)
        assert meta.name == "Unknown Package"
        assert meta.build_date == date.today()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(MetadataUnreadableError) as exc_info:
            load_metadata(tmp_path / "package.json")
        assert exc_info.value.exit_code == EXIT_METADATA_UNREADABLE

    @pytest.mark.parametrize("text", ["{broken", "[1, 2]", '"name"'])
    def test_not_a_json_object(self, tmp_path: Path, text: str) -> None:
        path = tmp_path / "package.json"
        path.write_text(text)
        with pytest.raises(MetadataUnreadableError):
            load_metadata(path)


class TestStampFiles:
    def test_rewrites_only_what_changes(self, tmp_path: Path, metadata: BannerMetadata) -> None:
        script = tmp_path / "a.min.js"
        script.write_text("code")
        stamped_css = tmp_path / "a.min.css"
        stamped_css.write_text("/*! done */\n.a{}")
        sourcemap = tmp_path / "a.min.js.map"
        sourcemap.write_text("{}")

        result = stamp_files(metadata, [script, stamped_css, sourcemap])

        assert result == [script]
        assert script.read_text().startswith(SENTINEL)
        assert stamped_css.read_text() == "/*! done */\n.a{}"
        assert sourcemap.read_text() == "{}"

    def test_second_pass_changes_nothing(self, tmp_path: Path, metadata: BannerMetadata) -> None:
        script = tmp_path / "a.js"
        script.write_text("code")
        stamp_files(metadata, [script])
        first = script.read_bytes()
        assert stamp_files(metadata, [script]) == []
        assert script.read_bytes() == first
