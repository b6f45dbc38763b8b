"""End-to-end tests for ``distkit dist-copy``."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from distkit.app import app
from distkit.exit_codes import EXIT_SOURCE_MISSING

runner = CliRunner()


def _library_output(project: Path) -> Path:
    bundle = project / "dist" / "bundle"
    bundle.mkdir(parents=True)
    for name in ("widget-ui.js", "widget-ui.min.js", "widget-ui.min.css", "parser-worker.js"):
        (bundle / name).write_text(name)
    return bundle


class TestDistCopy:
    def test_default_release(self, project: Path) -> None:
        _library_output(project)
        deps = project / "src" / "dependencies"
        deps.mkdir(parents=True)
        (deps / "loader.js").write_text("loader")

        result = runner.invoke(app, ["dist-copy"])

        assert result.exit_code == 0, result.output
        release = project / "release"
        assert sorted(p.name for p in release.iterdir()) == [
            "loader.js",
            "parser-worker.js",
            "widget-ui.js",
            "widget-ui.min.css",
            "widget-ui.min.js",
        ]
        assert "Copied 5 file(s)" in result.output

    def test_optional_sources_only_warn(self, project: Path) -> None:
        _library_output(project)
        result = runner.invoke(app, ["dist-copy"])
        assert result.exit_code == 0, result.output
        assert "src/dependencies" in result.output

    def test_output_flag_and_manifest(self, project: Path, tmp_path: Path) -> None:
        _library_output(project)
        manifest_path = tmp_path / "manifest.json"

        result = runner.invoke(
            app, ["dist-copy", "--output", "out/site", "--manifest", str(manifest_path)]
        )

        assert result.exit_code == 0, result.output
        assert (project / "out" / "site" / "widget-ui.min.js").read_text() == "widget-ui.min.js"
        manifest = json.loads(manifest_path.read_text())
        statuses = {r["rule"]["label"]: r["status"] for r in manifest["records"]}
        assert statuses["library bundle"] == "copied"
        assert statuses["host-page dependencies"] == "missing"
        assert statuses["website stylesheets"] == "missing"

    def test_missing_library_output_fails_after_copying_the_rest(self, project: Path) -> None:
        styles = project / "src" / "website"
        styles.mkdir(parents=True)
        (styles / "site.css").write_text("body{}")

        result = runner.invoke(app, ["dist-copy"])

        assert result.exit_code == EXIT_SOURCE_MISSING
        assert "Mandatory source not found" in result.output
        assert (project / "release" / "site.css").exists()

    def test_bundle_directory_without_bundle_files_fails(self, project: Path) -> None:
        bundle = project / "dist" / "bundle"
        bundle.mkdir(parents=True)
        (bundle / "favicon.png").write_bytes(b"png")
        (bundle / "logo.png").write_bytes(b"png")

        result = runner.invoke(app, ["dist-copy"])

        assert result.exit_code == EXIT_SOURCE_MISSING
        assert "Mandatory source not found" in result.output
        assert not (project / "release" / "favicon.png").exists()

    def test_configured_rules(self, project: Path) -> None:
        _library_output(project)
        (project / "distkit.yaml").write_text(
            "assembly:\n"
            "  output_root: pkg\n"
            "  rules:\n"
            "    - source_root: dist/bundle\n"
            "      source_glob: '*.min.js'\n"
            "      destination_name: widget.js\n"
            "      mandatory: true\n"
        )

        result = runner.invoke(app, ["dist-copy"])

        assert result.exit_code == 0, result.output
        assert [p.name for p in (project / "pkg").iterdir()] == ["widget.js"]
