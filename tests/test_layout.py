"""Tests for bundler option layout."""

from __future__ import annotations

import json
from pathlib import Path

from distkit.layout import (
    bundler_options,
    output_dir_for,
    read_package_info,
    resolve_bundle_name,
    write_bundler_options,
)
from distkit.models import BuildSelector, ProjectConfig

PACKAGE = {"name": "@acme/widget-ui", "version": "1.2.0"}


class TestPackageInfo:
    def test_reads_package_json(self, project: Path) -> None:
        assert read_package_info(project, ProjectConfig())["name"] == "widget-ui"

    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        assert read_package_info(tmp_path, ProjectConfig()) == {}

    def test_malformed_file_is_empty(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{not json")
        assert read_package_info(tmp_path, ProjectConfig()) == {}

    def test_bundle_name_precedence(self) -> None:
        assert resolve_bundle_name(ProjectConfig(bundle_name="custom"), PACKAGE) == "custom"
        assert resolve_bundle_name(ProjectConfig(), PACKAGE) == "widget-ui"
        assert resolve_bundle_name(ProjectConfig(), {}) == "bundle"


class TestOutputDir:
    def test_application(self, tmp_path: Path, app_prod: BuildSelector) -> None:
        assert output_dir_for(app_prod, ProjectConfig(), tmp_path) == tmp_path / "dist"

    def test_library(self, tmp_path: Path, lib_dev: BuildSelector) -> None:
        assert output_dir_for(lib_dev, ProjectConfig(), tmp_path) == tmp_path / "dist" / "bundle"


class TestBundlerOptions:
    def test_library_production(self, tmp_path: Path, lib_prod: BuildSelector) -> None:
        config = ProjectConfig(
            externals=["vue"],
            external_globals={"vue": "Vue"},
            workers=["src/lib/wav-worker.js"],
        )
        options = bundler_options(lib_prod, config, tmp_path, PACKAGE)

        assert options.out_dir == "dist/bundle"
        assert options.empty_out_dir is True
        assert options.entry == "src/main.js"
        assert options.format == "umd"
        assert options.library_name == "WidgetUi"
        assert options.file_names == {
            "script": "widget-ui.min.js",
            "stylesheet": "widget-ui.min.css",
        }
        assert options.worker_file_names == {"src/lib/wav-worker.js": "wav-worker.min.js"}
        assert options.minify is True
        assert options.sourcemap is False
        assert options.externals == ["vue"]
        assert options.external_globals == {"vue": "Vue"}

    def test_application_development(self, tmp_path: Path, app_dev: BuildSelector) -> None:
        config = ProjectConfig(externals=["vue"])
        options = bundler_options(app_dev, config, tmp_path, PACKAGE)

        assert options.out_dir == "dist"
        assert options.empty_out_dir is False
        assert options.entry == "index.html"
        assert options.format == "es"
        assert options.library_name is None
        assert options.externals == []
        assert options.file_names["script"] == "widget-ui.js"
        assert options.minify is False
        assert options.sourcemap is True

    def test_define_constants_are_json_literals(self, tmp_path: Path, lib_dev: BuildSelector) -> None:
        options = bundler_options(lib_dev, ProjectConfig(), tmp_path, PACKAGE)
        assert options.define == {
            "process.env.PACKAGE_VERSION": '"1.2.0"',
            "process.env.BUILD_TARGET": '"lib"',
            "process.env.NODE_ENV": '"development"',
        }

    def test_configured_umd_name_wins(self, tmp_path: Path, lib_prod: BuildSelector) -> None:
        options = bundler_options(lib_prod, ProjectConfig(umd_name="ChatBot"), tmp_path, PACKAGE)
        assert options.library_name == "ChatBot"

    def test_aliases_are_passed_through(self, tmp_path: Path, app_dev: BuildSelector) -> None:
        aliases = {"virtual:favicon": "/tmp/x/favicon.js"}
        options = bundler_options(app_dev, ProjectConfig(), tmp_path, PACKAGE, aliases)
        assert options.aliases == aliases

    def test_written_as_json(self, tmp_path: Path, lib_prod: BuildSelector) -> None:
        options = bundler_options(lib_prod, ProjectConfig(), tmp_path, PACKAGE)
        path = write_bundler_options(options, tmp_path / ".distkit")

        assert path == tmp_path / ".distkit" / "bundler-options.json"
        data = json.loads(path.read_text())
        assert data["mode"] == "lib"
        assert data["environment"] == "production"
        assert data["file_names"]["script"] == "widget-ui.min.js"
