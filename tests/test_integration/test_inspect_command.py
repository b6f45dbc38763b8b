"""End-to-end tests for ``distkit inspect``."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from distkit.app import app
from distkit.exit_codes import EXIT_INVALID_CONFIGURATION

runner = CliRunner()


class TestInspectCommand:
    def test_json_for_production_library(self, project: Path, custom_assets: Path) -> None:
        result = runner.invoke(
            app,
            ["--quiet", "inspect", "--json"],
            env={"BUILD_TARGET": "lib", "NODE_ENV": "production"},
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        build = data["build"]
        assert build["mode"] == "lib"
        assert build["environment"] == "production"
        assert build["out_dir"] == "dist/bundle"
        assert build["format"] == "umd"
        assert build["script_file"] == "widget-ui.min.js"
        assert build["stylesheet_file"] == "widget-ui.min.css"

        origins = {row["asset"]: row["origin"] for row in data["assets"]}
        assert origins == {"favicon": "custom", "logo": "fallback"}

    def test_table_output(self, project: Path) -> None:
        result = runner.invoke(app, ["inspect"])

        assert result.exit_code == 0, result.output
        assert "widget-ui.js" in result.stdout
        assert "virtual:favicon" in result.stdout

    def test_invalid_target(self, project: Path) -> None:
        result = runner.invoke(app, ["inspect"], env={"BUILD_TARGET": "both"})
        assert result.exit_code == EXIT_INVALID_CONFIGURATION
