"""End-to-end tests for ``distkit stamp``."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from distkit.app import app
from distkit.exit_codes import EXIT_INVALID_USAGE, EXIT_METADATA_UNREADABLE

runner = CliRunner()


class TestStampCommand:
    def test_stamps_build_output(self, project: Path) -> None:
        dist = project / "dist"
        dist.mkdir()
        (dist / "bundle.js").write_text("run()")
        (dist / "bundle.css").write_text(".a{}")
        (dist / "index.html").write_text("<html></html>")

        result = runner.invoke(app, ["stamp"])

        assert result.exit_code == 0, result.output
        assert (dist / "bundle.js").read_text().startswith("/*!")
        assert "widget-ui v1.2.0" in (dist / "bundle.css").read_text()
        assert (dist / "index.html").read_text() == "<html></html>"
        assert "Stamped 2 of 2 file(s)" in result.output

    def test_library_output_selected_by_environment(self, project: Path) -> None:
        bundle = project / "dist" / "bundle"
        bundle.mkdir(parents=True)
        (bundle / "widget-ui.min.css").write_text(".a{}")

        result = runner.invoke(app, ["stamp"], env={"BUILD_TARGET": "lib"})

        assert result.exit_code == 0, result.output
        assert (bundle / "widget-ui.min.css").read_text().startswith("/*!")

    def test_explicit_files_are_stamped_once(self, project: Path) -> None:
        target = project / "extra.css"
        target.write_text(".a{}")

        first = runner.invoke(app, ["stamp", str(target)])
        second = runner.invoke(app, ["stamp", str(target)])

        assert first.exit_code == 0, first.output
        assert "Stamped 0 of 1 file(s)" in second.output
        assert target.read_text().count("/*!") == 1

    def test_nothing_to_stamp(self, project: Path) -> None:
        result = runner.invoke(app, ["stamp"])
        assert result.exit_code == 0
        assert "No scripts or stylesheets to stamp" in result.output

    def test_unreadable_metadata(self, project: Path) -> None:
        (project / "package.json").write_text("{broken")
        result = runner.invoke(app, ["stamp"])
        assert result.exit_code == EXIT_METADATA_UNREADABLE

    def test_missing_explicit_file(self, project: Path) -> None:
        result = runner.invoke(app, ["stamp", "dist/nope.css"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "File not found" in result.output

    def test_explicit_non_script_is_skipped_with_warning(self, project: Path) -> None:
        page = project / "public" / "index.html"
        sheet = project / "site.css"
        sheet.write_text(".a{}")

        result = runner.invoke(app, ["stamp", str(page), str(sheet)])

        assert result.exit_code == 0, result.output
        assert "Not a script or stylesheet" in result.output
        assert page.read_text() == "<html></html>"
        assert "Stamped 1 of 1 file(s)" in result.output
