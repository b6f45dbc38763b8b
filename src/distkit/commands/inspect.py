"""The ``inspect`` command -- show how a build would resolve, without building.

Prints the classified selector, the output file names the bundler will be
told to use, and a table of where each configured asset currently resolves
from. Nothing is written.
"""

from __future__ import annotations

import typer

from distkit.commands.common import exit_on_error, load_project
from distkit.output import print_json, print_table


def inspect_command(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print everything as one JSON document."),
) -> None:
    """Show the build selection, output names and asset resolution."""
    from distkit.assets.resolver import export_path, resolve
    from distkit.classifier import classify_from_environ
    from distkit.exceptions import AssetNotFoundError
    from distkit.layout import bundler_options, read_package_info

    with exit_on_error():
        selector = classify_from_environ()
        root, config = load_project(ctx)
        options = bundler_options(selector, config, root, read_package_info(root, config))

        assets: list[dict[str, str]] = []
        for spec in config.assets:
            try:
                resolved = resolve(spec, root)
            except AssetNotFoundError:
                source, origin = "-", "missing"
            else:
                source = export_path(resolved.source_path, root)
                origin = "fallback" if resolved.used_fallback else "custom"
            assets.append({
                "asset": spec.logical_name,
                "import": spec.virtual_id,
                "output": spec.output_name,
                "source": source,
                "origin": origin,
            })

    build = {
        "mode": selector.mode.value,
        "environment": selector.environment.value,
        "target": selector.target,
        "out_dir": options.out_dir,
        "format": options.format,
        **{f"{kind}_file": name for kind, name in options.file_names.items()},
        **{f"worker {source}": name for source, name in options.worker_file_names.items()},
    }

    if json_output:
        print_json({"build": build, "assets": assets})
        return

    print_table(["Setting", "Value"], [[k, str(v)] for k, v in build.items()], title="Build")
    print_table(
        ["Asset", "Import", "Output", "Source", "Origin"],
        [list(row.values()) for row in assets],
        title="Assets",
    )
