"""The ``dist-copy`` command -- assemble the release directory.

Runs the output assembler over the configured (or default) rule table after
the producing builds have finished. Missing optional sources are reported as
warnings; a missing *mandatory* source exits non-zero once every rule has
been applied.

Usage::

    distkit build lib && distkit build lib-dev && distkit dist-copy
    distkit dist-copy --output release --manifest release/manifest.json
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from distkit.commands.common import exit_on_error, load_project
from distkit.output import print_table, success, suggest


def dist_copy_command(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Release directory (default from config: 'release')."
    ),
    manifest: Optional[str] = typer.Option(
        None, "--manifest", help="Write the assembly manifest as JSON to this path."
    ),
) -> None:
    """Copy build outputs into one release directory.

    Args:
        ctx: Typer invocation context.
        output: Release directory; relative paths are taken from the project
            root.
        manifest: Optional path for a JSON manifest of what was copied.
    """
    from distkit.assembler import assemble, rules_for
    from distkit.config import write_json_atomic
    from distkit.exceptions import SourceMissingError
    from distkit.layout import read_package_info, resolve_bundle_name

    with exit_on_error():
        root, config = load_project(ctx)
        bundle_name = resolve_bundle_name(config, read_package_info(root, config))

        output_root = Path(output or config.assembly.output_root).expanduser()
        if not output_root.is_absolute():
            output_root = root / output_root

        result = assemble(rules_for(config, bundle_name), output_root, root)

        print_table(
            ["Rule", "Status", "Files"],
            [
                [
                    record.rule.label or f"{record.rule.source_root}/{record.rule.source_glob}",
                    record.status.value,
                    ", ".join(record.files) or record.reason,
                ]
                for record in result.records
            ],
            title="Assembly",
        )

        if manifest:
            write_json_atomic(Path(manifest).expanduser(), result.model_dump(mode="json"))

        missing = result.missing_mandatory
        if missing:
            roots = ", ".join(record.rule.source_root for record in missing)
            suggest("Run the library builds first: distkit build lib")
            raise SourceMissingError(f"Mandatory source not found: {roots}")

    success(f"Copied {len(result.copied_files)} file(s) into {output_root}")
