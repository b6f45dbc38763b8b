"""The ordered build pipeline.

One build invocation runs four stages, always in this order::

    resolve_assets -> compile -> stamp_banner -> emit

``resolve_assets``
    Runs the ``build_start`` hooks (the banner plugin reads metadata here, so
    an unreadable ``package.json`` aborts before anything is written), writes
    one generated module per asset by dispatching ``resolve_id``/``load`` to
    the plugins, and lays out the bundler options.
``compile``
    Runs the external bundler (:mod:`distkit.bundler`). Skipped with
    ``--no-compile`` to post-process output that already exists.
``stamp_banner``
    Reads the files the bundler wrote, runs the ``generate_bundle`` hooks
    over them, and writes back the ones a hook changed.
``emit``
    Runs the ``close_bundle`` hooks: asset emission and public directory
    mirroring.

The :class:`~distkit.models.BuildSelector` is fixed when the pipeline is
created and threaded through every stage in the
:class:`~distkit.plugins.hooks.BuildContext`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from distkit.assets.virtual import write_virtual_module
from distkit.bundler import run_bundler
from distkit.config import get_work_dir, write_bytes_atomic
from distkit.layout import (
    bundler_options,
    output_dir_for,
    read_package_info,
    write_bundler_options,
)
from distkit.models import BuildSelector, OutputArtifact, ProjectConfig
from distkit.plugins.hooks import BuildContext, HookRunner

logger = logging.getLogger(__name__)

STAGES = ("resolve_assets", "compile", "stamp_banner", "emit")


def collect_artifacts(output_dir: Path) -> list[OutputArtifact]:
    """Read the regular files directly inside *output_dir* as artifacts.

    Subdirectories (the library bundle under an application output, the
    mirrored public tree) are not descended into.
    """
    if not output_dir.is_dir():
        return []
    return [
        OutputArtifact(entry.name, entry.read_bytes())
        for entry in sorted(output_dir.iterdir())
        if entry.is_file() and not entry.is_symlink()
    ]


class BuildPipeline:
    """Run one build invocation through the plugin hooks.

    Args:
        ctx: Context of the invocation.
        runner: Hook runner over the loaded plugins.
        compile: Whether to run the bundler. ``False`` post-processes the
            existing output only.
    """

    def __init__(self, ctx: BuildContext, runner: HookRunner, compile: bool = True) -> None:
        self.ctx = ctx
        self.runner = runner
        self.compile_enabled = compile
        self.options_path: Optional[Path] = None

    @classmethod
    def create(
        cls,
        selector: BuildSelector,
        root: Path,
        config: ProjectConfig,
        runner: HookRunner,
        compile: bool = True,
    ) -> BuildPipeline:
        """Build the context for *selector* and return a pipeline over it."""
        ctx = BuildContext(
            selector=selector,
            root=root,
            config=config,
            output_dir=output_dir_for(selector, config, root),
            work_dir=get_work_dir(root),
        )
        return cls(ctx, runner, compile=compile)

    def resolve_assets(self) -> None:
        ctx = self.ctx
        self.runner.run_build_start(ctx)

        aliases: dict[str, str] = {}
        for spec in ctx.config.assets:
            module_id = self.runner.resolve_id(spec.virtual_id, ctx)
            if module_id is None:
                continue
            source = self.runner.load(module_id, ctx)
            if source is None:
                continue
            path = write_virtual_module(spec, source, ctx.work_dir)
            aliases[module_id] = path.resolve().as_posix()
        ctx.aliases = aliases

        options = bundler_options(
            ctx.selector,
            ctx.config,
            ctx.root,
            read_package_info(ctx.root, ctx.config),
            aliases,
        )
        self.options_path = write_bundler_options(options, ctx.work_dir)

    def compile(self) -> None:
        if not self.compile_enabled:
            logger.info("Skipping bundler; post-processing existing output in %s", self.ctx.output_dir)
            return
        if self.options_path is None:
            raise RuntimeError("resolve_assets must run before compile")
        run_bundler(
            self.ctx.config.bundler.command,
            self.ctx.root,
            self.ctx.selector,
            self.options_path,
            self.ctx.config.bundler.env,
        )

    def stamp_banner(self) -> list[Path]:
        """Run ``generate_bundle`` over the output and write back changed files.

        Returns:
            The files that were rewritten.
        """
        artifacts = collect_artifacts(self.ctx.output_dir)
        originals = {artifact.file_name: artifact.content for artifact in artifacts}
        self.runner.run_generate_bundle(self.ctx, artifacts)

        written: list[Path] = []
        for artifact in artifacts:
            if artifact.content == originals.get(artifact.file_name):
                continue
            content = artifact.content
            if isinstance(content, str):
                content = content.encode("utf-8", errors="surrogateescape")
            path = self.ctx.output_dir / artifact.file_name
            write_bytes_atomic(path, content)
            logger.info("Updated %s", path.name)
            written.append(path)
        return written

    def emit(self) -> None:
        self.runner.run_close_bundle(self.ctx)

    def run(self) -> BuildContext:
        """Run every stage in order and return the final context."""
        logger.info("Building %s", self.ctx.selector.target)
        for stage in STAGES:
            logger.debug("Stage: %s", stage)
            getattr(self, stage)()
        return self.ctx
