"""Abstract base class for distkit build plugins.

Every plugin must subclass :class:`BuildPlugin` and implement the
:attr:`name` property. The lifecycle hooks mirror the ones a module bundler
exposes (``build_start``, ``resolve_id``, ``load``, ``generate_bundle``,
``close_bundle``, ``configure_server``) plus ``on_init`` and ``cleanup``.
Default implementations are no-ops so plugins only override what they
need.

Plugins are registered as entry points in the ``distkit.plugins`` group
and discovered at runtime by :class:`~distkit.plugins.manager.PluginManager`.

Example:
    Minimal plugin implementation::

        class LicenseFilePlugin(BuildPlugin):
            @property
            def name(self) -> str:
                return "license-file"

            def close_bundle(self, ctx):
                shutil.copyfile(ctx.root / "LICENSE", ctx.output_dir / "LICENSE")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from distkit.models import AssetSpec, OutputArtifact, ProjectConfig

if TYPE_CHECKING:
    from distkit.plugins.hooks import BuildContext


class BuildPlugin(ABC):
    """Base class for all distkit build plugins.

    The plugin lifecycle is:

    1. Instantiation -- the :class:`PluginManager` calls the no-arg constructor.
    2. :meth:`on_init` -- called once with the project configuration.
    3. Build hooks -- called in pipeline order for each build invocation,
       or :meth:`configure_server` once for ``distkit serve``.
    4. :meth:`cleanup` -- called once during shutdown.

    See Also:
        :class:`~distkit.plugins.hooks.HookRunner` for how hooks are
        dispatched across multiple plugins.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used for discovery and logging."""
        ...

    @property
    def version(self) -> str:
        return "0.1.0"

    @property
    def description(self) -> str:
        return ""

    def on_init(self, config: ProjectConfig) -> None:
        """Called once when the plugin is loaded by the :class:`PluginManager`."""

    def build_start(self, ctx: BuildContext) -> None:
        """Called before any module is resolved.

        Raising here aborts the build before anything is written to the
        output directory.
        """

    def resolve_id(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        """Claim an import id.

        Returns:
            The resolved id, or ``None`` to let the next plugin decide.
        """
        return None

    def load(self, module_id: str, ctx: BuildContext) -> Optional[str]:
        """Produce the source of a claimed module.

        Returns:
            Module source, or ``None`` to let the next plugin decide.
        """
        return None

    def generate_bundle(self, ctx: BuildContext, artifacts: list[OutputArtifact]) -> None:
        """Inspect or rewrite the output artifacts in place before they are written."""

    def close_bundle(self, ctx: BuildContext) -> None:
        """Called once after the output has been written."""

    def configure_server(self, ctx: BuildContext, routes: dict[str, AssetSpec]) -> None:
        """Register reserved request paths on the interactive server.

        Args:
            ctx: The build context of the serve invocation.
            routes: Mutable mapping of request path to asset; add entries to
                reserve a path.
        """

    def cleanup(self) -> None:
        """Called once during shutdown to release plugin resources."""
