"""Canonical models shared across all distkit modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Build values** -- immutable per invocation:
    :class:`BuildMode`, :class:`Environment`, :class:`BuildSelector`,
    :class:`BannerMetadata`, :class:`AssetSpec`, :class:`AssemblyRule`.

**Transient values** -- plain dataclasses scoped to one lifecycle callback:
    :class:`ResolvedAsset` and :class:`OutputArtifact`.

**Configuration and reports** -- serialised as JSON/YAML:
    :class:`BundlerConfig`, :class:`ServerConfig`, :class:`AssemblyConfig`,
    :class:`PluginsConfig`, :class:`ProjectConfig`, :class:`BundlerOptions`,
    :class:`AssemblyRecord` and :class:`AssembledManifest`.

All Pydantic models use v2 ``model_config``. :class:`ProjectConfig` uses
``extra="allow"`` so that keys owned by third-party build plugins are
preserved in ``model_extra``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# --- Build selector ---


class BuildMode(str, enum.Enum):
    """Whether the output is a deployable site or an embeddable bundle."""

    LIBRARY = "lib"
    APPLICATION = "app"


class Environment(str, enum.Enum):
    """Controls minification, source maps and banner injection."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class BuildSelector(BaseModel):
    """The validated ``{mode, environment}`` pair for one build invocation.

    Produced once by :func:`~distkit.classifier.classify` and passed
    explicitly to every component that needs it. Frozen: there is no
    process-wide build state to mutate.
    """

    model_config = ConfigDict(frozen=True)

    mode: BuildMode = BuildMode.APPLICATION
    environment: Environment = Environment.DEVELOPMENT

    @property
    def is_library(self) -> bool:
        return self.mode is BuildMode.LIBRARY

    @property
    def is_production(self) -> bool:
        return self.environment is Environment.PRODUCTION

    @property
    def target(self) -> str:
        """Human-readable target such as ``"lib-production"``."""
        return f"{self.mode.value}-{self.environment.value}"


# --- Assets ---


class AssetSpec(BaseModel):
    """One fallback-capable asset such as the favicon or the header logo.

    Both paths are relative to the project root. A ``builtin:`` prefix on
    either path addresses the versioned default-asset bundle shipped inside
    distkit (see :mod:`distkit.assets.resolver`).

    Example::

        AssetSpec(
            logical_name="favicon",
            preferred_path="src/assets/favicon.png",
            fallback_path="builtin:v1/favicon.png",
            output_name="favicon.png",
        )
    """

    model_config = ConfigDict(frozen=True)

    logical_name: str = Field(description="Name used in virtual imports, e.g. 'favicon'")
    preferred_path: str = Field(description="User-supplied override, relative to the root")
    fallback_path: str = Field(description="Shipped default used when the override is absent")
    output_name: str = Field(description="File name written to the output directory")

    @model_validator(mode="after")
    def _paths_distinct(self) -> "AssetSpec":
        if PurePosixPath(self.preferred_path) == PurePosixPath(self.fallback_path):
            raise ValueError(
                f"Asset '{self.logical_name}': preferred_path and fallback_path "
                f"must differ (both are '{self.preferred_path}')"
            )
        return self

    @property
    def virtual_id(self) -> str:
        """The reserved module id, e.g. ``"virtual:favicon"``."""
        return f"virtual:{self.logical_name}"

    @property
    def serve_path(self) -> str:
        """The reserved dev-server path, e.g. ``"/favicon.png"``."""
        return f"/{self.output_name}"


@dataclass
class ResolvedAsset:
    """Which physical file backs a logical asset for one resolution event."""

    logical_name: str
    source_path: Path
    used_fallback: bool


def default_assets() -> list[AssetSpec]:
    """The favicon and logo shipped with every project unless configured otherwise."""
    return [
        AssetSpec(
            logical_name="favicon",
            preferred_path="src/assets/favicon.png",
            fallback_path="builtin:v1/favicon.png",
            output_name="favicon.png",
        ),
        AssetSpec(
            logical_name="logo",
            preferred_path="src/assets/logo.png",
            fallback_path="builtin:v1/logo.png",
            output_name="logo.png",
        ),
    ]


# --- Banner ---


class BannerMetadata(BaseModel):
    """Project metadata read once per build from ``package.json``.

    Defaults match what the banner prints when a field is absent from the
    metadata file.
    """

    model_config = ConfigDict(frozen=True)

    name: str = "Unknown Package"
    version: str = "0.0.0"
    description: str = ""
    author: str = "Unknown Author"
    license: str = "Unknown License"
    build_date: date = Field(default_factory=date.today)


class ArtifactKind(str, enum.Enum):
    """Kinds of bundler output. Only scripts and stylesheets get a banner."""

    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    OTHER = "other"

    @classmethod
    def for_file_name(cls, file_name: str) -> "ArtifactKind":
        suffix = PurePosixPath(file_name).suffix.lower()
        if suffix in (".js", ".mjs", ".cjs"):
            return cls.SCRIPT
        if suffix == ".css":
            return cls.STYLESHEET
        return cls.OTHER


@dataclass
class OutputArtifact:
    """One generated file as seen by the ``generate_bundle`` hook.

    ``content`` may be text or raw bytes; stylesheets in particular often
    arrive as bytes. When ``kind`` is omitted it is derived from the file
    name, so ``app.js.map`` is :attr:`ArtifactKind.OTHER`.
    """

    file_name: str
    content: Union[str, bytes]
    kind: Optional[ArtifactKind] = None

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = ArtifactKind.for_file_name(self.file_name)


# --- Assembly ---


class AssemblyRule(BaseModel):
    """Which files of an independent build's output belong in the release tree.

    ``source_glob`` is a gitignore-style pattern matched against the names of
    regular files directly inside ``source_root``.
    """

    model_config = ConfigDict(frozen=True)

    source_root: str
    source_glob: str
    destination_name: Optional[str] = Field(
        default=None, description="Rename the matched file; keeps its own name when unset"
    )
    mandatory: bool = Field(
        default=False, description="Fail dist-copy when source_root is absent or nothing in it matches"
    )
    label: str = ""


class AssemblyStatus(str, enum.Enum):
    COPIED = "copied"
    SKIPPED = "skipped"
    MISSING = "missing"


class AssemblyRecord(BaseModel):
    """Outcome of applying one :class:`AssemblyRule`."""

    rule: AssemblyRule
    status: AssemblyStatus
    files: list[str] = Field(default_factory=list)
    reason: str = ""


class AssembledManifest(BaseModel):
    """Everything an assembly run copied or skipped, rule by rule."""

    output_root: str
    records: list[AssemblyRecord] = Field(default_factory=list)

    @property
    def copied_files(self) -> list[str]:
        return [f for record in self.records for f in record.files]

    @property
    def missing_mandatory(self) -> list[AssemblyRecord]:
        return [
            r for r in self.records
            if r.rule.mandatory and r.status is AssemblyStatus.MISSING
        ]


# --- Project configuration ---


class BundlerConfig(BaseModel):
    """How to invoke the external module bundler."""

    command: list[str] = Field(
        default_factory=lambda: ["npx", "vite", "build"],
        description="Argv of the bundler build command",
    )
    env: dict[str, str] = Field(
        default_factory=dict, description="Extra environment variables for the bundler"
    )


class ServerConfig(BaseModel):
    """Interactive asset server settings."""

    host: str = "127.0.0.1"
    port: int = 8080
    upstream: Optional[str] = Field(
        default=None,
        description="Dev server that receives every non-asset request, e.g. http://localhost:5173",
    )


class AssemblyConfig(BaseModel):
    """Settings for ``distkit dist-copy``."""

    output_root: str = "release"
    rules: Optional[list[AssemblyRule]] = Field(
        default=None, description="Assembly table; the built-in default table when unset"
    )


class PluginsConfig(BaseModel):
    """Explicit plugin allow/deny lists."""

    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)


class ProjectConfig(BaseModel):
    """Project configuration read from ``distkit.json`` or ``distkit.yaml``.

    Loaded by :func:`~distkit.config.load_project_config`. Every field has a
    default matching the conventional layout, so a project without a config
    file builds as-is.
    """

    model_config = ConfigDict(extra="allow")

    package_json: str = "package.json"
    bundle_name: Optional[str] = Field(
        default=None, description="Output file stem; unscoped package name when unset"
    )
    umd_name: Optional[str] = Field(
        default=None, description="UMD global; PascalCase of bundle_name when unset"
    )
    library_entry: str = "src/main.js"
    app_entry: str = "index.html"
    output_dir: str = "dist"
    bundle_dir: str = "bundle"
    public_dir: str = "public"
    mirror_exclude: list[str] = Field(default_factory=lambda: ["index.html"])
    assets: list[AssetSpec] = Field(default_factory=default_assets)
    workers: list[str] = Field(
        default_factory=list, description="Worker source files, e.g. src/lib/wav-worker.js"
    )
    externals: list[str] = Field(
        default_factory=list, description="Modules provided by the host page in library mode"
    )
    external_globals: dict[str, str] = Field(
        default_factory=dict, description="UMD global name for each external module"
    )
    bundler: BundlerConfig = Field(default_factory=BundlerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    assembly: AssemblyConfig = Field(default_factory=AssemblyConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @model_validator(mode="after")
    def _unique_assets(self) -> "ProjectConfig":
        seen_names: set[str] = set()
        seen_outputs: set[str] = set()
        for spec in self.assets:
            if spec.logical_name in seen_names:
                raise ValueError(f"Duplicate asset logical_name '{spec.logical_name}'")
            if spec.output_name in seen_outputs:
                raise ValueError(f"Duplicate asset output_name '{spec.output_name}'")
            seen_names.add(spec.logical_name)
            seen_outputs.add(spec.output_name)
        return self


class BundlerOptions(BaseModel):
    """Options handed to the external bundler as ``bundler-options.json``.

    Computed by :func:`~distkit.layout.bundler_options` from the selector and
    project configuration; the bundler config file reads this instead of
    re-deriving names from environment variables.
    """

    mode: BuildMode
    environment: Environment
    out_dir: str
    empty_out_dir: bool
    entry: str
    format: str
    library_name: Optional[str] = None
    file_names: dict[str, str] = Field(default_factory=dict)
    worker_file_names: dict[str, str] = Field(default_factory=dict)
    sourcemap: bool
    minify: bool
    externals: list[str] = Field(default_factory=list)
    external_globals: dict[str, str] = Field(default_factory=dict)
    define: dict[str, str] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
