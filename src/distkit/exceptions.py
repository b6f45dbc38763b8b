"""Exception hierarchy for distkit.

All exceptions inherit from :class:`DistkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`distkit.exit_codes`.
The top-level error handler in :func:`distkit.app.main` catches
``DistkitError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    DistkitError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- InvalidConfigurationError  (exit 3)
    +-- MetadataUnreadableError    (exit 4)
    +-- AssetNotFoundError         (exit 5)
    +-- SourceMissingError         (exit 6)
    +-- BundlerError               (exit 7)
    +-- PluginError                (exit 10)
    +-- ConfigError                (exit 1)

Only classification, metadata, bundler and plugin errors abort a build.
Asset and source-directory errors are absorbed by the components that raise
them internally and surface as warnings.
"""

from distkit.exit_codes import (
    EXIT_ASSET_NOT_FOUND,
    EXIT_BUNDLER_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_CONFIGURATION,
    EXIT_INVALID_USAGE,
    EXIT_METADATA_UNREADABLE,
    EXIT_PLUGIN_ERROR,
    EXIT_SOURCE_MISSING,
)


class DistkitError(Exception):
    """Base exception for all distkit errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`distkit.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(DistkitError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class InvalidConfigurationError(DistkitError):
    """Raised when a raw build signal is not one of the recognised tokens."""

    exit_code = EXIT_INVALID_CONFIGURATION


class MetadataUnreadableError(DistkitError):
    """Raised when ``package.json`` is missing or malformed and a banner is required."""

    exit_code = EXIT_METADATA_UNREADABLE


class AssetNotFoundError(DistkitError):
    """Raised when neither the preferred nor the fallback asset file exists.

    Attributes:
        logical_name: The logical asset name that failed to resolve.
    """

    exit_code = EXIT_ASSET_NOT_FOUND

    def __init__(self, message: str, logical_name: str = ""):
        super().__init__(message)
        self.logical_name = logical_name


class SourceMissingError(DistkitError):
    """Raised when a mandatory assembly rule found no source files."""

    exit_code = EXIT_SOURCE_MISSING


class BundlerError(DistkitError):
    """Raised when the external bundler cannot be started or exits non-zero."""

    exit_code = EXIT_BUNDLER_FAILURE


class PluginError(DistkitError):
    """Raised when a plugin fails to load, initialise, or execute a hook."""

    exit_code = EXIT_PLUGIN_ERROR


class ConfigError(DistkitError):
    """Raised for project configuration problems (invalid JSON/YAML, bad field values)."""

    exit_code = EXIT_GENERIC_FAILURE
