"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~distkit.exceptions.DistkitError` subclass.
Release scripts can inspect the exit code to tell a bad build signal from a
failed bundler run without parsing stderr.

Example::

    $ BUILD_TARGET=bogus distkit build run
    $ echo $?
    3   # EXIT_INVALID_CONFIGURATION -- unrecognised build signal
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_INVALID_CONFIGURATION = 3
"""``BUILD_TARGET`` or ``NODE_ENV`` carried an unrecognised value."""

EXIT_METADATA_UNREADABLE = 4
"""The project metadata file needed for the banner is missing or malformed."""

EXIT_ASSET_NOT_FOUND = 5
"""Neither the preferred nor the fallback asset exists."""

EXIT_SOURCE_MISSING = 6
"""A mandatory assembly rule found no source files."""

EXIT_BUNDLER_FAILURE = 7
"""The external module bundler could not be started or exited non-zero."""

EXIT_PLUGIN_ERROR = 10
"""A build plugin failed to load, initialise, or execute."""
