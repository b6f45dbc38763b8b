"""Deterministic output file names.

Three naming rules live here, all pure functions of their inputs:

* :func:`name_for` -- worker chunk names (``wav-worker.min.js``). Bundlers may
  ask for a worker name several times during a multi-pass build, so the
  function strips what it appends: the ``-worker`` suffix and the ``.js`` /
  ``.min.js`` extension appear exactly once however often it is applied.
* :func:`artifact_names` -- the script/stylesheet pair, ``name.js`` and
  ``name.css`` in development, ``name.min.js`` and ``name.min.css`` in
  production.
* :func:`bundle_name_for` / :func:`umd_name_for` -- the file stem and the UMD
  global derived from the package name.
"""

from __future__ import annotations

import re

from distkit.models import BuildSelector

WORKER_SUFFIX = "-worker"
MIN_MARKER = ".min"

_EXTENSION_RE = re.compile(r"(\.min)?(\.js)?$")
_WORKER_SUFFIX_RE = re.compile(r"(-worker)+$")
_WORD_RE = re.compile(r"[A-Za-z0-9]+")


def name_for(chunk_base_name: str, selector: BuildSelector) -> str:
    """Return the output file name for a worker chunk.

    Args:
        chunk_base_name: The chunk name the bundler proposes, with or without
            a ``-worker`` suffix or a ``.min``, ``.js`` or ``.min.js`` ending.
        selector: The build selector; production adds the ``.min`` marker.

    Returns:
        ``<stem>-worker.js`` or ``<stem>-worker.min.js``.

    Example::

        >>> name_for("wav-worker", BuildSelector(environment="production"))
        'wav-worker.min.js'
    """
    stem = _EXTENSION_RE.sub("", chunk_base_name)
    stem = _WORKER_SUFFIX_RE.sub("", stem)
    marker = MIN_MARKER if selector.is_production else ""
    return f"{stem}{WORKER_SUFFIX}{marker}.js"


def artifact_names(bundle_name: str, selector: BuildSelector) -> dict[str, str]:
    """Return the ``{"script": ..., "stylesheet": ...}`` names for a build."""
    marker = MIN_MARKER if selector.is_production else ""
    return {
        "script": f"{bundle_name}{marker}.js",
        "stylesheet": f"{bundle_name}{marker}.css",
    }


def bundle_name_for(package_name: str) -> str:
    """Strip an npm scope: ``@acme/widget-ui`` becomes ``widget-ui``."""
    return package_name.rsplit("/", 1)[-1]


def umd_name_for(bundle_name: str) -> str:
    """PascalCase global for the UMD wrapper: ``lex-web-ui`` becomes ``LexWebUi``."""
    return "".join(word[:1].upper() + word[1:] for word in _WORD_RE.findall(bundle_name))
