"""Jinja2 environment for the text distkit generates.

Templates live in ``distkit/templates/``: the provenance banner and the
virtual asset modules handed to the bundler. Nothing rendered here is HTML,
so autoescaping is off.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATES_DIR = Path(__file__).parent / "templates"


def create_environment() -> Environment:
    """Create the Jinja2 environment with the package templates directory.

    Returns:
        A configured :class:`~jinja2.Environment`. ``StrictUndefined`` makes
        a missing variable fail loudly instead of rendering as empty.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=False,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )


def render(template_name: str, **context: Any) -> str:
    """Render *template_name* with *context*."""
    return create_environment().get_template(template_name).render(**context)
