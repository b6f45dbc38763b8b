"""Classify the raw build signals into a :class:`~distkit.models.BuildSelector`.

Two loosely specified strings decide every build: the build-target signal
(``BUILD_TARGET``) and the environment signal (``NODE_ENV``). Both are
trimmed before inspection and a blank value counts as absent:

==============  ================  =========================
Signal          Accepted tokens   When absent or blank
==============  ================  =========================
target          ``lib``, ``app``  ``app`` (Application)
environment     ``production``,   ``development``
                ``development``
==============  ================  =========================

Anything else raises :class:`~distkit.exceptions.InvalidConfigurationError`
instead of silently falling back to a default. :func:`classify` is meant to
run once per invocation, before anything touches the output directory.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from distkit.exceptions import InvalidConfigurationError
from distkit.models import BuildMode, BuildSelector, Environment

logger = logging.getLogger(__name__)

TARGET_VAR = "BUILD_TARGET"
ENV_VAR = "NODE_ENV"

_MODE_TOKENS = {mode.value: mode for mode in BuildMode}
_ENV_TOKENS = {env.value: env for env in Environment}


def _normalise(raw: Optional[str]) -> str:
    return raw.strip() if raw else ""


def classify(raw_target: Optional[str], raw_env: Optional[str]) -> BuildSelector:
    """Parse the two raw build signals into a validated selector.

    Args:
        raw_target: Raw build-target signal, e.g. the value of
            ``BUILD_TARGET``. ``None`` or whitespace means Application.
        raw_env: Raw environment signal, e.g. the value of ``NODE_ENV``.
            ``None`` or whitespace means Development.

    Returns:
        The immutable :class:`~distkit.models.BuildSelector`.

    Raises:
        InvalidConfigurationError: If a non-blank signal is not one of the
            recognised tokens.
    """
    target = _normalise(raw_target)
    env = _normalise(raw_env)

    if target and target not in _MODE_TOKENS:
        raise InvalidConfigurationError(
            f"Invalid {TARGET_VAR}: '{target}'. Must be 'lib' or 'app'"
        )
    if env and env not in _ENV_TOKENS:
        raise InvalidConfigurationError(
            f"Invalid {ENV_VAR}: '{env}'. Must be 'production' or 'development'"
        )

    selector = BuildSelector(
        mode=_MODE_TOKENS.get(target, BuildMode.APPLICATION),
        environment=_ENV_TOKENS.get(env, Environment.DEVELOPMENT),
    )
    logger.info(
        "Build configuration: mode=%s environment=%s target=%s",
        selector.mode.value,
        selector.environment.value,
        selector.target,
    )
    return selector


def classify_from_environ(environ: Optional[Mapping[str, str]] = None) -> BuildSelector:
    """Classify using ``BUILD_TARGET`` and ``NODE_ENV`` from *environ*.

    Args:
        environ: Mapping to read from; ``os.environ`` when omitted.
    """
    source = os.environ if environ is None else environ
    return classify(source.get(TARGET_VAR), source.get(ENV_VAR))
