"""Scalar binder: one variable, one decode attempt."""

from __future__ import annotations

import logging
from typing import Any

from envbind.config.environment import EnvironmentSource
from envbind.models.errors import ParseError
from envbind.models.fields import DecodeFn

logger = logging.getLogger(__name__)


def read_scalar(name: str, decoder: DecodeFn, env: EnvironmentSource) -> tuple[bool, Any]:
    """Look up ``name`` and decode it.

    Returns ``(False, None)`` when the variable is absent, ``(True, value)``
    when it decodes. Raises NotUnicodeError / ParseError otherwise.
    """
    text = env.lookup(name)
    if text is None:
        return False, None
    try:
        value = decoder(text)
    except ValueError as e:
        raise ParseError(name, str(e)) from e
    logger.debug("Bound %s", name)
    return True, value


def bind_scalar(record: Any, attribute: str, name: str, decoder: DecodeFn, env: EnvironmentSource) -> bool:
    """Overwrite ``record.<attribute>`` from variable ``name`` if it is set."""
    found, value = read_scalar(name, decoder, env)
    if found:
        setattr(record, attribute, value)
    return found
