"""Composite binder: walks a record's fields and dispatches each by kind.

Returns ``True`` when at least one variable was found anywhere below the
record. The first decode failure raises an :class:`EnvBindError` that
propagates unchanged to the caller; fields bound before it stay bound.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from envbind.binding.descriptors import traversal_order
from envbind.binding.scalar import bind_scalar, read_scalar
from envbind.binding.sequence import bind_nested_sequence, bind_sequence
from envbind.config.environment import EnvironmentSource, default_environment
from envbind.models.fields import FieldDescriptor, FieldKind

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Child-prefix separators for nested records, tried in this order.
NESTED_SEPARATORS: tuple[str, ...] = (":", "__")


def bind_nested(record: Any, base: str, env: EnvironmentSource, clear_optionals: bool = True) -> bool:
    """Bind ``record`` under ``base + ":"`` and then ``base + "__"``.

    Both notations are always tried, so a later one overrides an earlier one
    for the same leaf. The two attempts form a single pass: optionals are
    cleared on the first attempt only.
    """
    found = False
    for attempt, separator in enumerate(NESTED_SEPARATORS):
        if bind_with_prefix(record, base + separator, env, clear_optionals and attempt == 0):
            found = True
    return found


def _bind_optional(
    record: Any, field: FieldDescriptor, name: str, env: EnvironmentSource, clear_optionals: bool,
) -> bool:
    if field.nested:
        current = getattr(record, field.name)
        # A later attempt of the same pass fills the value an earlier one built.
        reuse = not clear_optionals and current is not None
        value = current if reuse else field.factory()
        found = bind_nested(value, name, env, not reuse)
    else:
        found, value = read_scalar(name, field.decoder, env)
    if found:
        setattr(record, field.name, value)
    elif clear_optionals:
        # Presence reflects this pass only.
        setattr(record, field.name, None)
    return found


def _bind_field(
    record: Any, field: FieldDescriptor, prefix: str, env: EnvironmentSource, clear_optionals: bool,
) -> bool:
    name = prefix + field.fragment
    if field.kind is FieldKind.SCALAR:
        return bind_scalar(record, field.name, name, field.decoder, env)
    if field.kind is FieldKind.OPTIONAL:
        return _bind_optional(record, field, name, env, clear_optionals)
    if field.kind is FieldKind.NESTED:
        return bind_nested(getattr(record, field.name), name, env, clear_optionals)
    if field.kind is FieldKind.SEQUENCE:
        return bind_sequence(record, field, name, env)
    if field.kind is FieldKind.NESTED_SEQUENCE:
        return bind_nested_sequence(record, field, name, env)
    raise ValueError(f"Unknown field kind: {field.kind!r}")


def bind_with_prefix(
    record: Any, prefix: str, env: EnvironmentSource | None = None, clear_optionals: bool = True,
) -> bool:
    """Overwrite the fields of ``record`` whose variables are set under ``prefix``.

    Returns whether any variable was found. With ``clear_optionals=False``
    the call continues an earlier pass over the same record, so optionals
    that are absent here keep what that pass set.

    Raises:
        EnvBindError: If a present variable could not be decoded.
    """
    if env is None:
        env = default_environment()
    found = False
    for field in traversal_order(type(record)):
        if _bind_field(record, field, prefix, env, clear_optionals):
            found = True
    return found


def bind(record: Any, env: EnvironmentSource | None = None) -> bool:
    """Bind ``record`` using its type's default prefix (``__env_prefix__``, else "")."""
    prefix = getattr(type(record), "__env_prefix__", "")
    return bind_with_prefix(record, prefix, env)


def from_defaults_then_bind(record_type: type[R], env: EnvironmentSource | None = None) -> R:
    """Construct ``record_type()`` and bind it with its default prefix."""
    record = record_type()
    found = bind(record, env)
    logger.debug("Loaded %s from environment (found=%s)", record_type.__name__, found)
    return record
