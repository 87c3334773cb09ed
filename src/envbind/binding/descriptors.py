"""Field-descriptor tables: which attributes of a record are bound, and how.

A record type gets its table from, in order:

1. an explicit ``__env_fields__`` sequence of :class:`FieldDescriptor`;
2. pydantic ``model_fields`` when it is a ``BaseModel``;
3. ``dataclasses.fields`` when it is a dataclass.

Kinds are inferred from annotations: ``list[T]`` is a sequence, ``T | None``
an optional, a record type a nested record, anything else a scalar.
"""

from __future__ import annotations

import dataclasses
import re
import types
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from envbind.binding.decoders import decoder_for
from envbind.models.fields import KIND_ORDER, Env, FieldDescriptor, FieldKind

# Word boundaries inside camelCase / PascalCase identifiers.
_WORD_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def to_fragment(name: str) -> str:
    """Convert an attribute name to its UPPER_SNAKE variable fragment."""
    return _WORD_BOUNDARY_RE.sub("_", name).upper()


def is_record(tp: Any) -> bool:
    """Whether ``tp`` is a type the composite binder can walk."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return (
        hasattr(tp, "__env_fields__")
        or issubclass(tp, BaseModel)
        or dataclasses.is_dataclass(tp)
    )


def _split_annotated(annotation: Any) -> tuple[Any, list[Any]]:
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        return base, metadata
    return annotation, []


def _join_annotated(base: Any, metadata: list[Any]) -> Any:
    if metadata:
        return Annotated[(base, *metadata)]
    return base


def _optional_inner(annotation: Any) -> Any | None:
    if get_origin(annotation) not in (Union, types.UnionType):
        return None
    args = [a for a in get_args(annotation) if a is not type(None)]
    if len(args) != 1 or len(args) == len(get_args(annotation)):
        return None
    return args[0]


def _is_nested(name: str, env: Env, tp: Any) -> bool:
    if is_record(tp):
        return True
    if env.nested:
        raise TypeError(f"Field {name!r}: {tp!r} is marked nested but is not a bindable record")
    return False


def build_descriptor(name: str, annotation: Any) -> FieldDescriptor:
    """Derive the descriptor of one attribute from its type annotation."""
    base, metadata = _split_annotated(annotation)
    env = next((m for m in metadata if isinstance(m, Env)), Env())
    metadata = [m for m in metadata if not isinstance(m, Env)]
    fragment = env.name if env.name is not None else to_fragment(name)

    if env.ignore:
        return FieldDescriptor(name, FieldKind.SCALAR, fragment, ignored=True)

    if base is list or get_origin(base) is list:
        args = get_args(base)
        if not args:
            raise TypeError(f"Field {name!r}: list needs an element type")
        element = args[0]
        element_base, _ = _split_annotated(element)
        if _is_nested(name, env, element_base):
            return FieldDescriptor(name, FieldKind.NESTED_SEQUENCE, fragment, factory=element_base)
        return FieldDescriptor(name, FieldKind.SEQUENCE, fragment, decoder=decoder_for(element))

    inner = _optional_inner(base)
    if inner is not None:
        inner_base, _ = _split_annotated(inner)
        if _is_nested(name, env, inner_base):
            return FieldDescriptor(name, FieldKind.OPTIONAL, fragment, factory=inner_base, nested=True)
        return FieldDescriptor(name, FieldKind.OPTIONAL, fragment, decoder=decoder_for(inner))

    if _is_nested(name, env, base):
        return FieldDescriptor(name, FieldKind.NESTED, fragment, factory=base)

    return FieldDescriptor(
        name, FieldKind.SCALAR, fragment, decoder=decoder_for(_join_annotated(base, metadata)),
    )


# Descriptor tables, built once per record type.
_TABLES: dict[type, tuple[FieldDescriptor, ...]] = {}


def describe(record_type: type) -> tuple[FieldDescriptor, ...]:
    """Return the descriptor table of ``record_type``, in declaration order."""
    table = _TABLES.get(record_type)
    if table is None:
        table = _TABLES[record_type] = _build_table(record_type)
    return table


def traversal_order(record_type: type) -> list[FieldDescriptor]:
    """Non-ignored fields grouped by kind; declaration order kept within a group."""
    return sorted(
        (f for f in describe(record_type) if not f.ignored),
        key=lambda f: KIND_ORDER[f.kind],
    )


def _build_table(record_type: type) -> tuple[FieldDescriptor, ...]:
    explicit = getattr(record_type, "__env_fields__", None)
    if explicit is not None:
        return tuple(explicit)

    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return tuple(
            build_descriptor(name, _join_annotated(info.annotation, list(info.metadata)))
            for name, info in record_type.model_fields.items()
        )

    if dataclasses.is_dataclass(record_type):
        hints = get_type_hints(record_type, include_extras=True)
        return tuple(
            build_descriptor(f.name, hints[f.name])
            for f in dataclasses.fields(record_type)
        )

    raise TypeError(f"{record_type!r} is not a bindable record")
