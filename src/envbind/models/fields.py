"""Field descriptor models: the per-field shape consumed by the binder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

# Parse function: text -> value, raising ValueError with a readable message.
DecodeFn = Callable[[str], Any]


class FieldKind(str, Enum):
    SCALAR = "scalar"
    OPTIONAL = "optional"
    NESTED = "nested"
    SEQUENCE = "sequence"
    NESTED_SEQUENCE = "nested_sequence"


# Visiting order inside one record. Independent of declaration order.
KIND_ORDER: dict[FieldKind, int] = {
    FieldKind.SCALAR: 0,
    FieldKind.OPTIONAL: 1,
    FieldKind.NESTED: 2,
    FieldKind.SEQUENCE: 3,
    FieldKind.NESTED_SEQUENCE: 4,
}


@dataclass(frozen=True)
class Env:
    """``Annotated`` marker carrying per-field binding modifiers.

    Example::

        class Settings(BaseModel):
            ignored: Annotated[Cache, Env(ignore=True)] = Field(default_factory=Cache)
            api: Annotated[Api, Env(name="HTTP")] = Field(default_factory=Api)
    """

    ignore: bool = False
    nested: bool = False
    name: str | None = None


@dataclass(frozen=True)
class Decoder:
    """``Annotated`` marker overriding the parse function of a scalar field."""

    fn: DecodeFn


@dataclass(frozen=True)
class FieldDescriptor:
    """How one attribute of a record is bound.

    ``decoder`` is set for leaves (scalars, optional scalars, sequence
    elements). ``factory`` builds a fresh default record for nested
    optionals and nested-sequence elements. ``nested`` marks an optional
    whose inner value is itself a record.
    """

    name: str
    kind: FieldKind
    fragment: str
    ignored: bool = False
    decoder: DecodeFn | None = None
    factory: Callable[[], Any] | None = None
    nested: bool = False
