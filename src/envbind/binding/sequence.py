"""Sequence expansion: lists whose length is discovered from the environment.

Element ``i`` of field ``V`` is read from ``V:i`` or ``V__i``; for lists of
records the element prefix is ``V:i:`` or ``V__i__``. Probing stops at the
first index where neither form is set, so a gap truncates the list.
"""

from __future__ import annotations

import itertools
import logging
from typing import Any, Iterator

from envbind.binding.scalar import read_scalar
from envbind.config.environment import EnvironmentSource
from envbind.models.fields import FieldDescriptor

logger = logging.getLogger(__name__)


def indexed_names(base: str, nested: bool = False) -> Iterator[tuple[int, str, str]]:
    """Yield ``(index, colon_name, underscore_name)`` for index 0, 1, 2, ...

    The constant head of each name is built once; only the index is formatted
    per step.
    """
    colon_head, underscore_head = base + ":", base + "__"
    colon_tail, underscore_tail = (":", "__") if nested else ("", "")
    for index in itertools.count():
        digits = str(index)
        yield index, colon_head + digits + colon_tail, underscore_head + digits + underscore_tail


def bind_sequence(record: Any, field: FieldDescriptor, base: str, env: EnvironmentSource) -> bool:
    """Rebuild a list of scalars from ``base:i`` / ``base__i`` variables.

    The list is replaced only when index 0 is set; otherwise it is left as-is.
    Elements read before a decode failure stay attached.
    """
    items: list[Any] = []
    try:
        for _, colon_name, underscore_name in indexed_names(base):
            found, value = read_scalar(colon_name, field.decoder, env)
            if not found:
                found, value = read_scalar(underscore_name, field.decoder, env)
            if not found:
                break
            items.append(value)
    finally:
        if items:
            setattr(record, field.name, items)
    logger.debug("Discovered %d element(s) for %s", len(items), base)
    return bool(items)


def bind_nested_sequence(record: Any, field: FieldDescriptor, base: str, env: EnvironmentSource) -> bool:
    """Rebuild a list of records from ``base:i:*`` / ``base__i__*`` variables.

    Each index speculatively appends a fresh element and pops it again when
    neither prefix matched anything.
    """
    from envbind.binding.composite import bind_with_prefix

    items: list[Any] = []
    try:
        for _, colon_prefix, underscore_prefix in indexed_names(base, nested=True):
            element = field.factory()
            items.append(element)
            if not (
                bind_with_prefix(element, colon_prefix, env)
                or bind_with_prefix(element, underscore_prefix, env)
            ):
                items.pop()
                break
    finally:
        if items:
            setattr(record, field.name, items)
    logger.debug("Discovered %d element(s) for %s", len(items), base)
    return bool(items)
