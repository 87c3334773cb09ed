"""Environment sources: read-only lookup of a variable by its exact name."""

from __future__ import annotations

import os
from typing import Mapping, Protocol

from envbind.models.errors import NotUnicodeError


class EnvironmentSource(Protocol):
    """Protocol for variable lookup.

    Returns the text of the variable, ``None`` when it is not set, and raises
    :class:`NotUnicodeError` when it is set to bytes that are not UTF-8.
    """

    def lookup(self, name: str) -> str | None: ...


def _decode(name: str, raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise NotUnicodeError(name, raw) from None


class OsEnvironment:
    """The process environment.

    Reads the raw bytes through ``os.environb`` where the platform exposes
    them, so undecodable values are reported instead of smuggled through as
    surrogate escapes.
    """

    def lookup(self, name: str) -> str | None:
        if os.supports_bytes_environ:
            raw = os.environb.get(os.fsencode(name))
            if raw is None:
                return None
            return _decode(name, raw)
        return os.environ.get(name)


class MappingEnvironment:
    """Environment backed by a plain mapping (a snapshot, or a test fixture)."""

    def __init__(self, values: Mapping[str, str | bytes] | None = None) -> None:
        self._values = dict(values or {})

    def lookup(self, name: str) -> str | None:
        value = self._values.get(name)
        if isinstance(value, bytes):
            return _decode(name, value)
        return value


def default_environment() -> EnvironmentSource:
    return OsEnvironment()
