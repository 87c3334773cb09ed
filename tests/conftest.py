"""Shared test fixtures."""

from __future__ import annotations

from typing import Callable, Mapping

import pytest

from envbind.config.environment import MappingEnvironment


class RecordingEnvironment(MappingEnvironment):
    """MappingEnvironment that remembers every name it was asked for."""

    def __init__(self, values: Mapping[str, str | bytes] | None = None) -> None:
        super().__init__(values)
        self.lookups: list[str] = []

    def lookup(self, name: str) -> str | None:
        self.lookups.append(name)
        return super().lookup(name)


@pytest.fixture
def make_env() -> Callable[..., RecordingEnvironment]:
    """Build a recording environment from a ``{name: value}`` mapping."""

    def _make(values: Mapping[str, str | bytes] | None = None) -> RecordingEnvironment:
        return RecordingEnvironment(values)

    return _make
