"""Binding errors: raised when a present variable cannot be turned into a value."""

from __future__ import annotations


class EnvBindError(Exception):
    """Base class for errors tied to a specific environment variable."""

    def __init__(self, variable: str, message: str) -> None:
        super().__init__(f"{variable}: {message}")
        self.variable = variable
        self.message = message


class NotUnicodeError(EnvBindError):
    """The variable is set but its raw bytes are not valid UTF-8 text."""

    def __init__(self, variable: str, raw: bytes) -> None:
        super().__init__(variable, f"not valid text: {raw!r}")
        self.raw = raw


class ParseError(EnvBindError):
    """The variable was read as text but its decoder rejected it."""
