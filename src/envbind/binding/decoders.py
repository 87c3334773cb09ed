"""Primitive decoding library.

Every decoder is a plain ``text -> value`` callable that raises ``ValueError``
with a human readable message. The scalar binder turns that message into a
:class:`~envbind.models.errors.ParseError` naming the variable.

Fixed-width integers are ``int`` aliases carrying pydantic bounds, so they can
be used directly as field annotations on pydantic models and dataclasses:

    class Server(BaseModel):
        port: U16 = 8080

Types without a registered decoder fall back to a pydantic ``TypeAdapter``,
which covers enums, ``Decimal``, ``UUID``, dates and anything else pydantic
validates from a string.
"""

from __future__ import annotations

import codecs
import re
from pathlib import Path
from typing import Annotated, Any, get_args, get_origin

from pydantic import Field, TypeAdapter, ValidationError
from pydantic.errors import PydanticUserError

from envbind.models.fields import DecodeFn, Decoder


def _bounded(bits: int, signed: bool) -> Any:
    if signed:
        return Annotated[int, Field(ge=-(2 ** (bits - 1)), le=2 ** (bits - 1) - 1)]
    return Annotated[int, Field(ge=0, le=2**bits - 1)]


I8 = _bounded(8, True)
I16 = _bounded(16, True)
I32 = _bounded(32, True)
I64 = _bounded(64, True)
I128 = _bounded(128, True)
ISize = I64
U8 = _bounded(8, False)
U16 = _bounded(16, False)
U32 = _bounded(32, False)
U64 = _bounded(64, False)
U128 = _bounded(128, False)
USize = U64


def adapter_decoder(tp: Any) -> DecodeFn:
    """Build a decoder validating text against ``tp`` with pydantic (lax mode)."""
    adapter = TypeAdapter(tp)

    def _decode(text: str) -> Any:
        try:
            return adapter.validate_python(text)
        except ValidationError as e:
            raise ValueError(e.errors()[0]["msg"]) from None

    return _decode


# Integer text as Rust's str::parse accepts it: optional sign, ASCII digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def integer_decoder(tp: Any = int) -> DecodeFn:
    """Build a decoder for ``int`` (or a bounded ``int`` alias) that rejects
    whitespace, underscores and fractional text before pydantic sees it."""
    validate = adapter_decoder(tp)

    def _decode(text: str) -> int:
        if not text:
            raise ValueError("cannot parse integer from empty string")
        if not _INTEGER_RE.fullmatch(text):
            raise ValueError("invalid digit found in string")
        return validate(text)

    return _decode


def decode_text(text: str) -> str:
    return text


def decode_path(text: str) -> Path:
    return Path(text)


def decode_char(text: str) -> str:
    if not text:
        raise ValueError("cannot parse char from empty string")
    if len(text) > 1:
        raise ValueError("too many characters in string")
    return text


def decode_encoding(label: str) -> str:
    """Map an encoding label (``utf8``, ``latin1``, ``cp1252``...) to its canonical codec name."""
    try:
        return codecs.lookup(label.strip()).name
    except LookupError:
        raise ValueError("Unrecognized encoding") from None


Char = Annotated[str, Decoder(decode_char)]
EncodingLabel = Annotated[str, Decoder(decode_encoding)]


_DECODERS: dict[type, DecodeFn] = {
    str: decode_text,
    Path: decode_path,
    int: integer_decoder(),
    float: adapter_decoder(float),
    bool: adapter_decoder(bool),
}


def register_decoder(tp: type, fn: DecodeFn) -> None:
    """Register the decoder used for every scalar field annotated with ``tp``."""
    _DECODERS[tp] = fn


def decoder_for(tp: Any) -> DecodeFn:
    """Resolve the decoder for a scalar annotation.

    An explicit :class:`Decoder` marker wins, then the registry, then pydantic.
    Raises:
        TypeError: If pydantic cannot build a validator for ``tp`` either.
    """
    if get_origin(tp) is Annotated:
        for meta in get_args(tp)[1:]:
            if isinstance(meta, Decoder):
                return meta.fn
        if get_args(tp)[0] is int:
            return integer_decoder(tp)
    elif isinstance(tp, type) and tp in _DECODERS:
        return _DECODERS[tp]

    try:
        return adapter_decoder(tp)
    except PydanticUserError as e:
        raise TypeError(f"No decoder available for {tp!r}: {e}") from e
