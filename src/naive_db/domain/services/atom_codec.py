"""Atom codec - fixed-width text encoding of single atoms.

Wire forms (default widths):

    Integer  zero-padded decimal, 10 chars        0000000042 / -000000042
    Float    zero-padded, 4 decimals, 15 chars    0000000100.0000
    Text     quoted, space-padded, 20 bytes       "test"
    Symbol   bare token, space-padded, 20 bytes   foo

Text content is truncated to ``text_width - 2`` UTF-8 bytes so the quotes
always fit. Floats are lossy: they round-trip to the value
rounded to ``float_precision`` decimals.

Decoding is total: a token that is neither a number nor quote-delimited is
a Symbol.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING

from naive_db.domain.errors import FieldOverflowError, UnsupportedAtomTypeError
from naive_db.domain.value_objects import (
    Atom,
    AtomKind,
    Err,
    Float,
    Integer,
    Ok,
    Result,
    Symbol,
    Text,
    is_atom,
    to_atom,
)

if TYPE_CHECKING:
    from naive_db.infrastructure.config import CodecConfig


_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
QUOTE_CHARS = ('"', "'")


class AtomCodec:
    """Encodes atoms to fixed-width text and decodes them back."""

    def __init__(
        self,
        integer_width: int = 10,
        float_width: int = 15,
        float_precision: int = 4,
        text_width: int = 20,
        quote_char: str = '"',
    ) -> None:
        if text_width < 3:
            raise ValueError(f"text_width must leave room for quotes, got {text_width}")
        if quote_char not in QUOTE_CHARS:
            raise ValueError(f"quote_char must be one of {QUOTE_CHARS}, got {quote_char!r}")

        self._integer_width = integer_width
        self._float_width = float_width
        self._float_precision = float_precision
        self._text_width = text_width
        self._quote = quote_char

    @classmethod
    def from_config(cls, config: CodecConfig) -> AtomCodec:
        return cls(
            integer_width=config.integer_width,
            float_width=config.float_width,
            float_precision=config.float_precision,
            text_width=config.text_width,
            quote_char=config.quote_char,
        )

    @property
    def max_text_bytes(self) -> int:
        """Longest text content, in UTF-8 bytes, that survives encoding."""
        return self._text_width - 2

    def width_of(self, kind: AtomKind) -> int:
        """Field width in bytes for a column of the given kind."""
        if kind is AtomKind.INTEGER:
            return self._integer_width
        if kind is AtomKind.FLOAT:
            return self._float_width
        return self._text_width

    def encode(self, atom: object) -> Result[str]:
        """Encode an atom to its fixed-width form.

        Returns:
            Ok with a string exactly ``width_of(atom.kind)`` UTF-8 bytes long,
            Err(UnsupportedAtomTypeError) for non-atoms, or
            Err(FieldOverflowError) for numbers wider than their field.
        """
        if not is_atom(atom):
            return Err(
                UnsupportedAtomTypeError(
                    f"Unexpected atom {atom!r} of type {type(atom).__name__}"
                )
            )

        if isinstance(atom, Integer):
            encoded = f"{atom.value:0{self._integer_width}d}"
            if len(encoded) > self._integer_width:
                return Err(
                    FieldOverflowError(
                        f"Integer {atom.value} exceeds {self._integer_width} characters"
                    )
                )
            return Ok(encoded)

        if isinstance(atom, Float):
            if not math.isfinite(atom.value):
                return Err(FieldOverflowError(f"Float {atom.value} is not finite"))
            encoded = f"{atom.value:0{self._float_width}.{self._float_precision}f}"
            if len(encoded) > self._float_width:
                return Err(
                    FieldOverflowError(
                        f"Float {atom.value} exceeds {self._float_width} characters"
                    )
                )
            return Ok(encoded)

        if isinstance(atom, Text):
            content = _truncate_utf8(atom.value, self.max_text_bytes)
            return Ok(self._pad(f"{self._quote}{content}{self._quote}"))

        bare = _truncate_utf8(atom.value, self._text_width)
        if bare != bare.strip() or self.decode(bare) != Symbol(bare):
            return Err(
                UnsupportedAtomTypeError(f"Symbol {atom.value!r} cannot be stored as a bare token")
            )
        return Ok(self._pad(bare))

    def decode(self, text: str) -> Atom:
        """Decode a field, trying integer, then float, then quoted text.

        Anything else becomes a Symbol of the bare token.
        """
        token = text.strip()
        if _INTEGER_PATTERN.fullmatch(token):
            return Integer(int(token))
        if _FLOAT_PATTERN.fullmatch(token):
            return Float(float(token))
        if len(token) >= 2 and token[0] in QUOTE_CHARS and token[-1] == token[0]:
            return Text(token[1:-1])
        return Symbol(token)

    def from_python(self, value: object) -> Result[Atom]:
        """Wrap a plain Python scalar as an atom."""
        return to_atom(value)

    def _pad(self, text: str) -> str:
        return text + " " * (self._text_width - len(text.encode("utf-8")))


def _truncate_utf8(text: str, limit: int) -> str:
    """Cut text to at most ``limit`` UTF-8 bytes without splitting a character."""
    raw = text.encode("utf-8")
    if len(raw) <= limit:
        return text
    return raw[:limit].decode("utf-8", errors="ignore")
