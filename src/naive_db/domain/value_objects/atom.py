"""Atoms - the closed set of scalar values a row can hold.

An atom is one of four kinds:

    Integer  - whole number, used for identifiers and integer columns
    Float    - real number, persisted with a fixed number of decimals
    Text     - quoted string, truncated to the text field width on encode
    Symbol   - bare (unquoted) token, e.g. a column name used as a value

Atoms are immutable and compare by kind and value, so ``Integer(1)`` is not
equal to ``Float(1.0)``. Ordering between kinds is the predicate
evaluator's business, not the atoms'.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from naive_db.domain.errors import UnsupportedAtomTypeError
from naive_db.domain.value_objects.result import Err, Ok, Result


class AtomKind(Enum):
    """Tag identifying the kind of an atom or of a schema column."""

    INTEGER = "integer"
    FLOAT = "float"
    TEXT = "text"
    SYMBOL = "symbol"

    @property
    def is_numeric(self) -> bool:
        return self in (AtomKind.INTEGER, AtomKind.FLOAT)

    @property
    def is_textual(self) -> bool:
        return self in (AtomKind.TEXT, AtomKind.SYMBOL)


@dataclass(frozen=True, slots=True)
class Integer:
    value: int

    kind: ClassVar[AtomKind] = AtomKind.INTEGER


@dataclass(frozen=True, slots=True)
class Float:
    value: float

    kind: ClassVar[AtomKind] = AtomKind.FLOAT


@dataclass(frozen=True, slots=True)
class Text:
    value: str

    kind: ClassVar[AtomKind] = AtomKind.TEXT


@dataclass(frozen=True, slots=True)
class Symbol:
    value: str

    kind: ClassVar[AtomKind] = AtomKind.SYMBOL


Atom = Union[Integer, Float, Text, Symbol]

ATOM_TYPES: tuple[type, ...] = (Integer, Float, Text, Symbol)


def is_atom(value: object) -> bool:
    """Check whether a value is one of the four atom kinds."""
    return isinstance(value, ATOM_TYPES)


def to_atom(value: object) -> Result[Atom]:
    """Wrap a plain Python scalar as an atom.

    ``int`` becomes Integer, ``float`` becomes Float and ``str`` becomes
    Text; atoms pass through unchanged. Anything else, ``bool`` included,
    is rejected.
    """
    if is_atom(value):
        return Ok(value)  # type: ignore[arg-type]
    if isinstance(value, bool):
        return Err(UnsupportedAtomTypeError(f"Unsupported atom type: {type(value).__name__}"))
    if isinstance(value, int):
        return Ok(Integer(value))
    if isinstance(value, float):
        return Ok(Float(value))
    if isinstance(value, str):
        return Ok(Text(value))
    return Err(
        UnsupportedAtomTypeError(f"Unexpected atom {value!r} of type {type(value).__name__}")
    )
