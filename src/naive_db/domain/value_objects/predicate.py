"""Where-clause value objects.

A where-clause is a ``(left, op, right)`` triple. Each operand is either a
literal atom or a FieldRef naming a column of the row under test. Bare
Symbol operands stay symbols until the predicate evaluator binds them
against a schema.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from naive_db.domain.errors import UnsupportedOperatorError
from naive_db.domain.value_objects.atom import Atom, Text


class ComparisonOp(Enum):
    """Comparison operators supported in where-clauses."""

    EQ = "="
    NE = "<>"
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="

    @classmethod
    def from_token(cls, token: str) -> ComparisonOp:
        """Resolve an operator token.

        Raises:
            UnsupportedOperatorError: If the token is not a known operator.
        """
        token = token.strip()
        if token in _ALIASES:
            return _ALIASES[token]
        try:
            return cls(token)
        except ValueError:
            raise UnsupportedOperatorError(f"Unsupported operator: {token!r}") from None

    def apply(self, left: Any, right: Any) -> bool:
        """Apply the operator to two already-compatible Python values."""
        return _FUNCTIONS[self](left, right)


_ALIASES: dict[str, ComparisonOp] = {
    "==": ComparisonOp.EQ,
    "!=": ComparisonOp.NE,
}

_FUNCTIONS: dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQ: operator.eq,
    ComparisonOp.NE: operator.ne,
    ComparisonOp.LT: operator.lt,
    ComparisonOp.GT: operator.gt,
    ComparisonOp.LE: operator.le,
    ComparisonOp.GE: operator.ge,
}


@dataclass(frozen=True, slots=True)
class FieldRef:
    """Reference to a row field by position, optionally carrying its name."""

    index: int
    name: str | None = None

    def __str__(self) -> str:
        return self.name if self.name is not None else f"#{self.index}"


Operand = Union[Atom, FieldRef]


@dataclass(frozen=True, slots=True)
class WhereClause:
    """A single comparison between two operands."""

    left: Operand
    op: ComparisonOp
    right: Operand

    @classmethod
    def of(cls, left: Operand, op: ComparisonOp | str, right: Operand) -> WhereClause:
        """Build a clause, resolving a string operator token."""
        if not isinstance(op, ComparisonOp):
            op = ComparisonOp.from_token(op)
        return cls(left=left, op=op, right=right)

    def __str__(self) -> str:
        return f"{_render(self.left)} {self.op.value} {_render(self.right)}"


def _render(operand: Operand) -> str:
    if isinstance(operand, FieldRef):
        return str(operand)
    if isinstance(operand, Text):
        return repr(operand.value)
    return str(operand.value)
