"""Predicate evaluator for non-indexed scans.

Applies a WhereClause to rows of one schema. Operands are resolved per row:
a FieldRef takes the row's value at that position, any other operand is a
literal. Symbol literals that name a column are bound to FieldRefs first,
so ``debit = 25.5`` compares the debit field while ``name = foo`` (with no
``foo`` column) compares against the bare token ``foo``.

Comparison rules by kind:

    Integer/Float  vs Integer/Float  numeric
    Text/Symbol    vs Text/Symbol    lexical (code point order)
    anything else                    TypeMismatchError

No cross-kind coercion is attempted, so ``name > 3`` fails loudly instead
of silently matching nothing.
"""

from __future__ import annotations

from typing import Callable

from naive_db.domain.entities import Row, TableSchema
from naive_db.domain.errors import TypeMismatchError
from naive_db.domain.value_objects import (
    Atom,
    ComparisonOp,
    FieldRef,
    Integer,
    Operand,
    Symbol,
    WhereClause,
)


class PredicateEvaluator:
    """Evaluates where-clauses against rows of a schema."""

    def __init__(self, schema: TableSchema) -> None:
        self._schema = schema

    @property
    def schema(self) -> TableSchema:
        return self._schema

    def bind(self, clause: WhereClause) -> WhereClause:
        """Resolve column-naming symbols to FieldRefs and validate FieldRefs.

        Raises:
            TypeMismatchError: If a FieldRef points outside the schema.
        """
        return WhereClause(
            left=self._bind_operand(clause.left),
            op=clause.op,
            right=self._bind_operand(clause.right),
        )

    def compile(self, clause: WhereClause) -> Callable[[Row], bool]:
        """Bind once and return a row filter."""
        bound = self.bind(clause)

        def predicate(row: Row) -> bool:
            return self.compare(
                _resolve(bound.left, row), bound.op, _resolve(bound.right, row)
            )

        return predicate

    def matches(self, clause: WhereClause, row: Row) -> bool:
        """Check a single row against a clause."""
        return self.compile(clause)(row)

    @staticmethod
    def compare(left: Atom, op: ComparisonOp, right: Atom) -> bool:
        """Compare two atoms.

        Raises:
            TypeMismatchError: If the atoms are not both numeric or both textual.
        """
        if left.kind.is_numeric and right.kind.is_numeric:
            return op.apply(left.value, right.value)
        if left.kind.is_textual and right.kind.is_textual:
            return op.apply(left.value, right.value)
        raise TypeMismatchError(
            f"Cannot compare {left.kind.name} {left.value!r} with {right.kind.name} {right.value!r}"
        )

    def identifier_lookup(self, clause: WhereClause) -> int | None:
        """Return the target id when the clause is exactly ``id = <integer>``.

        Either operand order is accepted. Any other clause returns None and
        must be answered by a scan.
        """
        bound = self.bind(clause)
        if bound.op is not ComparisonOp.EQ:
            return None
        for field, literal in ((bound.left, bound.right), (bound.right, bound.left)):
            if isinstance(field, FieldRef) and field.index == 0 and isinstance(literal, Integer):
                return literal.value
        return None

    def _bind_operand(self, operand: Operand) -> Operand:
        if isinstance(operand, FieldRef):
            if not 0 <= operand.index < len(self._schema):
                raise TypeMismatchError(
                    f"Field #{operand.index} is outside a {len(self._schema)}-column schema"
                )
            return operand
        if isinstance(operand, Symbol):
            index = self._schema.index_of(operand.value)
            if index is not None:
                return FieldRef(index, self._schema[index].name)
        return operand


def _resolve(operand: Operand, row: Row) -> Atom:
    if isinstance(operand, FieldRef):
        return row[operand.index]
    return operand
