"""Value objects for the naive_db domain.

Value objects are immutable types that represent domain concepts.
They have no identity - two value objects with the same attributes are equal.

Exports:
    Atoms:
        - Integer, Float, Text, Symbol: The four scalar kinds
        - Atom: Union of the four kinds
        - AtomKind: Kind tag shared by atoms and schema columns
        - to_atom: Wrap a plain Python scalar

    Results:
        - Ok, Err, Result: Typed outcome of codec and parser operations

    Predicates:
        - ComparisonOp: Supported comparison operators
        - FieldRef: Reference to a row field
        - WhereClause: (left, op, right) comparison
"""

from naive_db.domain.value_objects.atom import (
    ATOM_TYPES,
    Atom,
    AtomKind,
    Float,
    Integer,
    Symbol,
    Text,
    is_atom,
    to_atom,
)
from naive_db.domain.value_objects.predicate import (
    ComparisonOp,
    FieldRef,
    Operand,
    WhereClause,
)
from naive_db.domain.value_objects.result import Err, Ok, Result

__all__ = [
    # Atoms
    "ATOM_TYPES",
    "Atom",
    "AtomKind",
    "Integer",
    "Float",
    "Text",
    "Symbol",
    "is_atom",
    "to_atom",
    # Results
    "Ok",
    "Err",
    "Result",
    # Predicates
    "ComparisonOp",
    "FieldRef",
    "Operand",
    "WhereClause",
]
