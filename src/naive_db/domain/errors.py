"""Error taxonomy for naive_db.

Every failure that can reach a caller is a subclass of DatabaseError and
carries an ErrorKind tag, so callers holding an Err result or an
ExecutionResult can branch on ``error.kind`` without isinstance chains.

All of these are recoverable at the statement boundary: the session
reports them and stays usable.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(Enum):
    """Kinds of failure surfaced by the engine."""

    CORRUPT_TABLE = "corrupt_table"
    NOT_FOUND = "not_found"
    UNSUPPORTED_OPERATOR = "unsupported_operator"
    TYPE_MISMATCH = "type_mismatch"
    UNSUPPORTED_ATOM_TYPE = "unsupported_atom_type"
    MALFORMED_STATEMENT = "malformed_statement"
    DECODE_ERROR = "decode_error"
    FIELD_OVERFLOW = "field_overflow"
    TABLE_NOT_CONNECTED = "table_not_connected"


class DatabaseError(Exception):
    """Base class for all engine errors."""

    kind: ClassVar[ErrorKind]


class CorruptTableError(DatabaseError):
    """Table file length is not a multiple of the slot width."""

    kind = ErrorKind.CORRUPT_TABLE


class NotFoundError(DatabaseError):
    """No row carries the requested identifier."""

    kind = ErrorKind.NOT_FOUND


class UnsupportedOperatorError(DatabaseError):
    """Comparison operator or predicate form is not supported."""

    kind = ErrorKind.UNSUPPORTED_OPERATOR


class TypeMismatchError(DatabaseError):
    """Atoms of incompatible kinds were compared, or a row violates its schema."""

    kind = ErrorKind.TYPE_MISMATCH


class UnsupportedAtomTypeError(DatabaseError):
    """Value is not one of Integer, Float, Text or Symbol."""

    kind = ErrorKind.UNSUPPORTED_ATOM_TYPE


class MalformedStatementError(DatabaseError):
    """Statement text does not match any recognized command shape."""

    kind = ErrorKind.MALFORMED_STATEMENT


class DecodeError(DatabaseError):
    """A stored slot could not be decoded. Indicates corruption."""

    kind = ErrorKind.DECODE_ERROR


class FieldOverflowError(DatabaseError):
    """Numeric value does not fit in its fixed-width field."""

    kind = ErrorKind.FIELD_OVERFLOW


class TableNotConnectedError(DatabaseError):
    """Statement targets a table that has not been connected."""

    kind = ErrorKind.TABLE_NOT_CONNECTED
