"""Typed success/failure values.

Codec and parser operations return ``Ok(value)`` or ``Err(error)`` instead
of raising, so callers decide explicitly what a failure means at their
level (the table store turns a decode Err into DecodeError, the session
turns a parse Err into a failed ExecutionResult).

Example:
    >>> result = codec.encode(Integer(7))
    >>> if isinstance(result, Err):
    ...     handle(result.error)
    >>> result.unwrap()
    '0000000007'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from naive_db.domain.errors import DatabaseError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """Failed outcome carrying a typed error."""

    error: DatabaseError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the carried error."""
        raise self.error


Result = Union[Ok[T], Err]
