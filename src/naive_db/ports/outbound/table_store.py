"""Table Store port for row-level persistence of one table.

This outbound port defines the contract the session relies on to read and
mutate a table. The shipped implementation is a flat file of fixed-width
slots, but the session only needs the operations below.

The table store is responsible for:
- Keeping rows in strictly ascending identifier order
- Assigning identifiers on insert
- Exclusive ownership of the underlying storage for its lifetime
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Iterable, Protocol

from naive_db.domain.entities import Row, TableSchema
from naive_db.domain.value_objects import WhereClause


class TableStore(Protocol):
    """Protocol for single-table storage.

    Thread Safety:
        None. A store is used from one thread, and one process owns a
        table at a time.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the table name."""
        ...

    @property
    @abstractmethod
    def schema(self) -> TableSchema:
        """Return the schema rows are encoded with."""
        ...

    @property
    @abstractmethod
    def row_count(self) -> int:
        """Return the number of stored rows."""
        ...

    @abstractmethod
    def lookup_by_id(self, row_id: int) -> Row | None:
        """Find a row by identifier in O(log n).

        Returns:
            The row, or None if no row carries that identifier.

        Raises:
            DecodeError: If a slot on the search path is unreadable.
        """
        ...

    @abstractmethod
    def scan(self, predicate: WhereClause | None = None) -> list[Row]:
        """Return every row matching the predicate, in identifier order.

        Raises:
            DecodeError: If any slot is unreadable.
            TypeMismatchError: If the predicate compares incompatible kinds.
        """
        ...

    @abstractmethod
    def insert(self, values: Iterable[object]) -> int:
        """Append a row and return its assigned identifier.

        Args:
            values: Field values for every column except the identifier.

        Raises:
            TypeMismatchError: If the values do not fit the schema.
            FieldOverflowError: If a number is too wide for its field.
        """
        ...

    @abstractmethod
    def delete(self, row_id: int) -> bool:
        """Remove the row with the given identifier.

        Returns:
            True once the row is removed.

        Raises:
            NotFoundError: If no row carries that identifier.
        """
        ...

    @abstractmethod
    def sync(self) -> None:
        """Ensure all writes are persisted to stable storage."""
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the underlying storage. Further use is an error."""
        ...
