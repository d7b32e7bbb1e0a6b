"""Row entity - one record of a table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from naive_db.domain.value_objects import Atom, Integer, to_atom


@dataclass(frozen=True, slots=True)
class Row:
    """An ordered sequence of atoms whose first field is the identifier.

    Rows are identified by ``id``: the store assigns it on insert and keeps
    rows in ascending id order on disk.

    Example:
        >>> row = Row.from_python([1, "test", 100.0])
        >>> row.id
        1
        >>> row[1]
        Text(value='test')
    """

    values: tuple[Atom, ...]

    def __post_init__(self) -> None:
        if not self.values or not isinstance(self.values[0], Integer):
            raise ValueError(f"Row must start with an Integer identifier, got {self.values!r}")

    @property
    def id(self) -> int:
        return self.values[0].value  # type: ignore[return-value]

    @classmethod
    def with_id(cls, row_id: int, values: Iterable[Atom]) -> Row:
        """Prepend an identifier to caller-supplied field values."""
        return cls((Integer(row_id), *values))

    @classmethod
    def from_python(cls, values: Iterable[Any]) -> Row:
        """Build a row from plain Python scalars.

        Raises:
            UnsupportedAtomTypeError: If a value is not int, float or str.
        """
        return cls(tuple(to_atom(value).unwrap() for value in values))

    def to_python(self) -> list[Any]:
        """Return the raw field values."""
        return [atom.value for atom in self.values]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Atom]:
        return iter(self.values)

    def __getitem__(self, index: int) -> Atom:
        return self.values[index]
