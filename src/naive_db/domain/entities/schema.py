"""Table schema - the ordered column list that fixes a table's slot layout.

Column 0 is always the integer identifier. The kind of every column
determines its field width on disk, so a schema fully determines the slot
width of its table. Schemas are not persisted; the caller supplies the same
schema every time a table is connected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from naive_db.domain.value_objects import Atom, AtomKind, Float, Integer


@dataclass(frozen=True, slots=True)
class Column:
    """A named, typed column."""

    name: str
    kind: AtomKind

    def coerce(self, atom: Atom) -> Atom | None:
        """Return the atom as stored in this column, or None if incompatible.

        Integers widen to Float in FLOAT columns; TEXT columns accept both
        Text and Symbol.
        """
        if atom.kind is self.kind:
            return atom
        if self.kind is AtomKind.FLOAT and isinstance(atom, Integer):
            return Float(float(atom.value))
        if self.kind is AtomKind.TEXT and atom.kind is AtomKind.SYMBOL:
            return atom
        return None


@dataclass(frozen=True)
class TableSchema:
    """Ordered columns of a table.

    Example:
        >>> schema = TableSchema.of(("id", "integer"), ("name", "text"))
        >>> schema.index_of("NAME")
        1
    """

    columns: tuple[Column, ...]

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("A schema needs at least the identifier column")
        if self.columns[0].kind is not AtomKind.INTEGER:
            raise ValueError(
                f"Identifier column {self.columns[0].name!r} must be INTEGER, "
                f"got {self.columns[0].kind.name}"
            )
        seen: set[str] = set()
        for column in self.columns:
            key = column.name.casefold()
            if key in seen:
                raise ValueError(f"Duplicate column name: {column.name!r}")
            seen.add(key)

    @classmethod
    def of(cls, *columns: tuple[str, AtomKind | str]) -> TableSchema:
        """Build a schema from (name, kind) pairs; kinds may be given by value."""
        return cls(
            tuple(
                Column(name, kind if isinstance(kind, AtomKind) else AtomKind(kind.lower()))
                for name, kind in columns
            )
        )

    @property
    def identifier(self) -> Column:
        return self.columns[0]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def index_of(self, name: str) -> int | None:
        """Position of a column by case-insensitive name, or None."""
        key = name.casefold()
        for i, column in enumerate(self.columns):
            if column.name.casefold() == key:
                return i
        return None

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    def __getitem__(self, index: int) -> Column:
        return self.columns[index]


DEFAULT_SCHEMA = TableSchema.of(
    ("id", AtomKind.INTEGER),
    ("name", AtomKind.TEXT),
    ("debit", AtomKind.FLOAT),
)
