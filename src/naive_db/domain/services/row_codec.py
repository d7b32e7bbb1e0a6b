"""Row codec - whole rows to and from fixed-width slots.

A slot is every field's fixed-width encoding joined by the field delimiter
and terminated by the record delimiter:

    0000000001,"test"              ,0000000100.0000\n

Decoding is positional: field boundaries come from the schema, and the
delimiter expected at each boundary is checked, so a shifted or torn slot
is reported as DecodeError rather than misread. Text containing the
delimiter characters therefore round-trips unharmed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from naive_db.domain.entities import Row, TableSchema
from naive_db.domain.errors import DecodeError, TypeMismatchError
from naive_db.domain.services.atom_codec import AtomCodec
from naive_db.domain.value_objects import Atom, Err, Integer, Ok, Result, to_atom

if TYPE_CHECKING:
    from naive_db.infrastructure.config import CodecConfig


class RowCodec:
    """Encodes rows of one schema into slots of constant width."""

    def __init__(
        self,
        schema: TableSchema,
        atom_codec: AtomCodec | None = None,
        field_delimiter: str = ",",
        record_delimiter: str = "\n",
    ) -> None:
        self._schema = schema
        self._atoms = atom_codec or AtomCodec()
        self._field_delimiter = field_delimiter
        self._record_delimiter = record_delimiter

        field_sep = field_delimiter.encode("utf-8")
        record_sep = record_delimiter.encode("utf-8")

        # (start, end, delimiter expected at end) per column
        self._spans: list[tuple[int, int, bytes]] = []
        offset = 0
        for i, column in enumerate(schema):
            width = self._atoms.width_of(column.kind)
            separator = record_sep if i == len(schema) - 1 else field_sep
            self._spans.append((offset, offset + width, separator))
            offset += width + len(separator)
        self._slot_width = offset

    @classmethod
    def from_config(cls, schema: TableSchema, config: CodecConfig) -> RowCodec:
        return cls(
            schema,
            atom_codec=AtomCodec.from_config(config),
            field_delimiter=config.field_delimiter,
            record_delimiter=config.record_delimiter,
        )

    @property
    def schema(self) -> TableSchema:
        return self._schema

    @property
    def atom_codec(self) -> AtomCodec:
        return self._atoms

    @property
    def slot_width(self) -> int:
        """Bytes occupied by every encoded row."""
        return self._slot_width

    @property
    def identifier_width(self) -> int:
        """Bytes of the identifier field at the start of each slot."""
        return self._spans[0][1]

    def conform(self, values: Iterable[object]) -> Result[tuple[Atom, ...]]:
        """Check caller-supplied insert values against the non-identifier columns.

        Returns:
            Ok with the values as stored (integers widened in FLOAT columns),
            or Err(TypeMismatchError / UnsupportedAtomTypeError).
        """
        values = tuple(values)
        columns = self._schema.columns[1:]
        if len(values) != len(columns):
            return Err(
                TypeMismatchError(
                    f"Expected {len(columns)} values ({', '.join(c.name for c in columns)}), "
                    f"got {len(values)}"
                )
            )

        conformed: list[Atom] = []
        for column, value in zip(columns, values):
            wrapped = to_atom(value)
            if isinstance(wrapped, Err):
                return wrapped
            stored = column.coerce(wrapped.value)
            if stored is None:
                return Err(
                    TypeMismatchError(
                        f"Column {column.name!r} is {column.kind.name}, "
                        f"got {wrapped.value.kind.name}"
                    )
                )
            conformed.append(stored)
        return Ok(tuple(conformed))

    def encode(self, row: Row) -> Result[bytes]:
        """Encode a row into exactly ``slot_width`` bytes.

        Raises:
            ValueError: If the encoded slot is not ``slot_width`` bytes. This is
                an internal invariant, not a caller error.
        """
        if len(row) != len(self._schema):
            return Err(
                TypeMismatchError(f"Row has {len(row)} fields, schema has {len(self._schema)}")
            )

        fields: list[str] = []
        for column, atom in zip(self._schema, row):
            stored = column.coerce(atom)
            if stored is None:
                return Err(
                    TypeMismatchError(
                        f"Column {column.name!r} is {column.kind.name}, got {atom.kind.name}"
                    )
                )
            encoded = self._atoms.encode(stored)
            if isinstance(encoded, Err):
                return encoded
            fields.append(encoded.value)

        slot = (self._field_delimiter.join(fields) + self._record_delimiter).encode("utf-8")
        if len(slot) != self._slot_width:
            raise ValueError(f"Encoded row is {len(slot)} bytes, slot width is {self._slot_width}")
        return Ok(slot)

    def decode(self, slot: bytes) -> Result[Row]:
        """Decode one slot into a row."""
        if len(slot) != self._slot_width:
            return Err(DecodeError(f"Slot is {len(slot)} bytes, expected {self._slot_width}"))

        atoms: list[Atom] = []
        for column, (start, end, separator) in zip(self._schema, self._spans):
            if slot[end:end + len(separator)] != separator:
                return Err(
                    DecodeError(f"Missing delimiter after field {column.name!r} at byte {end}")
                )
            try:
                text = slot[start:end].decode("utf-8")
            except UnicodeDecodeError as e:
                return Err(DecodeError(f"Field {column.name!r} is not valid UTF-8: {e}"))

            atom = column.coerce(self._atoms.decode(text))
            if atom is None:
                return Err(
                    DecodeError(
                        f"Field {column.name!r} does not hold a {column.kind.name}: {text.strip()!r}"
                    )
                )
            atoms.append(atom)

        return Ok(Row(tuple(atoms)))

    def decode_identifier(self, data: bytes) -> Result[int]:
        """Decode only the identifier field from the start of a slot."""
        width = self.identifier_width
        if len(data) < width:
            return Err(DecodeError(f"Identifier needs {width} bytes, got {len(data)}"))
        try:
            text = data[:width].decode("utf-8")
        except UnicodeDecodeError as e:
            return Err(DecodeError(f"Identifier is not valid UTF-8: {e}"))

        atom = self._atoms.decode(text)
        if not isinstance(atom, Integer):
            return Err(DecodeError(f"Identifier field holds {text.strip()!r}"))
        return Ok(atom.value)
