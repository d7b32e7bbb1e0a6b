"""File-based Table Store implementation.

This adapter implements the TableStore protocol over a single flat file.

File Format:
    - No header, footer or length prefix
    - Zero or more slots of ``slot_width`` bytes, one row per slot
    - Slots sorted by strictly ascending identifier
    - File length is always a multiple of ``slot_width``; anything else is
      reported as CorruptTableError when the table is opened

Lookup by identifier is a binary search over slot indices that decodes only
the identifier field of each slot it visits. Insert appends after the last
slot. Delete shifts every later slot down by one and truncates the tail.

Thread Safety:
    None. The store owns its file handle exclusively; no file locking is
    done, so only one process may open a table file at a time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterable

from naive_db.domain.entities import DEFAULT_SCHEMA, Row, TableSchema
from naive_db.domain.errors import CorruptTableError, DecodeError, NotFoundError
from naive_db.domain.services import PredicateEvaluator, RowCodec
from naive_db.domain.value_objects import WhereClause
from naive_db.infrastructure.logging import get_logger

logger = get_logger(__name__)


def read_trailing_slot(file: BinaryIO, slot_width: int) -> bytes | None:
    """Read the last slot of a table file.

    The last slot always starts at ``file length - slot_width``, so no
    backward scanning is needed.

    Returns:
        The slot bytes, or None if the file holds no complete slot.
    """
    size = file.seek(0, os.SEEK_END)
    if size < slot_width:
        return None
    file.seek(size - slot_width)
    return file.read(slot_width)


class FileTableStore:
    """File-based implementation of the TableStore protocol.

    Attributes:
        path: Path to the table file.
        slot_width: Size of each encoded row in bytes.
    """

    def __init__(
        self,
        path: str | Path,
        schema: TableSchema = DEFAULT_SCHEMA,
        row_codec: RowCodec | None = None,
        create: bool = True,
        sync_on_write: bool = False,
    ) -> None:
        """Open or create a table file.

        Args:
            path: Path to the table file.
            schema: Column layout of the table.
            row_codec: Codec for the schema (default widths if omitted).
            create: If True, create the file if it doesn't exist.
            sync_on_write: If True, fsync after every insert and delete.

        Raises:
            FileNotFoundError: If the file doesn't exist and create=False.
            CorruptTableError: If the file length is not a multiple of the
                slot width.
        """
        if row_codec is not None and row_codec.schema != schema:
            raise ValueError("row_codec was built for a different schema")

        self._path = Path(path)
        self._schema = schema
        self._codec = row_codec or RowCodec(schema)
        self._evaluator = PredicateEvaluator(schema)
        self._sync_on_write = sync_on_write
        self._file: BinaryIO | None = None

        if self._path.exists():
            self._file = open(self._path, "r+b")
        elif create:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self._path, "w+b")
        else:
            raise FileNotFoundError(f"Table file not found: {self._path}")

        size = self._size()
        if size % self.slot_width != 0:
            self._file.close()
            self._file = None
            logger.error(
                "table_corrupt",
                table=self.name,
                path=str(self._path),
                size=size,
                slot_width=self.slot_width,
            )
            raise CorruptTableError(
                f"Table {self.name!r} is corrupt: {size} bytes is not a multiple "
                f"of the {self.slot_width}-byte slot width"
            )

        logger.debug("table_opened", table=self.name, path=str(self._path), rows=self.row_count)

    @property
    def name(self) -> str:
        return self._path.stem

    @property
    def path(self) -> Path:
        return self._path

    @property
    def schema(self) -> TableSchema:
        return self._schema

    @property
    def slot_width(self) -> int:
        return self._codec.slot_width

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def row_count(self) -> int:
        return self._size() // self.slot_width

    def lookup_by_id(self, row_id: int) -> Row | None:
        """Binary search for a row by identifier.

        Returns:
            The decoded row, or None when absent (including negative and
            out-of-range identifiers).

        Raises:
            DecodeError: If a slot on the search path is unreadable.
        """
        index = self._locate(row_id)
        if index is None:
            return None
        return self._codec.decode(self._read_slot(index)).unwrap()

    def scan(self, predicate: WhereClause | None = None) -> list[Row]:
        """Decode every slot from offset 0 and keep the matching rows.

        Raises:
            DecodeError: If any slot is unreadable. Rows are never skipped.
            TypeMismatchError: If the predicate compares incompatible kinds.
        """
        file = self._require_open()
        match = self._evaluator.compile(predicate) if predicate is not None else None

        rows: list[Row] = []
        count = self.row_count
        file.seek(0)
        for index in range(count):
            slot = file.read(self.slot_width)
            decoded = self._codec.decode(slot)
            if not decoded.ok:
                raise DecodeError(f"Slot {index} of table {self.name!r}: {decoded.error}")
            row = decoded.value
            if match is None or match(row):
                rows.append(row)
        return rows

    def last_id(self) -> int | None:
        """Identifier of the last stored row, or None for an empty table."""
        slot = read_trailing_slot(self._require_open(), self.slot_width)
        if slot is None:
            return None
        return self._codec.decode_identifier(slot).unwrap()

    def insert(self, values: Iterable[object]) -> int:
        """Append a row, assigning the next identifier.

        The next identifier is the last stored row's identifier plus one
        (1 for an empty table). It is never derived from the row count,
        which would collide with surviving rows after a delete.

        Returns:
            The assigned identifier.
        """
        file = self._require_open()
        conformed = self._codec.conform(values).unwrap()

        last_id = self.last_id()
        row_id = 1 if last_id is None else last_id + 1

        slot = self._codec.encode(Row.with_id(row_id, conformed)).unwrap()
        file.seek(0, os.SEEK_END)
        file.write(slot)
        self._flush()

        logger.debug("row_inserted", table=self.name, row_id=row_id)
        return row_id

    def delete(self, row_id: int) -> bool:
        """Remove one row by shifting every later slot down one position.

        The tail is rewritten before the file is truncated, so an interrupted
        delete leaves duplicated bytes rather than lost rows.

        Raises:
            NotFoundError: If no row carries the identifier.
        """
        file = self._require_open()
        index = self._locate(row_id)
        if index is None:
            raise NotFoundError(f"No row with id {row_id} in table {self.name!r}")

        size = self._size()
        offset = index * self.slot_width

        file.seek(offset + self.slot_width)
        tail = file.read()

        file.seek(offset)
        file.write(tail)
        file.flush()

        file.truncate(size - self.slot_width)
        self._flush()

        logger.debug(
            "row_deleted",
            table=self.name,
            row_id=row_id,
            shifted=len(tail) // self.slot_width,
        )
        return True

    def sync(self) -> None:
        """Ensure all writes are persisted to stable storage."""
        if self._file is None:
            return
        self._file.flush()
        os.fsync(self._file.fileno())

    def close(self) -> None:
        """Flush and close the table file. Safe to call twice."""
        if self._file is None:
            return
        try:
            self._file.flush()
            if self._sync_on_write:
                os.fsync(self._file.fileno())
        finally:
            self._file.close()
            self._file = None
        logger.debug("table_closed", table=self.name)

    def _locate(self, row_id: int) -> int | None:
        """Slot index holding ``row_id``, found by binary search."""
        low = 0
        high = self.row_count - 1

        while low <= high:
            middle = (low + high) // 2
            middle_id = self._read_identifier(middle)

            if middle_id == row_id:
                return middle
            if middle_id < row_id:
                low = middle + 1
            else:
                high = middle - 1

        return None

    def _read_identifier(self, index: int) -> int:
        file = self._require_open()
        file.seek(index * self.slot_width)
        decoded = self._codec.decode_identifier(file.read(self._codec.identifier_width))
        if not decoded.ok:
            raise DecodeError(f"Slot {index} of table {self.name!r}: {decoded.error}")
        return decoded.value

    def _read_slot(self, index: int) -> bytes:
        file = self._require_open()
        file.seek(index * self.slot_width)
        slot = file.read(self.slot_width)
        if len(slot) != self.slot_width:
            raise DecodeError(
                f"Short read at slot {index}: got {len(slot)} bytes, expected {self.slot_width}"
            )
        return slot

    def _size(self) -> int:
        return self._require_open().seek(0, os.SEEK_END)

    def _flush(self) -> None:
        if self._file is None:
            return
        self._file.flush()
        if self._sync_on_write:
            os.fsync(self._file.fileno())

    def _require_open(self) -> BinaryIO:
        if self._file is None:
            raise IOError(f"Table {self.name!r} is closed")
        return self._file

    def __enter__(self) -> FileTableStore:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self.row_count} rows"
        return f"FileTableStore({self.name!r}, {state})"
