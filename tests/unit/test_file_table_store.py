"""Unit tests for FileTableStore."""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from naive_db.adapters.outbound import FileTableStore, read_trailing_slot
from naive_db.domain.entities import DEFAULT_SCHEMA, Row, TableSchema
from naive_db.domain.errors import (
    CorruptTableError,
    DecodeError,
    NotFoundError,
    TypeMismatchError,
)
from naive_db.domain.services import RowCodec
from naive_db.domain.value_objects import Float, Integer, Symbol, Text, WhereClause

SLOT_WIDTH = 48


class TestFileTableStore:
    """Tests for FileTableStore."""

    @pytest.fixture
    def store(self, seeded_table: Path) -> Generator[FileTableStore, None, None]:
        """Open the seeded five-row table."""
        s = FileTableStore(seeded_table)
        yield s
        s.close()

    @pytest.fixture
    def empty_store(self, temp_dir: Path) -> Generator[FileTableStore, None, None]:
        s = FileTableStore(temp_dir / "empty.csv")
        yield s
        s.close()

    def _ids(self, path: Path, codec: RowCodec) -> list[int]:
        data = path.read_bytes()
        assert len(data) % SLOT_WIDTH == 0
        return [
            codec.decode_identifier(data[offset:offset + SLOT_WIDTH]).unwrap()
            for offset in range(0, len(data), SLOT_WIDTH)
        ]

    def test_creation_new_file(self, temp_dir: Path) -> None:
        """A missing table file is created empty, parents included."""
        path = temp_dir / "nested" / "new.csv"
        store = FileTableStore(path)

        assert path.exists()
        assert path.stat().st_size == 0
        assert store.row_count == 0
        assert store.name == "new"
        assert store.slot_width == SLOT_WIDTH

        store.close()

    def test_no_create(self, temp_dir: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileTableStore(temp_dir / "missing.csv", create=False)

    def test_corrupt_file(self, temp_dir: Path) -> None:
        """A size that is not a multiple of the slot width is rejected."""
        path = temp_dir / "corrupt.csv"
        path.write_bytes(b"x" * (SLOT_WIDTH + 5))

        with pytest.raises(CorruptTableError):
            FileTableStore(path)

    def test_codec_schema_mismatch(self, temp_dir: Path) -> None:
        other = TableSchema.of(("id", "integer"), ("n", "integer"))

        with pytest.raises(ValueError):
            FileTableStore(temp_dir / "x.csv", row_codec=RowCodec(other))

    def test_reopen_existing(self, seeded_table: Path) -> None:
        with FileTableStore(seeded_table) as store:
            assert store.row_count == 5
            assert store.last_id() == 5

    @pytest.mark.parametrize("row_id", [1, 2, 3, 4, 5])
    def test_lookup_every_id(
        self, store: FileTableStore, seed_rows: list[list[object]], row_id: int
    ) -> None:
        """Binary search finds every stored row."""
        row = store.lookup_by_id(row_id)

        assert row is not None
        assert row.to_python() == seed_rows[row_id - 1]

    @pytest.mark.parametrize("row_id", [-1, 0, 6, 99])
    def test_lookup_absent(self, store: FileTableStore, row_id: int) -> None:
        """Negative and out-of-range ids are not found."""
        assert store.lookup_by_id(row_id) is None

    def test_lookup_empty(self, empty_store: FileTableStore) -> None:
        assert empty_store.lookup_by_id(1) is None

    def test_scan_all(self, store: FileTableStore, seed_rows: list[list[object]]) -> None:
        assert [row.to_python() for row in store.scan()] == seed_rows

    def test_scan_predicate(self, store: FileTableStore) -> None:
        rows = store.scan(WhereClause.of(Symbol("debit"), "=", Float(25.5)))

        assert [row.id for row in rows] == [5]

    def test_scan_type_mismatch(self, store: FileTableStore) -> None:
        with pytest.raises(TypeMismatchError):
            store.scan(WhereClause.of(Symbol("name"), "<", Integer(1)))

    def test_scan_undecodable_slot(self, seeded_table: Path) -> None:
        """A damaged slot fails the scan instead of being skipped."""
        data = bytearray(seeded_table.read_bytes())
        data[2 * SLOT_WIDTH + 10] = ord("|")
        seeded_table.write_bytes(bytes(data))

        with FileTableStore(seeded_table) as store:
            with pytest.raises(DecodeError):
                store.scan()

    def test_lookup_undecodable_identifier(self, seeded_table: Path) -> None:
        """An unreadable id on the search path fails the lookup."""
        data = bytearray(seeded_table.read_bytes())
        data[2 * SLOT_WIDTH:2 * SLOT_WIDTH + 10] = b"garbage!!!"
        seeded_table.write_bytes(bytes(data))

        with FileTableStore(seeded_table) as store:
            with pytest.raises(DecodeError):
                store.lookup_by_id(1)

    def test_lookup_undecodable_row(self, seeded_table: Path) -> None:
        """The located slot must decode in full, not just its id."""
        data = bytearray(seeded_table.read_bytes())
        data[32:47] = b'"oops"' + b" " * 9
        seeded_table.write_bytes(bytes(data))

        with FileTableStore(seeded_table) as store:
            assert store.lookup_by_id(2) is not None
            with pytest.raises(DecodeError):
                store.lookup_by_id(1)

    def test_insert_into_empty(self, empty_store: FileTableStore) -> None:
        """The first identifier is 1."""
        assert empty_store.insert([Text("a"), Float(1.0)]) == 1
        assert empty_store.insert(["b", 2.0]) == 2
        assert empty_store.row_count == 2

    def test_insert_appends(self, store: FileTableStore, row_codec: RowCodec) -> None:
        """Insert assigns last id + 1 and writes one slot at the end."""
        row_id = store.insert(["baz", 77.77])

        assert row_id == 6
        assert store.path.stat().st_size == 6 * SLOT_WIDTH
        row = store.lookup_by_id(6)
        assert row is not None
        assert row.to_python() == [6, "baz", 77.77]
        assert self._ids(store.path, row_codec) == [1, 2, 3, 4, 5, 6]

    def test_insert_rejects_bad_values(self, store: FileTableStore) -> None:
        with pytest.raises(TypeMismatchError):
            store.insert([1.0, "x"])
        assert store.row_count == 5

    def test_no_id_reuse_after_delete(self, store: FileTableStore) -> None:
        """Ids come from the last row, not the row count."""
        store.delete(2)

        assert store.row_count == 4
        assert store.insert(["new", 1.0]) == 6

    def test_deleting_last_row_frees_its_id(self, store: FileTableStore) -> None:
        """The next id follows the last stored row, so the top id comes back."""
        store.delete(5)

        assert store.insert(["new", 1.0]) == 5

    @pytest.mark.parametrize(
        ("row_id", "remaining"),
        [
            (1, [2, 3, 4, 5]),
            (3, [1, 2, 4, 5]),
            (5, [1, 2, 3, 4]),
        ],
    )
    def test_delete(
        self,
        seeded_table: Path,
        store: FileTableStore,
        row_codec: RowCodec,
        row_id: int,
        remaining: list[int],
    ) -> None:
        """Delete removes exactly one slot and keeps the others in order."""
        original = seeded_table.read_bytes()

        assert store.delete(row_id) is True

        expected = original[: (row_id - 1) * SLOT_WIDTH] + original[row_id * SLOT_WIDTH :]
        assert seeded_table.read_bytes() == expected
        assert self._ids(seeded_table, row_codec) == remaining
        assert store.lookup_by_id(row_id) is None
        for other in remaining:
            assert store.lookup_by_id(other) is not None

    def test_delete_absent(self, store: FileTableStore) -> None:
        with pytest.raises(NotFoundError):
            store.delete(99)
        assert store.row_count == 5

    def test_delete_everything(self, store: FileTableStore) -> None:
        for row_id in (3, 1, 5, 2, 4):
            store.delete(row_id)

        assert store.row_count == 0
        assert store.path.stat().st_size == 0
        assert store.insert(["again", 0.0]) == 1

    def test_size_invariant(self, store: FileTableStore) -> None:
        """Every mutation leaves a whole number of slots."""
        for step in range(10):
            store.insert([f"row{step}", float(step)])
            if step % 3 == 0:
                store.delete(store.scan()[0].id)
            assert store.path.stat().st_size % SLOT_WIDTH == 0

        ids = [row.id for row in store.scan()]
        assert ids == sorted(ids)
        assert len(ids) == len(set(ids))

    def test_custom_schema(self, temp_dir: Path) -> None:
        schema = TableSchema.of(("id", "integer"), ("qty", "integer"))
        with FileTableStore(temp_dir / "stock.csv", schema=schema) as store:
            store.insert([Integer(3)])
            store.insert([7])

            assert store.slot_width == 22
            assert store.scan()[1] == Row((Integer(2), Integer(7)))

    def test_close_idempotent(self, temp_dir: Path) -> None:
        store = FileTableStore(temp_dir / "c.csv")
        store.close()
        store.close()

        assert store.closed
        with pytest.raises(IOError):
            store.scan()

    def test_sync(self, store: FileTableStore) -> None:
        store.insert(["synced", 1.0])
        store.sync()

        with FileTableStore(store.path, create=False) as reopened:
            assert reopened.row_count == 6

    def test_sync_on_write(self, temp_dir: Path) -> None:
        with FileTableStore(temp_dir / "s.csv", sync_on_write=True) as store:
            store.insert(["x", 1.0])
            store.delete(1)
            assert store.row_count == 0


class TestReadTrailingSlot:
    """Tests for read_trailing_slot."""

    def test_last_slot(self, seeded_table: Path, row_codec: RowCodec) -> None:
        with open(seeded_table, "rb") as f:
            slot = read_trailing_slot(f, SLOT_WIDTH)

        assert slot is not None
        assert row_codec.decode(slot).unwrap().id == 5

    def test_empty_file(self, temp_dir: Path) -> None:
        path = temp_dir / "empty.csv"
        path.write_bytes(b"")

        with open(path, "rb") as f:
            assert read_trailing_slot(f, SLOT_WIDTH) is None

    def test_default_schema_width(self) -> None:
        assert RowCodec(DEFAULT_SCHEMA).slot_width == SLOT_WIDTH
