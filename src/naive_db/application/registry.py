"""Table registry - the open table handles owned by one session.

Maps table names to open FileTableStore handles. Each Session holds its
own registry, so there is no process-wide table state; two sessions must
not open the same table file at once.
"""

from __future__ import annotations

import re
from typing import Iterator

from naive_db.adapters.outbound import FileTableStore
from naive_db.domain.entities import DEFAULT_SCHEMA, TableSchema
from naive_db.domain.errors import CorruptTableError, TableNotConnectedError
from naive_db.domain.services import RowCodec
from naive_db.infrastructure.config import Config
from naive_db.infrastructure.logging import get_logger
from naive_db.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)

_TABLE_NAME = re.compile(r"[.\w-]+")


class TableRegistry:
    """Open tables keyed by name."""

    def __init__(self, config: Config, metrics: MetricsRegistry) -> None:
        self._config = config
        self._metrics = metrics
        self._tables: dict[str, FileTableStore] = {}

    def open(self, table_name: str, schema: TableSchema | None = None) -> FileTableStore:
        """Open (creating if absent) a table, or return the handle already open.

        Raises:
            ValueError: If the name is not a plain file name, or the table is
                already open with a different schema.
            CorruptTableError: If the table file fails size validation.
        """
        existing = self._tables.get(table_name)
        if existing is not None:
            if schema is not None and schema != existing.schema:
                raise ValueError(f"Table {table_name!r} is already open with another schema")
            return existing

        if not _TABLE_NAME.fullmatch(table_name) or set(table_name) == {"."}:
            raise ValueError(f"Invalid table name: {table_name!r}")

        schema = schema or DEFAULT_SCHEMA
        try:
            store = FileTableStore(
                self._config.table_path(table_name),
                schema=schema,
                row_codec=RowCodec.from_config(schema, self._config.codec),
                sync_on_write=self._config.storage.sync_on_write,
            )
        except CorruptTableError:
            self._metrics.corrupt_tables_total.inc()
            raise

        self._tables[table_name] = store
        self._metrics.tables_open.inc()
        logger.info(
            "table_connected",
            table=table_name,
            path=str(store.path),
            rows=store.row_count,
            slot_width=store.slot_width,
        )
        return store

    def get(self, table_name: str) -> FileTableStore:
        """Return an open table.

        Raises:
            TableNotConnectedError: If the table has not been opened.
        """
        store = self._tables.get(table_name)
        if store is None:
            raise TableNotConnectedError(f"Table {table_name!r} is not connected")
        return store

    def close(self, table_name: str) -> bool:
        """Close one table. Returns False if it was not open."""
        store = self._tables.pop(table_name, None)
        if store is None:
            return False
        try:
            store.close()
        finally:
            self._metrics.tables_open.dec()
            logger.info("table_disconnected", table=table_name)
        return True

    def close_all(self) -> None:
        """Close every open table, even if closing one of them fails."""
        errors: list[BaseException] = []
        for table_name in list(self._tables):
            try:
                self.close(table_name)
            except OSError as e:
                logger.error("table_close_failed", table=table_name, error=str(e))
                errors.append(e)
        if errors:
            raise errors[0]

    @property
    def names(self) -> list[str]:
        return list(self._tables)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[FileTableStore]:
        return iter(list(self._tables.values()))
