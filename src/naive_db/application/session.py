"""Session - the connect / execute / close entry point of naive_db.

A session owns a TableRegistry of open tables, parses statement text into
structured requests, and runs them against the table stores. Failures of
a statement never escape ``execute``: they come back inside the
ExecutionResult, so the caller can report them and carry on.

Usage:
    from naive_db.application import Session

    with Session(config) as session:
        session.connect("debits")
        result = session.execute("INSERT INTO debits VALUES ('baz', 77.77);")
        result.row_id                      # 6
        result = session.execute("SELECT * FROM debits WHERE id > 3;")
        [row.to_python() for row in result.rows]

Leaving the ``with`` block closes every table, including on error paths.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from naive_db.adapters.inbound import Statement, StatementParser, StatementType
from naive_db.adapters.outbound import FileTableStore
from naive_db.application.registry import TableRegistry
from naive_db.domain.entities import Row, TableSchema
from naive_db.domain.errors import DatabaseError
from naive_db.domain.services import AtomCodec, PredicateEvaluator
from naive_db.domain.value_objects import Err, Result
from naive_db.infrastructure.config import Config, get_config
from naive_db.infrastructure.logging import get_logger
from naive_db.infrastructure.metrics import MetricsRegistry, get_metrics
from naive_db.infrastructure.tracing import statement_span
from naive_db.ports import TableStore

logger = get_logger(__name__)


@dataclass
class ExecutionResult:
    """Outcome of one statement.

    Exactly one of ``rows`` (SELECT), ``row_id`` (INSERT) or ``deleted``
    (DELETE) is meaningful on success; on failure ``error`` holds the typed
    error and the statement had no effect.
    """

    statement_type: StatementType | None
    rows: list[Row] = field(default_factory=list)
    row_id: int | None = None
    deleted: bool | None = None
    affected_rows: int = 0
    error: DatabaseError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def value(self) -> list[Row] | int | bool | None:
        """The row set, assigned id or deletion flag, by statement type."""
        if self.statement_type is StatementType.INSERT:
            return self.row_id
        if self.statement_type is StatementType.DELETE:
            return self.deleted
        return self.rows

    def unwrap(self) -> list[Row] | int | bool | None:
        """Return ``value``, raising the carried error on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    def to_python(self) -> list[list[Any]]:
        """Rows as lists of plain Python values."""
        return [row.to_python() for row in self.rows]


class Session:
    """A single-threaded session over a set of table files.

    Thread Safety:
        None. Use one session per thread and never open the same table from
        two sessions.
    """

    def __init__(
        self,
        config: Config | None = None,
        metrics: MetricsRegistry | None = None,
        parser: StatementParser | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            config: Engine configuration (global config if omitted).
            metrics: Metrics registry (default registry if omitted).
            parser: Statement parser (configured dialect if omitted).
        """
        self._config = config or get_config()
        self._metrics = metrics or get_metrics()
        self._parser = parser or StatementParser(
            dialect=self._config.parser.dialect,
            atom_codec=AtomCodec.from_config(self._config.codec),
        )
        self._registry = TableRegistry(self._config, self._metrics)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def tables(self) -> list[str]:
        """Names of the connected tables."""
        return self._registry.names

    def connect(self, table_name: str, schema: TableSchema | None = None) -> FileTableStore:
        """Open a table, creating its file if absent.

        Reconnecting to an open table returns the existing handle.

        Raises:
            CorruptTableError: If the table file length is not a multiple of
                the slot width.
        """
        return self._registry.open(table_name, schema)

    def close(self, table_name: str | None = None) -> None:
        """Close one table, or every table when no name is given."""
        if table_name is None:
            self._registry.close_all()
        else:
            self._registry.close(table_name)

    def parse(self, text: str) -> Result[Statement]:
        """Parse statement text without executing it."""
        return self._parser.parse(text)

    def execute(self, request: Statement | str) -> ExecutionResult:
        """Run a statement and report its outcome.

        Args:
            request: A structured Statement, or statement text to parse first.

        Returns:
            An ExecutionResult; typed failures are returned, not raised.
        """
        if isinstance(request, str):
            parsed = self._parser.parse(request)
            if isinstance(parsed, Err):
                return self._failed(None, parsed.error, request)
            statement = parsed.value
        else:
            statement = request

        label = statement.command.value
        latency = self._metrics.statement_latency_seconds.labels(statement_type=label)
        with statement_span(label, statement.table) as span, latency.time():
            try:
                result = self._dispatch(statement)
            except DatabaseError as e:
                span.set_attribute("db.error_kind", e.kind.value)
                return self._failed(statement.command, e, str(statement))

        self._metrics.statements_total.labels(statement_type=label, status="success").inc()
        return result

    def _dispatch(self, statement: Statement) -> ExecutionResult:
        store = self._registry.get(statement.table)
        if statement.command is StatementType.SELECT:
            return self._select(store, statement)
        if statement.command is StatementType.INSERT:
            return self._insert(store, statement)
        return self._delete(store, statement)

    def _select(self, store: TableStore, statement: Statement) -> ExecutionResult:
        if statement.predicate is None:
            rows = store.scan()
            self._metrics.rows_scanned_total.inc(len(rows))
            return ExecutionResult(StatementType.SELECT, rows=rows, affected_rows=len(rows))

        row_id = PredicateEvaluator(store.schema).identifier_lookup(statement.predicate)
        if row_id is not None:
            row = store.lookup_by_id(row_id)
            self._metrics.lookups_total.labels(result="miss" if row is None else "hit").inc()
            rows = [] if row is None else [row]
        else:
            self._metrics.rows_scanned_total.inc(store.row_count)
            rows = store.scan(statement.predicate)

        return ExecutionResult(StatementType.SELECT, rows=rows, affected_rows=len(rows))

    def _insert(self, store: TableStore, statement: Statement) -> ExecutionResult:
        row_id = store.insert(statement.values or ())
        self._metrics.rows_inserted_total.inc()
        logger.info("row_inserted", table=store.name, row_id=row_id)
        return ExecutionResult(StatementType.INSERT, row_id=row_id, affected_rows=1)

    def _delete(self, store: TableStore, statement: Statement) -> ExecutionResult:
        assert statement.predicate is not None

        row_id = PredicateEvaluator(store.schema).identifier_lookup(statement.predicate)
        if row_id is not None:
            targets = [row_id]
            store.delete(row_id)
        else:
            self._metrics.rows_scanned_total.inc(store.row_count)
            targets = [row.id for row in store.scan(statement.predicate)]
            for target in targets:
                store.delete(target)

        self._metrics.rows_deleted_total.inc(len(targets))
        logger.info("rows_deleted", table=store.name, row_ids=targets)
        return ExecutionResult(
            StatementType.DELETE, deleted=bool(targets), affected_rows=len(targets)
        )

    def _failed(
        self,
        statement_type: StatementType | None,
        error: DatabaseError,
        statement: str,
    ) -> ExecutionResult:
        label = statement_type.value if statement_type else "unknown"
        self._metrics.statements_total.labels(statement_type=label, status="error").inc()
        logger.warning(
            "statement_failed",
            statement=statement,
            error_kind=error.kind.value,
            error=str(error),
        )
        return ExecutionResult(statement_type, error=error)

    def __enter__(self) -> Session:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes every table."""
        self.close()
