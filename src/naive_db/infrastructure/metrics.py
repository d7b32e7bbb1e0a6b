"""Prometheus metrics for naive_db."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)


class MetricsRegistry:
    """Registry of all naive_db metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Statement metrics
        self.statements_total = Counter(
            "naive_db_statements_total",
            "Total number of statements executed",
            ["statement_type", "status"],  # status: success, error
            registry=self._registry,
        )

        self.statement_latency_seconds = Histogram(
            "naive_db_statement_latency_seconds",
            "Statement latency in seconds",
            ["statement_type"],  # select, insert, delete
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
            registry=self._registry,
        )

        # Read path
        self.lookups_total = Counter(
            "naive_db_lookups_total",
            "Binary-search lookups by identifier",
            ["result"],  # hit, miss
            registry=self._registry,
        )

        self.rows_scanned_total = Counter(
            "naive_db_rows_scanned_total",
            "Rows decoded by full-table scans",
            registry=self._registry,
        )

        # Write path
        self.rows_inserted_total = Counter(
            "naive_db_rows_inserted_total",
            "Rows appended to tables",
            registry=self._registry,
        )

        self.rows_deleted_total = Counter(
            "naive_db_rows_deleted_total",
            "Rows removed by compaction",
            registry=self._registry,
        )

        # Table lifecycle
        self.tables_open = Gauge(
            "naive_db_tables_open",
            "Number of table files currently open",
            registry=self._registry,
        )

        self.corrupt_tables_total = Counter(
            "naive_db_corrupt_tables_total",
            "Connect attempts rejected because of a corrupt table file",
            registry=self._registry,
        )

        self.info = Info(
            "naive_db",
            "naive_db build information",
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        """The underlying Prometheus collector registry."""
        return self._registry


_metrics: MetricsRegistry | None = None


def setup_metrics(port: int = 8001, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from naive_db import __version__
    _metrics.info.info({
        "version": __version__,
    })

    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the default metrics registry, creating it on first use."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
