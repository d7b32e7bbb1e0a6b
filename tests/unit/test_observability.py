"""Unit tests for logging, metrics and tracing setup."""

from __future__ import annotations

import io
import json
from typing import Generator

import pytest
import structlog
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import CollectorRegistry

from naive_db import __version__
from naive_db.infrastructure import metrics, tracing
from naive_db.infrastructure.config import ObservabilityConfig
from naive_db.infrastructure.logging import configure_logging, get_logger, setup_logging
from naive_db.infrastructure.metrics import MetricsRegistry
from naive_db.infrastructure.tracing import DB_SYSTEM, statement_span, trace_span


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()


@pytest.mark.unit
class TestLogging:
    """Tests for structured logging."""

    def test_json_lines(self) -> None:
        """Events render as one JSON object per line with bound context."""
        stream = io.StringIO()
        setup_logging("INFO", "json", stream=stream)

        get_logger("naive_db.test", table="t").info("row_inserted", row_id=6)

        event = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert event["event"] == "row_inserted"
        assert event["table"] == "t"
        assert event["row_id"] == 6
        assert event["level"] == "info"

    def test_level_filtering(self) -> None:
        stream = io.StringIO()
        configure_logging(ObservabilityConfig(log_level="WARNING"), stream=stream)

        logger = get_logger("naive_db.test")
        logger.info("hidden")
        logger.warning("statement_failed", error_kind="not_found")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "statement_failed" in output


@pytest.mark.unit
class TestMetrics:
    """Tests for the metrics registry."""

    def test_isolated_registries(self) -> None:
        """Separate collector registries do not clash."""
        first = MetricsRegistry(CollectorRegistry())
        second = MetricsRegistry(CollectorRegistry())

        first.rows_inserted_total.inc()

        assert first.registry.get_sample_value("naive_db_rows_inserted_total") == 1
        assert second.registry.get_sample_value("naive_db_rows_inserted_total") == 0


@pytest.mark.unit
class TestTracing:
    """Tests for trace_span."""

    def test_span_without_provider(self) -> None:
        """Spans work against the default no-op provider."""
        with trace_span("naive_db.test", {"db.table": "t", "db.error_kind": None}) as span:
            span.set_attribute("db.rows", 3)

    def test_statement_span(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Statement spans are named after the operation and carry db attributes."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setattr(tracing, "_tracer", provider.get_tracer("test"))

        with statement_span("select", "t"):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "naive_db.select"
        assert span.attributes["db.system"] == DB_SYSTEM
        assert span.attributes["db.operation"] == "SELECT"
        assert span.attributes["db.sql.table"] == "t"

    def test_configure_tracing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Config drives the service name; no exporter without an endpoint."""
        monkeypatch.setattr(tracing, "_tracer", None)

        tracer = tracing.configure_tracing(ObservabilityConfig(otel_service_name="naive_db_test"))

        assert tracing.get_tracer() is tracer


@pytest.mark.unit
class TestSetupMetrics:
    """Tests for the metrics endpoint."""

    def test_setup_metrics(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """setup_metrics publishes build info and becomes the default registry."""
        monkeypatch.setattr(metrics, "_metrics", None)
        registry = CollectorRegistry()

        created = metrics.setup_metrics(port=0, registry=registry)

        assert metrics.get_metrics() is created
        assert registry.get_sample_value("naive_db_info", {"version": __version__}) == 1
