"""OpenTelemetry tracing for naive_db.

Every executed statement gets one span named ``naive_db.<statement type>``
carrying the database semantic-convention attributes (``db.system``,
``db.operation``, ``db.sql.table``). Without ``setup_tracing`` the spans go
to the global provider, which is a no-op unless the host application
installed one.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Generator

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

if TYPE_CHECKING:
    from naive_db.infrastructure.config import ObservabilityConfig

DB_SYSTEM = "naive_db"

_tracer: trace.Tracer | None = None


def setup_tracing(
    service_name: str = "naive_db",
    otlp_endpoint: str | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Install a tracer provider for naive_db spans.

    Args:
        service_name: Name of the service for tracing
        otlp_endpoint: OTLP collector endpoint (e.g., "http://localhost:4317")
        console_export: Whether to also print finished spans (for debugging)

    Returns:
        Configured tracer instance
    """
    global _tracer

    from naive_db import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
            }
        )
    )
    if otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
        )
    if console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(service_name)
    return _tracer


def configure_tracing(observability: ObservabilityConfig) -> trace.Tracer:
    """Apply the tracing section of a Config."""
    return setup_tracing(
        service_name=observability.otel_service_name,
        otlp_endpoint=observability.otel_endpoint,
    )


def get_tracer() -> trace.Tracer:
    """Get the tracer, falling back to the global provider's tracer."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer("naive_db")
    return _tracer


@contextmanager
def trace_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[trace.Span, None, None]:
    """
    Open a span as the current span.

    Args:
        name: Name of the span
        attributes: Attributes to set on the span; None values are dropped

    Yields:
        The created span
    """
    with get_tracer().start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        yield span


@contextmanager
def statement_span(operation: str, table: str) -> Generator[trace.Span, None, None]:
    """Span around one statement against one table."""
    with trace_span(
        f"{DB_SYSTEM}.{operation}",
        {
            "db.system": DB_SYSTEM,
            "db.operation": operation.upper(),
            "db.sql.table": table,
        },
    ) as span:
        yield span
