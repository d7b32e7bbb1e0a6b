"""Infrastructure layer - cross-cutting concerns."""

from naive_db.infrastructure.config import Config, get_config
from naive_db.infrastructure.logging import configure_logging, setup_logging, get_logger
from naive_db.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from naive_db.infrastructure.tracing import (
    configure_tracing,
    get_tracer,
    setup_tracing,
    statement_span,
    trace_span,
)

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "configure_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "configure_tracing",
    "get_tracer",
    "trace_span",
    "statement_span",
]
