"""Infrastructure layer - cross-cutting concerns."""

from reactive_sql.infrastructure.config import Config, get_config
from reactive_sql.infrastructure.logging import setup_logging, get_logger
from reactive_sql.infrastructure.metrics import setup_metrics, get_metrics, MetricsRegistry
from reactive_sql.infrastructure.tracing import setup_tracing, get_tracer, pipeline_span

__all__ = [
    "Config",
    "get_config",
    "setup_logging",
    "get_logger",
    "setup_metrics",
    "get_metrics",
    "MetricsRegistry",
    "setup_tracing",
    "get_tracer",
    "pipeline_span",
]
