"""OpenTelemetry tracing for the query pipelines.

Every pipeline run is wrapped in a span carrying the query text, its
classification and the table it touched, using the ``db.*`` semantic
attribute names where one exists.
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
    from reactive_sql.infrastructure.config import ObservabilityConfig

TRACER_NAME = "reactive_sql"

_tracer: trace.Tracer | None = None


def setup_tracing(
    config: ObservabilityConfig | None = None,
    console_export: bool = False,
) -> trace.Tracer:
    """
    Set up OpenTelemetry tracing.

    Args:
        config: Observability settings (service name and OTLP endpoint)
        console_export: Whether to also export spans to the console

    Returns:
        Configured tracer instance
    """
    global _tracer

    from reactive_sql import __version__

    service_name = config.otel_service_name if config else TRACER_NAME
    otlp_endpoint = config.otel_endpoint if config else None

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
    _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def get_tracer() -> trace.Tracer:
    """Get the global tracer instance."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


@contextmanager
def pipeline_span(
    operation: str,
    query: str,
    **attributes: Any,
) -> Generator[trace.Span, None, None]:
    """
    Span around one pipeline run.

    Args:
        operation: Pipeline name, used as the span name
        query: Query text, recorded as ``db.statement``
        **attributes: Extra ``reactive_sql.*`` attributes; None values are dropped

    Yields:
        The created span
    """
    with get_tracer().start_as_current_span(f"reactive_sql.{operation}") as span:
        span.set_attribute("db.system", "sqlite")
        span.set_attribute("db.statement", query)
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"reactive_sql.{key}", value)
        yield span
