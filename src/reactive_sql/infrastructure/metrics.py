"""Prometheus metrics for the reactive SQL layer."""

from __future__ import annotations

from prometheus_client import (
    Counter,
    Histogram,
    Info,
    start_http_server,
    REGISTRY,
    CollectorRegistry,
)

from reactive_sql.infrastructure.config import get_config


class MetricsRegistry:
    """Registry of all reactive SQL metrics."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics registry."""
        self._registry = registry or REGISTRY

        # Query metrics
        self.queries_total = Counter(
            "reactive_sql_queries_total",
            "Total number of queries executed",
            ["kind", "status"],  # kind: read, write, other; status: success, error, uninitialized
            registry=self._registry,
        )

        self.query_latency_seconds = Histogram(
            "reactive_sql_query_latency_seconds",
            "Query latency in seconds",
            ["kind"],
            buckets=(0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )

        # Listener metrics
        self.listeners_registered_total = Counter(
            "reactive_sql_listeners_registered_total",
            "Total number of listener registrations",
            ["table"],
            registry=self._registry,
        )

        self.notifications_total = Counter(
            "reactive_sql_notifications_total",
            "Total number of listener invocations",
            ["table"],
            registry=self._registry,
        )

        self.listener_failures_total = Counter(
            "reactive_sql_listener_failures_total",
            "Total number of listeners that raised during notification",
            ["table"],
            registry=self._registry,
        )

        self.stale_listeners_skipped_total = Counter(
            "reactive_sql_stale_listeners_skipped_total",
            "Total number of dead listener references skipped",
            ["table"],
            registry=self._registry,
        )

        # Service info
        self.info = Info(
            "reactive_sql",
            "Reactive SQL layer information",
            registry=self._registry,
        )


# Global metrics registry
_metrics: MetricsRegistry | None = None


def setup_metrics(port: int | None = None, registry: CollectorRegistry | None = None) -> MetricsRegistry:
    """
    Set up Prometheus metrics server.

    Args:
        port: Port for the metrics HTTP server. Defaults to the configured metrics port.
        registry: Optional custom registry

    Returns:
        The metrics registry
    """
    global _metrics
    _metrics = MetricsRegistry(registry)

    from reactive_sql import __version__
    _metrics.info.info({
        "version": __version__,
    })

    if port is None:
        port = get_config().observability.metrics_port
    start_http_server(port, registry=registry or REGISTRY)

    return _metrics


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry()
    return _metrics
