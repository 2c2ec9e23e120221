"""Execution gateway between the pipelines and the engine.

The gateway is the only place the engine is called. Failures never leave
``execute``: a missing engine or a rejected query is logged and reported
to the caller as ``None``. ``execute_or_raise`` keeps the same decision
points but raises the typed errors instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reactive_sql.application.database_holder import DatabaseHolder
from reactive_sql.domain.value_objects import (
    BindParams,
    EngineError,
    EngineNotInitializedError,
    QueryKind,
    QueryResult,
)
from reactive_sql.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from reactive_sql.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)


class ExecutionGateway:
    """Runs queries on the engine installed in a DatabaseHolder."""

    def __init__(self, holder: DatabaseHolder, metrics: MetricsRegistry | None = None) -> None:
        self._holder = holder
        self._metrics = metrics

    def execute_or_raise(
        self,
        query: str,
        params: BindParams | None = None,
        kind: QueryKind = QueryKind.OTHER,
    ) -> list[QueryResult]:
        """Execute ``query`` and return the engine's result sets unchanged.

        Raises:
            EngineNotInitializedError: If no engine is installed
            EngineError: If the engine rejects the query
        """
        engine = self._holder.get_instance()
        if engine is None:
            self._count(kind, "uninitialized")
            raise EngineNotInitializedError()

        try:
            if self._metrics:
                with self._metrics.query_latency_seconds.labels(kind=kind.value).time():
                    result = engine.execute(query, params)
            else:
                result = engine.execute(query, params)
        except EngineError:
            self._count(kind, "error")
            raise
        except Exception as e:
            self._count(kind, "error")
            raise EngineError(str(e)) from e

        self._count(kind, "success")
        return result

    def execute(
        self,
        query: str,
        params: BindParams | None = None,
        kind: QueryKind = QueryKind.OTHER,
    ) -> list[QueryResult] | None:
        """Execute ``query``, logging failures.

        Returns:
            The result sets, or None if the query did not run
        """
        try:
            return self.execute_or_raise(query, params, kind)
        except EngineNotInitializedError as e:
            logger.error("engine_not_initialized", error=str(e), query=query)
        except EngineError as e:
            logger.error("engine_error", error=e.message, query=query)
        return None

    def _count(self, kind: QueryKind, status: str) -> None:
        if self._metrics:
            self._metrics.queries_total.labels(kind=kind.value, status=status).inc()
