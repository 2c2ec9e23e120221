"""Query pipelines - classification, execution and notification.

Two workflows tie the layer together:

    query_pipeline(listener, query, params)
        1. If the query reads a known table, register ``listener`` for it.
        2. Execute the query.
        3. If the query writes a known table, notify that table's listeners.
        4. Return the result of step 2.

    insert_query_pipeline(listener, query, params, registry)
        1. If the query is not a write to a known table, return None
           without executing it.
        2. Execute the query.
        3. Notify the table's listeners, whatever the execution returned.
        4. Return the result of step 2.

Registration happens before execution so a reader cannot miss a write
that follows it; notification happens after execution so listeners only
observe committed state. Apart from a listener the registry cannot hold
(``TypeError``), no step raises past the pipeline.

Usage:
    from reactive_sql.application import ReactiveContext, create_sql

    context = ReactiveContext()
    create_sql(schema, context=context)

    rows = context.query_pipeline(on_change, "SELECT * FROM users")
    context.query_pipeline(on_change, "INSERT INTO users VALUES (3, 'Jane')")
    # on_change(<write time in ms>) has been called

The module-level functions of the same names use a process-wide default
context (see ``get_context``/``reset_context``).
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterable

from reactive_sql.application.database_holder import DatabaseHolder
from reactive_sql.application.gateway import ExecutionGateway
from reactive_sql.domain.services import (
    Listener,
    ListenerRegistry,
    NotificationReport,
    classify,
    table_from_read_query,
    table_from_writing_query,
    writing_query_match,
)
from reactive_sql.domain.value_objects import (
    BindParams,
    Clock,
    QueryKind,
    QueryResult,
    TableName,
    now_ms,
)
from reactive_sql.infrastructure.config import Config
from reactive_sql.infrastructure.logging import get_logger
from reactive_sql.infrastructure.metrics import MetricsRegistry, get_metrics
from reactive_sql.infrastructure.tracing import pipeline_span
from reactive_sql.ports.outbound import QueryEngine

logger = get_logger(__name__)


def register_query_listeners(
    listener: Listener,
    query: str,
    tables: Iterable[str],
    registry: ListenerRegistry,
) -> TableName | None:
    """Register ``listener`` for the table ``query`` reads, if any.

    Returns:
        The table registered against, or None for non-read queries
    """
    table = table_from_read_query(query, tables)
    if table:
        registry.register(table, listener)
    return table


def trigger_actuators(
    query: str,
    tables: Iterable[str],
    registry: ListenerRegistry,
    clock: Clock = now_ms,
) -> NotificationReport | None:
    """Notify the listeners of the table ``query`` writes, if any.

    Returns:
        The notification report, or None for non-write queries
    """
    table = table_from_writing_query(query, tables)
    if not table:
        return None
    return registry.notify(table, clock())


class ReactiveContext:
    """Explicit owner of the engine slot, listener registry and known tables.

    Each pipeline call runs under a re-entrant lock, so a listener may issue
    queries from within its notification and concurrent callers are
    serialized.

    Notification is inline by default. With ``notify_in_background`` the
    listeners are invoked on a worker pool and the write returns without
    waiting for them.
    """

    def __init__(
        self,
        holder: DatabaseHolder | None = None,
        registry: ListenerRegistry | None = None,
        tables: Iterable[str] | None = None,
        clock: Clock = now_ms,
        metrics: MetricsRegistry | None = None,
        notify_in_background: bool = False,
        max_workers: int = 4,
        compact_on_notify: bool = False,
    ) -> None:
        """Initialize the context.

        Args:
            holder: Engine slot. A fresh empty one if None.
            registry: Listener registry. A fresh one if None.
            tables: Initially known table names.
            clock: Source of notification timestamps in milliseconds.
            metrics: Metrics registry. The global one if None.
            notify_in_background: Dispatch notifications on a worker pool.
            max_workers: Size of the notification pool.
            compact_on_notify: Drop dead listener references after notifying.
        """
        self._metrics = metrics or get_metrics()
        self._holder = holder or DatabaseHolder()
        self._registry = registry if registry is not None else ListenerRegistry(self._metrics)
        self._tables: list[TableName] = []
        self._clock = clock
        self._gateway = ExecutionGateway(self._holder, self._metrics)
        self._lock = threading.RLock()
        self._compact_on_notify = compact_on_notify
        self._executor: ThreadPoolExecutor | None = None
        self._pool_state = threading.local()
        if notify_in_background:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="reactive_sql-notify"
            )
        self.add_tables(tables or ())

    @classmethod
    def from_config(
        cls,
        config: Config,
        metrics: MetricsRegistry | None = None,
        clock: Clock = now_ms,
    ) -> ReactiveContext:
        """Build a context from the notification settings of ``config``."""
        return cls(
            clock=clock,
            metrics=metrics,
            notify_in_background=config.notifications.notify_in_background,
            max_workers=config.notifications.max_workers,
            compact_on_notify=config.notifications.compact_on_notify,
        )

    @property
    def holder(self) -> DatabaseHolder:
        return self._holder

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    @property
    def gateway(self) -> ExecutionGateway:
        return self._gateway

    @property
    def tables(self) -> list[TableName]:
        """Known table names in declaration order."""
        with self._lock:
            return list(self._tables)

    def add_tables(self, tables: Iterable[str]) -> None:
        """Append table names; already known names are ignored."""
        with self._lock:
            for table in tables:
                if table and table not in self._tables:
                    self._tables.append(TableName(table))

    def get_database(self) -> QueryEngine | None:
        return self._holder.get_instance()

    def execute_query(
        self, query: str, params: BindParams | None = None
    ) -> list[QueryResult] | None:
        """Execute ``query`` without any listener bookkeeping."""
        with self._lock:
            kind = classify(query, self._tables)
            return self._gateway.execute(query, params, kind)

    def register_query_listeners(self, listener: Listener, query: str) -> TableName | None:
        with self._lock:
            return register_query_listeners(listener, query, self._tables, self._registry)

    def trigger_actuators(
        self, query: str, registry: ListenerRegistry | None = None
    ) -> NotificationReport | None:
        """Notify listeners of the table ``query`` writes.

        Returns:
            The report when notifying inline; None for non-write queries or
            when the notification was handed to the worker pool
        """
        if registry is None:
            registry = self._registry
        with self._lock:
            table = table_from_writing_query(query, self._tables)
            if not table:
                return None

            timestamp = self._clock()
            if self._executor is not None:
                future = self._executor.submit(self._notify_pooled, registry, table, timestamp)
                future.add_done_callback(self._log_dispatch_failure)
                return None
        return self._notify(registry, table, timestamp)

    def query_pipeline(
        self,
        listener: Listener,
        query: str,
        params: BindParams | None = None,
    ) -> list[QueryResult] | None:
        """Register (reads), execute, then notify (writes).

        Returns:
            The execution result; None if the query did not run
        """
        with self._lock, pipeline_span("query_pipeline", query) as span:
            table = self.register_query_listeners(listener, query)
            if table:
                span.set_attribute("reactive_sql.read_table", table)

            kind = classify(query, self._tables)
            span.set_attribute("reactive_sql.kind", kind.value)
            result = self._gateway.execute(query, params, kind)

            self.trigger_actuators(query)
            return result

    def insert_query_pipeline(
        self,
        listener: Listener,
        query: str,
        params: BindParams | None = None,
        registry: ListenerRegistry | None = None,
    ) -> list[QueryResult] | None:
        """Execute a write and notify its table.

        ``listener`` is accepted for signature parity with ``query_pipeline``
        and is not registered. Queries that are not writes to a known table
        are refused without being executed.

        Returns:
            The execution result; None if the query was refused or did not run
        """
        with self._lock, pipeline_span("insert_query_pipeline", query) as span:
            match = writing_query_match(query, self._tables)
            if match is None:
                logger.debug("insert_refused", query=query)
                return None
            span.set_attribute("reactive_sql.write_table", match.table)

            result = self._gateway.execute(query, params, QueryKind.WRITE)
            self.trigger_actuators(query, registry)
            return result

    def close(self) -> None:
        """Stop the notification pool and close the installed engine.

        Pending pooled notifications are drained first, unless ``close`` is
        called from one of them; later writes notify inline.
        """
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=not getattr(self._pool_state, "active", False))

        with self._lock:
            engine = self._holder.get_instance()
            if engine is not None:
                engine.close()
            self._holder.destroy()

    def __enter__(self) -> ReactiveContext:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _notify(
        self, registry: ListenerRegistry, table: TableName, timestamp: int
    ) -> NotificationReport:
        report = registry.notify(table, timestamp)
        if self._compact_on_notify:
            registry.compact()
        return report

    def _notify_pooled(
        self, registry: ListenerRegistry, table: TableName, timestamp: int
    ) -> NotificationReport:
        self._pool_state.active = True
        try:
            return self._notify(registry, table, timestamp)
        finally:
            self._pool_state.active = False

    @staticmethod
    def _log_dispatch_failure(future: Future[NotificationReport]) -> None:
        error = future.exception()
        if error is not None:
            logger.error("notification_dispatch_failed", error=str(error))


# Process-wide default context
_context: ReactiveContext | None = None
_context_lock = threading.Lock()


def get_context() -> ReactiveContext:
    """Get the process-wide default context."""
    global _context
    with _context_lock:
        if _context is None:
            _context = ReactiveContext()
        return _context


def set_context(context: ReactiveContext) -> None:
    """Install ``context`` as the process-wide default."""
    global _context
    with _context_lock:
        _context = context


def reset_context() -> None:
    """Close and drop the default context (useful for testing)."""
    global _context
    with _context_lock:
        context, _context = _context, None
    if context is not None:
        context.close()


def get_database() -> QueryEngine | None:
    """Engine installed in the default context."""
    return get_context().get_database()


def execute_query(query: str, params: BindParams | None = None) -> list[QueryResult] | None:
    """Execute ``query`` on the default context without notification semantics."""
    return get_context().execute_query(query, params)


def query_pipeline(
    listener: Listener,
    query: str,
    params: BindParams | None = None,
) -> list[QueryResult] | None:
    """Run ``ReactiveContext.query_pipeline`` on the default context."""
    return get_context().query_pipeline(listener, query, params)


def insert_query_pipeline(
    listener: Listener,
    query: str,
    params: BindParams | None = None,
    registry: ListenerRegistry | None = None,
) -> list[QueryResult] | None:
    """Run ``ReactiveContext.insert_query_pipeline`` on the default context."""
    return get_context().insert_query_pipeline(listener, query, params, registry)
