"""One-time database bootstrap from a declarative schema."""

from __future__ import annotations

import sqlite3

from reactive_sql.adapters.outbound import SQLiteEngine
from reactive_sql.application.pipeline import ReactiveContext, get_context
from reactive_sql.domain.services import Schema, create_query_from_schema
from reactive_sql.domain.value_objects import ReactiveSQLError
from reactive_sql.infrastructure.config import Config, get_config
from reactive_sql.infrastructure.logging import get_logger

logger = get_logger(__name__)


def create_sql(
    schema: Schema,
    path: str | None = None,
    context: ReactiveContext | None = None,
    config: Config | None = None,
) -> SQLiteEngine | None:
    """Open an engine, install it and load ``schema`` into it.

    The new engine replaces any engine already installed in the context
    without closing it. The schema's table names are appended to the
    context's known tables.

    Args:
        schema: Table name to table definition
        path: Database path. Defaults to ``config.engine.database_path``.
        context: Target context. Defaults to the process-wide context.
        config: Configuration. Defaults to ``get_config()``.

    Returns:
        The engine, or None if bootstrap failed (the failure is logged)
    """
    context = context if context is not None else get_context()
    config = config or get_config()

    try:
        query, tables = create_query_from_schema(schema)
        engine = SQLiteEngine(
            path or config.engine.database_path,
            timeout=config.engine.timeout_seconds,
        )
        context.holder.set_instance(engine)
        context.add_tables(tables)
        if query:
            engine.execute(query)
    except (ReactiveSQLError, sqlite3.Error) as e:
        logger.error("bootstrap_failed", error=str(e))
        return None

    logger.info("database_created", path=engine.path, tables=tables)
    return engine
