"""
Reactive SQL - change notifications over an embedded SQL engine

Queries are classified as reads or writes against a known set of tables.
Reads register a listener for their table; writes notify every listener
registered for the table they touch, passing the time of the write.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"

from reactive_sql.application import (
    ReactiveContext,
    create_sql,
    execute_query,
    get_context,
    get_database,
    insert_query_pipeline,
    query_pipeline,
    register_query_listeners,
    reset_context,
    trigger_actuators,
)
from reactive_sql.domain.services import (
    ListenerRegistry,
    create_query_from_schema,
    reading_query_match,
    table_from_read_query,
    table_from_writing_query,
    writing_query_match,
)
from reactive_sql.domain.value_objects import (
    EngineError,
    EngineNotInitializedError,
    ListenerInvocationError,
    QueryResult,
    ReactiveSQLError,
    SchemaError,
)

__all__ = [
    "ReactiveContext",
    "create_sql",
    "execute_query",
    "get_context",
    "get_database",
    "insert_query_pipeline",
    "query_pipeline",
    "register_query_listeners",
    "reset_context",
    "trigger_actuators",
    "ListenerRegistry",
    "create_query_from_schema",
    "reading_query_match",
    "writing_query_match",
    "table_from_read_query",
    "table_from_writing_query",
    "QueryResult",
    "ReactiveSQLError",
    "EngineError",
    "EngineNotInitializedError",
    "ListenerInvocationError",
    "SchemaError",
]
