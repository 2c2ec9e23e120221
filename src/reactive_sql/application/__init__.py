"""Application layer for the reactive SQL layer.

The application layer ties the domain services to the engine.

Exports:
    Pipelines:
        - ReactiveContext: Owner of the engine slot, registry and known tables
        - query_pipeline / insert_query_pipeline: Default-context pipelines
        - register_query_listeners / trigger_actuators: Standalone steps
        - execute_query: Engine access without notification semantics
    Bootstrap:
        - create_sql: Open an engine and load a schema into it
    Engine access:
        - DatabaseHolder: Single-slot engine holder
        - ExecutionGateway: Error-isolating engine adapter
"""

from reactive_sql.application.bootstrap import create_sql
from reactive_sql.application.database_holder import DatabaseHolder
from reactive_sql.application.gateway import ExecutionGateway
from reactive_sql.application.pipeline import (
    ReactiveContext,
    execute_query,
    get_context,
    get_database,
    insert_query_pipeline,
    query_pipeline,
    register_query_listeners,
    reset_context,
    set_context,
    trigger_actuators,
)

__all__ = [
    "ReactiveContext",
    "DatabaseHolder",
    "ExecutionGateway",
    "create_sql",
    "execute_query",
    "get_context",
    "get_database",
    "insert_query_pipeline",
    "query_pipeline",
    "register_query_listeners",
    "reset_context",
    "set_context",
    "trigger_actuators",
]
