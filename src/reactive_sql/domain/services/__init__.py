"""Domain services - classification, listener bookkeeping, schema compilation."""

from reactive_sql.domain.services.classifier import (
    classify,
    reading_query_match,
    table_from_read_query,
    table_from_writing_query,
    writing_query_match,
)
from reactive_sql.domain.services.listener_registry import (
    Listener,
    ListenerRegistry,
    NotificationReport,
)
from reactive_sql.domain.services.schema_compiler import (
    Schema,
    TableSchema,
    create_query_from_schema,
    parse_schema,
)

__all__ = [
    "classify",
    "reading_query_match",
    "writing_query_match",
    "table_from_read_query",
    "table_from_writing_query",
    "Listener",
    "ListenerRegistry",
    "NotificationReport",
    "Schema",
    "TableSchema",
    "create_query_from_schema",
    "parse_schema",
]
