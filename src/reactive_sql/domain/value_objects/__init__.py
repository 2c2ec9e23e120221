"""Value objects - immutable, identity-free types shared by all layers."""

from reactive_sql.domain.value_objects.errors import (
    EngineError,
    EngineNotInitializedError,
    ListenerInvocationError,
    ReactiveSQLError,
    SchemaError,
)
from reactive_sql.domain.value_objects.identifiers import (
    Clock,
    TableName,
    Timestamp,
    now_ms,
)
from reactive_sql.domain.value_objects.query_types import (
    BindParams,
    QueryKind,
    QueryMatch,
    QueryResult,
    Scalar,
)

__all__ = [
    # Errors
    "ReactiveSQLError",
    "EngineError",
    "EngineNotInitializedError",
    "ListenerInvocationError",
    "SchemaError",
    # Identifiers
    "TableName",
    "Timestamp",
    "Clock",
    "now_ms",
    # Query types
    "BindParams",
    "Scalar",
    "QueryKind",
    "QueryMatch",
    "QueryResult",
]
