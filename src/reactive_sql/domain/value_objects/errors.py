"""Error taxonomy for the reactive SQL layer.

These are raised only inside the layer; the public pipelines convert them
into a log entry and a benign return value.
"""

from __future__ import annotations

from typing import Any


class ReactiveSQLError(Exception):
    """Base class for reactive SQL errors."""
    pass


class EngineNotInitializedError(ReactiveSQLError):
    """No engine instance is installed."""

    def __init__(self) -> None:
        super().__init__(
            "SQL engine instance not initiated! "
            "Run create_sql to initialize the service."
        )


class EngineError(ReactiveSQLError):
    """The engine rejected a query."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ListenerInvocationError(ReactiveSQLError):
    """A listener raised while being notified."""

    def __init__(self, table: str, listener: Any, cause: BaseException) -> None:
        super().__init__(f"Listener {listener!r} for table '{table}' failed: {cause}")
        self.table = table
        self.listener = listener
        self.cause = cause


class SchemaError(ReactiveSQLError):
    """A schema description could not be compiled."""
    pass
