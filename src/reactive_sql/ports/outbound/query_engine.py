"""Query Engine port for the embedded relational engine.

This outbound port defines the contract the reactive layer needs from the
engine: run a script with optional bound parameters and hand back one
result set per row-producing statement.

The engine is responsible for:
- Table storage and SQL execution
- Binding named or positional parameters
- Reporting failures with a human-readable message
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from reactive_sql.domain.value_objects import BindParams, QueryResult


@runtime_checkable
class QueryEngine(Protocol):
    """Protocol for an embedded query engine.

    Thread Safety:
        Implementations need not be thread-safe; callers serialize access.
    """

    @abstractmethod
    def execute(self, sql: str, params: BindParams | None = None) -> list[QueryResult]:
        """Execute one or more semicolon-separated statements.

        Args:
            sql: Query text.
            params: Bound parameters shared by every statement.

        Returns:
            One result set per statement that produced rows. Statements
            without rows (INSERT, CREATE TABLE, empty SELECT) contribute
            nothing.

        Raises:
            Exception: Any engine failure; ``str(error)`` is the engine's message.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release the engine's resources."""
        ...
