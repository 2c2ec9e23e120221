"""SQLite implementation of the QueryEngine port.

Wraps a ``sqlite3`` connection opened in autocommit mode so every write is
durable as soon as ``execute`` returns.

Scripts:
    ``sqlite3.Cursor.execute`` runs a single statement, so scripts are split
    on semicolons that ``sqlite3.complete_statement`` confirms terminate a
    statement (semicolons inside string literals do not split).

Parameters:
    Named parameters are accepted with their sigil (``$id``, ``:id``,
    ``@id``) and stripped before binding, since the driver resolves a
    placeholder by its name without the sigil. Every statement of a script
    receives the same parameters.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Mapping
from typing import Iterator

from reactive_sql.domain.value_objects import BindParams, EngineError, QueryResult

PARAMETER_SIGILS = (":", "$", "@")


def split_statements(script: str) -> Iterator[str]:
    """Yield the complete statements of ``script``.

    A trailing statement without a semicolon is yielded as-is.
    """
    buffer = ""
    for char in script:
        buffer += char
        if char == ";" and sqlite3.complete_statement(buffer):
            statement = buffer.strip()
            if statement.strip("; \t\r\n"):
                yield statement
            buffer = ""
    if buffer.strip("; \t\r\n"):
        yield buffer.strip()


def normalize_params(params: BindParams | None) -> Mapping | tuple:
    """Convert caller parameters into what ``sqlite3`` binds."""
    if params is None:
        return ()
    if isinstance(params, Mapping):
        return {
            key[1:] if key.startswith(PARAMETER_SIGILS) else key: value
            for key, value in params.items()
        }
    return tuple(params)


class SQLiteEngine:
    """Embedded SQLite engine.

    Thread Safety:
        A lock serializes statements on the shared connection.
    """

    def __init__(self, path: str = ":memory:", timeout: float = 5.0) -> None:
        """Open the database.

        Args:
            path: Database file path, or ':memory:' for a private in-memory database.
            timeout: Seconds to wait when the database file is locked.
        """
        self._path = path
        self._lock = threading.Lock()
        self._connection: sqlite3.Connection | None = sqlite3.connect(
            path,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def execute(self, sql: str, params: BindParams | None = None) -> list[QueryResult]:
        """Execute a script, returning one result set per row-producing statement.

        Raises:
            EngineError: If the engine rejects any statement or is closed.
        """
        bound = normalize_params(params)
        results: list[QueryResult] = []

        with self._lock:
            if self._connection is None:
                raise EngineError("database is closed")
            try:
                for statement in split_statements(sql):
                    cursor = self._connection.execute(statement, bound)
                    try:
                        if cursor.description is None:
                            continue
                        rows = [list(row) for row in cursor.fetchall()]
                        if rows:
                            columns = [column[0] for column in cursor.description]
                            results.append(QueryResult(columns=columns, values=rows))
                    finally:
                        cursor.close()
            except sqlite3.Error as e:
                raise EngineError(str(e)) from e

        return results

    def close(self) -> None:
        """Close the connection. Safe to call twice."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None

    def __enter__(self) -> SQLiteEngine:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"SQLiteEngine(path={self._path!r}, {state})"
