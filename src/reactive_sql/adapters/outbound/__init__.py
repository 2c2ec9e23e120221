"""Outbound adapters for the reactive SQL layer.

Exports:
    - SQLiteEngine: QueryEngine backed by the standard-library sqlite3 driver
"""

from reactive_sql.adapters.outbound.sqlite_engine import (
    SQLiteEngine,
    normalize_params,
    split_statements,
)

__all__ = [
    "SQLiteEngine",
    "normalize_params",
    "split_statements",
]
