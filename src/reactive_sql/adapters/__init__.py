"""Adapters layer - concrete implementations of the ports."""

from reactive_sql.adapters.outbound import SQLiteEngine

__all__ = [
    "SQLiteEngine",
]
