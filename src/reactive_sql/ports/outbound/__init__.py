"""Outbound ports - interfaces for external dependencies.

The only external dependency of the reactive layer is the embedded
query engine.
"""

from reactive_sql.ports.outbound.query_engine import QueryEngine

__all__ = [
    "QueryEngine",
]
