"""Ports layer - interface definitions following Hexagonal Architecture.

Outbound ports describe what the reactive layer needs from the outside
world; adapters implement them.
"""

from reactive_sql.ports.outbound import QueryEngine

__all__ = [
    "QueryEngine",
]
