"""Core identifiers and type-safe primitives.

Table names and timestamps travel through every layer; wrapping them in
``NewType`` keeps call sites honest without runtime cost.
"""

from __future__ import annotations

import time
from typing import Callable, NewType

TableName = NewType("TableName", str)
"""Name of a table known to the engine."""

Timestamp = NewType("Timestamp", int)
"""Wall-clock time in milliseconds since the Unix epoch."""

Clock = Callable[[], Timestamp]


def now_ms() -> Timestamp:
    """Current wall-clock time in milliseconds."""
    return Timestamp(time.time_ns() // 1_000_000)
