"""Single-slot holder for the active engine instance."""

from __future__ import annotations

import threading

from reactive_sql.infrastructure.logging import get_logger
from reactive_sql.ports.outbound import QueryEngine

logger = get_logger(__name__)


class DatabaseHolder:
    """Holds at most one live engine.

    Installing an engine replaces the previous one without closing it;
    whoever created the previous engine remains responsible for it.
    """

    def __init__(self, instance: QueryEngine | None = None) -> None:
        self._lock = threading.Lock()
        self._instance = instance

    @property
    def instance(self) -> QueryEngine | None:
        return self.get_instance()

    def set_instance(self, engine: QueryEngine) -> QueryEngine | None:
        """Install ``engine``.

        Returns:
            The engine that was replaced, if any
        """
        with self._lock:
            previous, self._instance = self._instance, engine
        if previous is not None and previous is not engine:
            logger.warning("engine_replaced", previous=repr(previous), current=repr(engine))
        return previous

    def get_instance(self) -> QueryEngine | None:
        with self._lock:
            return self._instance

    def destroy(self) -> None:
        """Drop the engine reference without closing it."""
        with self._lock:
            self._instance = None
