"""Listener registry keyed by table name.

The registry records, per table, the callbacks that want to hear about
writes to that table. References are weak: registering a listener never
keeps its owner alive. A reference whose target has been collected is
skipped silently when the table is notified.

Weak reference rules:
    - Bound methods are held through ``weakref.WeakMethod`` so the
      registration lives exactly as long as the instance does.
    - Methods of built-in types (``deque.append``) hold their owner weakly
      and are looked up again on each call. An owner that does not support
      weak references (``list``, ``dict``) is rejected with ``TypeError``.
    - Functions and callable objects are held through ``weakref.ref``.
      A lambda or closure referenced only by the registry is collected
      immediately; callers keep their own strong reference.

Thread Safety:
    A lock guards the table mapping. Listeners are invoked on a snapshot,
    outside the lock, so a listener may register further listeners.
"""

from __future__ import annotations

import inspect
import threading
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterator

from reactive_sql.domain.value_objects import (
    ListenerInvocationError,
    TableName,
    Timestamp,
)
from reactive_sql.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from reactive_sql.infrastructure.metrics import MetricsRegistry

logger = get_logger(__name__)

Listener = Callable[[int], None]
ListenerRef = Callable[[], "Listener | None"]


def make_ref(listener: Listener) -> ListenerRef:
    """Create a non-owning reference to ``listener``.

    Raises:
        TypeError: If the listener is not callable or cannot be weakly referenced
    """
    if not callable(listener):
        raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
    if inspect.ismethod(listener):
        return weakref.WeakMethod(listener)
    owner = getattr(listener, "__self__", None)
    if owner is not None and not inspect.ismodule(owner):
        return OwnerMethodRef(owner, listener.__name__)
    return weakref.ref(listener)


class OwnerMethodRef:
    """Weak reference to a method of a built-in type, such as ``deque.append``.

    Each attribute access on a C-implemented object creates a fresh method
    object, so the owner is referenced instead and the method is looked up
    again on every call.
    """

    __slots__ = ("_owner", "_name")

    def __init__(self, owner: object, name: str) -> None:
        try:
            self._owner = weakref.ref(owner)
        except TypeError:
            raise TypeError(
                f"Listener {type(owner).__name__}.{name} cannot be weakly referenced; "
                "register a function or a method of an object that supports weak references"
            ) from None
        self._name = name

    def __call__(self) -> Listener | None:
        owner = self._owner()
        if owner is None:
            return None
        return getattr(owner, self._name)

    def __repr__(self) -> str:
        state = "dead" if self._owner() is None else "alive"
        return f"OwnerMethodRef({self._name!r}, {state})"


@dataclass
class NotificationReport:
    """Outcome of notifying one table."""

    table: TableName
    timestamp: Timestamp
    delivered: int = 0
    skipped: int = 0
    errors: list[ListenerInvocationError] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return not self.errors


class ListenerRegistry:
    """Table name to ordered weak listener references."""

    def __init__(self, metrics: MetricsRegistry | None = None) -> None:
        """Initialize an empty registry.

        Args:
            metrics: Optional metrics registry to record registrations and calls.
        """
        self._lock = threading.Lock()
        self._entries: dict[TableName, list[ListenerRef]] = {}
        self._metrics = metrics

    def register(self, table: str, listener: Listener) -> None:
        """Append a weak reference to ``listener`` under ``table``."""
        ref = make_ref(listener)
        with self._lock:
            self._entries.setdefault(TableName(table), []).append(ref)

        if self._metrics:
            self._metrics.listeners_registered_total.labels(table=table).inc()
        logger.debug("listener_registered", table=table, listener=repr(listener))

    def notify(self, table: str, timestamp: int) -> NotificationReport:
        """Invoke every live listener registered under ``table``.

        Dead references are skipped. A listener that raises is logged and
        recorded in the report; the remaining listeners are still invoked.
        Never raises.

        Args:
            table: Table that was written
            timestamp: Time of the write in milliseconds

        Returns:
            Counts of delivered, skipped and failed invocations
        """
        report = NotificationReport(table=TableName(table), timestamp=Timestamp(timestamp))
        with self._lock:
            refs = list(self._entries.get(TableName(table), ()))

        for ref in refs:
            listener = ref()
            if listener is None:
                report.skipped += 1
                continue
            try:
                listener(timestamp)
            except Exception as e:
                error = ListenerInvocationError(table, listener, e)
                report.errors.append(error)
                logger.error(
                    "listener_failed",
                    table=table,
                    listener=repr(listener),
                    error=str(e),
                    exc_info=True,
                )
            else:
                report.delivered += 1

        if self._metrics:
            self._metrics.notifications_total.labels(table=table).inc(report.delivered)
            self._metrics.listener_failures_total.labels(table=table).inc(report.failed)
            self._metrics.stale_listeners_skipped_total.labels(table=table).inc(report.skipped)

        if refs:
            logger.debug(
                "listeners_notified",
                table=table,
                delivered=report.delivered,
                skipped=report.skipped,
                failed=report.failed,
            )
        return report

    def listeners(self, table: str) -> list[Listener]:
        """Live listeners for ``table`` in registration order."""
        with self._lock:
            refs = list(self._entries.get(TableName(table), ()))
        return [fn for fn in (ref() for ref in refs) if fn is not None]

    def references(self, table: str) -> list[ListenerRef]:
        """Raw references for ``table``, dead ones included."""
        with self._lock:
            return list(self._entries.get(TableName(table), ()))

    def tables(self) -> list[TableName]:
        """Tables with at least one registration."""
        with self._lock:
            return list(self._entries)

    def compact(self) -> int:
        """Drop dead references.

        Tables keep their key even when every reference is gone.

        Returns:
            Number of references removed
        """
        removed = 0
        with self._lock:
            for table, refs in self._entries.items():
                alive = [ref for ref in refs if ref() is not None]
                removed += len(refs) - len(alive)
                self._entries[table] = alive
        return removed

    def clear(self) -> None:
        """Forget every registration."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, table: object) -> bool:
        with self._lock:
            return table in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[TableName]:
        return iter(self.tables())

    def __repr__(self) -> str:
        with self._lock:
            sizes = {table: len(refs) for table, refs in self._entries.items()}
        return f"ListenerRegistry({sizes})"
