"""
Per-collector state store.

Holds the latest snapshot, its collection time, the interaction log and the
ordered subscriber list. One instance belongs to one collector; nothing here
is process-global, so several collectors can coexist (one per API session,
for example).

Execution is single-threaded and cooperative, so no locking is done.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable

from envsnap.core.contracts.interaction import InteractionRecord
from envsnap.core.contracts.snapshot import Snapshot

Subscriber = Callable[[Snapshot], None]


class CollectorState:
    """
    Mutable container behind a :class:`~envsnap.collector.facade.ClientDataCollector`.

    Attributes
    ----------
    latest_snapshot : Snapshot | None
        The most recently produced snapshot, or None before the first one.
    latest_timestamp : int | None
        ``collected_at`` of ``latest_snapshot``.
    history_limit : int
        Capacity of the interaction log; the oldest record is evicted when
        it is full. ``0`` keeps nothing.
    """

    __slots__ = ("latest_snapshot", "latest_timestamp", "history_limit", "_history", "_subscribers")

    def __init__(self, history_limit: int = 500) -> None:
        if history_limit < 0:
            raise ValueError("history_limit must be >= 0")
        self.latest_snapshot: Snapshot | None = None
        self.latest_timestamp: int | None = None
        self.history_limit = history_limit
        self._history: deque[InteractionRecord] = deque(maxlen=history_limit)
        self._subscribers: list[Subscriber] = []

    # ------------------------------- Snapshots ------------------------------

    def store(self, snapshot: Snapshot) -> None:
        """Replace the latest snapshot (never merged with the previous one)."""
        self.latest_snapshot = snapshot
        self.latest_timestamp = snapshot.collected_at

    # ------------------------------ Interactions ----------------------------

    def record(self, record: InteractionRecord) -> None:
        """Append an interaction record, evicting the oldest when full."""
        self._history.append(record)

    def history(self) -> list[InteractionRecord]:
        """Return a copy of the interaction log, oldest first."""
        return list(self._history)

    # ------------------------------ Subscribers -----------------------------

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        """Register ``fn`` and return a handle that removes it again.

        The handle removes ``fn`` by identity and may be called any number
        of times.
        """
        self._subscribers.append(fn)

        def unsubscribe() -> None:
            self._subscribers = [s for s in self._subscribers if s is not fn]

        return unsubscribe

    def subscribers(self) -> tuple[Subscriber, ...]:
        """Return the current subscribers in subscription order."""
        return tuple(self._subscribers)


__all__ = ["CollectorState", "Subscriber"]
