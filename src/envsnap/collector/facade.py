"""
Public collector facade.

:class:`ClientDataCollector` is the object a host integration talks to:

- ``collect(trigger)`` collect under an explicit trigger label,
- ``await get_data()``  force a fresh snapshot labeled ``"updatedData"``,
- ``get_latest()``      the cached snapshot, or None,
- ``on_update(fn)``     subscribe; returns the unsubscribe handle,
- ``history()``         copy of the interaction log.

Use :func:`create_collector` to build one and bind it to event sources in a
single step.
"""

from __future__ import annotations

from collections.abc import Callable

from envsnap.collector.aggregator import collect_all
from envsnap.collector.events import EventBinder, Scheduler
from envsnap.collector.state import CollectorState, Subscriber
from envsnap.core.contracts.interaction import InteractionRecord
from envsnap.core.contracts.snapshot import Snapshot
from envsnap.core.host import EnvironmentProvider, EventSource
from envsnap.core.settings import load_settings


class ClientDataCollector:
    """Snapshot collector for one client host."""

    def __init__(
        self,
        provider: EnvironmentProvider,
        history_limit: int | None = None,
        debounce_seconds: float | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        if history_limit is None:
            history_limit = load_settings().history_limit
        self.provider = provider
        self.state = CollectorState(history_limit=history_limit)
        self.binder = EventBinder(
            provider,
            self.state,
            debounce_seconds=debounce_seconds,
            scheduler=scheduler,
        )

    def collect(self, trigger: str = "manual") -> Snapshot:
        """Collect and publish a snapshot under an explicit trigger label."""
        return collect_all(self.provider, self.state, trigger)

    async def get_data(self) -> Snapshot:
        """Collect, publish and return a fresh ``"updatedData"`` snapshot.

        Declared ``async`` for call-style parity with host integrations; the
        collection itself never suspends. Reader failures raise
        :class:`~envsnap.collector.aggregator.CollectionError`.
        """
        return self.collect("updatedData")

    def get_latest(self) -> Snapshot | None:
        return self.state.latest_snapshot

    def on_update(self, fn: Subscriber) -> Callable[[], None]:
        return self.state.subscribe(fn)

    def history(self) -> list[InteractionRecord]:
        return self.state.history()

    def bind(self, window: EventSource | None, document: EventSource | None) -> bool:
        """Attach to host event sources; see :meth:`EventBinder.bind`."""
        return self.binder.bind(window, document)

    def close(self) -> None:
        """Detach from event sources and cancel a pending scroll collection."""
        self.binder.unbind()


def create_collector(
    provider: EnvironmentProvider,
    window: EventSource | None = None,
    document: EventSource | None = None,
    **options: object,
) -> ClientDataCollector:
    """Build a collector and bind it when both event sources are given."""
    collector = ClientDataCollector(provider, **options)  # type: ignore[arg-type]
    collector.bind(window, document)
    return collector


__all__ = ["ClientDataCollector", "create_collector"]
