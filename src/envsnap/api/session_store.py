"""
In-memory store of collector sessions.

Each session owns one :class:`~envsnap.collector.facade.ClientDataCollector`,
the :class:`~envsnap.core.host.MappingProvider` it reads from and the two
event hubs (window/document) it is bound to. Posting an event to a session
dispatches it on the matching hub, exactly as the page would.

Note on Persistence
-------------------
Sessions live only as long as the process. Restarting the server drops every
collector together with its snapshots and interaction log.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar

from envsnap.collector.facade import ClientDataCollector, create_collector
from envsnap.core.contracts.snapshot import Snapshot
from envsnap.core.host import WINDOW_EVENTS, EventHub, HostEvent, MappingProvider


@dataclass
class CollectorSession:
    """A collector plus the host objects it is attached to."""

    session_id: str
    provider: MappingProvider
    collector: ClientDataCollector
    window: EventHub
    document: EventHub
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    snapshot_count: int = 0

    def _count(self, _: Snapshot) -> None:
        self.snapshot_count += 1

    def dispatch(self, type: str, tag: str | None = None) -> None:
        """Raise a host event on the window or the document hub."""
        target = self.window if type in WINDOW_EVENTS else self.document
        target.dispatch(HostEvent(type=type, tag=tag))


class SessionStore:
    """A simple dictionary-backed store of collector sessions."""

    _instance: ClassVar[SessionStore | None] = None

    def __init__(self) -> None:
        self._sessions: dict[str, CollectorSession] = {}

    @classmethod
    def get_instance(cls) -> SessionStore:
        """Accessor for the global singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def create_session(self, host_state: dict[str, Any]) -> CollectorSession:
        """Build a provider, event hubs and a bound collector for a new client."""
        session_id = str(uuid.uuid4())
        provider = MappingProvider(host_state)
        window, document = EventHub("window"), EventHub("document")
        collector = create_collector(provider, window=window, document=document)
        session = CollectorSession(
            session_id=session_id,
            provider=provider,
            collector=collector,
            window=window,
            document=document,
        )
        collector.on_update(session._count)
        self._sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> CollectorSession | None:
        return self._sessions.get(session_id)

    def close_session(self, session_id: str) -> bool:
        """Unbind and forget a session; return False if it was unknown."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.collector.close()
        return True

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.close_session(session_id)


def get_session_store() -> SessionStore:
    return SessionStore.get_instance()


__all__ = ["CollectorSession", "SessionStore", "get_session_store"]
