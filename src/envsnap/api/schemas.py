"""
Request/response schemas for the envsnap HTTP API.

Snapshots travel in their camelCase payload form (see
:meth:`envsnap.core.contracts.snapshot.Snapshot.to_payload`), so the JSON a
client reads back matches what a page script would have produced.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from envsnap.core.contracts.interaction import InteractionRecord

HostEventType = Literal["load", "scroll", "click", "input", "change", "visibilitychange"]


class SessionCreate(BaseModel):
    """Open a collector session for one client."""

    host_state: dict[str, Any] = Field(
        default_factory=dict, description="Initial host state (navigator, document, ...)"
    )


class HostStateUpdate(BaseModel):
    host_state: dict[str, Any]


class SessionInfo(BaseModel):
    session_id: str
    created_at: datetime
    snapshot_count: int = 0


class HostEventIn(BaseModel):
    """One DOM-like event raised by the client."""

    type: HostEventType
    tag: str | None = Field(default=None, description="Target element tag name, e.g. 'BUTTON'")
    host_state: dict[str, Any] | None = Field(
        default=None, description="Optional fresh host state to apply before dispatch"
    )


class EventAccepted(BaseModel):
    session_id: str
    type: HostEventType
    scroll_pending: bool = False
    error: str | None = None
    latest: dict[str, Any] | None = None


class HistoryOut(BaseModel):
    session_id: str
    records: list[InteractionRecord]


__all__ = [
    "HostEventType",
    "SessionCreate",
    "HostStateUpdate",
    "SessionInfo",
    "HostEventIn",
    "EventAccepted",
    "HistoryOut",
]
