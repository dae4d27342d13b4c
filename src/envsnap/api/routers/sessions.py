"""
API routes for collector sessions.

Endpoints
---------
- `POST /sessions`                    open a session with an initial host state.
- `PUT /sessions/{id}/host`           replace the host state.
- `POST /sessions/{id}/events`        dispatch a host event (load, click, scroll ...).
- `POST /sessions/{id}/collect`       force a fresh "updatedData" snapshot.
- `GET /sessions/{id}/latest`         latest snapshot.
- `GET /sessions/{id}/history`        interaction log.
- `DELETE /sessions/{id}`             close the session.

Design Decisions
----------------
- Handlers are `async def` so the scroll debounce timer lands on the server's
  event loop.
- Event dispatch answers 202: scroll collections happen after the debounce
  window, not within the request.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Response, status

from envsnap.api.schemas import (
    EventAccepted,
    HistoryOut,
    HostEventIn,
    HostStateUpdate,
    SessionCreate,
    SessionInfo,
)
from envsnap.api.session_store import CollectorSession, get_session_store

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def _require(session_id: str) -> CollectorSession:
    session = get_session_store().get_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return session


def _info(session: CollectorSession) -> SessionInfo:
    return SessionInfo(
        session_id=session.session_id,
        created_at=session.created_at,
        snapshot_count=session.snapshot_count,
    )


@router.post(
    "",
    response_model=SessionInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Open a collector session",
)
async def create_session(request: SessionCreate) -> SessionInfo:
    session = get_session_store().create_session(request.host_state)
    return _info(session)


@router.get("/{session_id}", response_model=SessionInfo, summary="Describe a session")
async def get_session(session_id: str) -> SessionInfo:
    return _info(_require(session_id))


@router.put("/{session_id}/host", response_model=SessionInfo, summary="Replace host state")
async def replace_host_state(session_id: str, request: HostStateUpdate) -> SessionInfo:
    session = _require(session_id)
    session.provider.update(request.host_state)
    return _info(session)


@router.post(
    "/{session_id}/events",
    response_model=EventAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Dispatch a host event",
)
async def dispatch_event(session_id: str, event: HostEventIn) -> EventAccepted:
    """
    Raise a DOM-like event inside the session.

    The collector reacts the way it would in the page: interactions are
    recorded and collected immediately, scrolls are debounced. A failed
    collection is reported in ``error`` rather than as an HTTP error, since
    the event itself was accepted.
    """
    session = _require(session_id)
    if event.host_state is not None:
        session.provider.update(event.host_state)

    binder = session.collector.binder
    binder.last_error = None
    session.dispatch(event.type, event.tag)

    latest = session.collector.get_latest()
    return EventAccepted(
        session_id=session_id,
        type=event.type,
        scroll_pending=binder.scroll_debouncer.pending,
        error=str(binder.last_error) if binder.last_error else None,
        latest=latest.to_payload() if latest else None,
    )


@router.post("/{session_id}/collect", summary="Force a fresh snapshot")
async def collect(session_id: str) -> dict[str, Any]:
    session = _require(session_id)
    snapshot = await session.collector.get_data()
    return snapshot.to_payload()


@router.get("/{session_id}/latest", summary="Latest snapshot")
async def latest(session_id: str) -> dict[str, Any]:
    snapshot = _require(session_id).collector.get_latest()
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} has no snapshot yet",
        )
    return snapshot.to_payload()


@router.get("/{session_id}/history", response_model=HistoryOut, summary="Interaction log")
async def history(session_id: str) -> HistoryOut:
    session = _require(session_id)
    return HistoryOut(session_id=session_id, records=session.collector.history())


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close a session",
)
async def close_session(session_id: str) -> Response:
    if not get_session_store().close_session(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
