"""Session state routes used by clients to decide when to re-read their data."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import SessionResponse
from ..services import SessionManager, get_session_manager

router = APIRouter(prefix="/session", tags=["session"])


def _snapshot(manager: SessionManager) -> SessionResponse:
    return SessionResponse(state=str(manager.state), user=manager.current_user, refresh_tick=manager.refresh_tick)


@router.get("/", response_model=SessionResponse)
async def session_state_endpoint(manager: SessionManager = Depends(get_session_manager)) -> SessionResponse:
    return _snapshot(manager)


@router.post("/refresh", response_model=SessionResponse)
async def session_refresh_endpoint(manager: SessionManager = Depends(get_session_manager)) -> SessionResponse:
    """Run one refresh tick immediately instead of waiting for the poller."""

    manager.refresh()
    return _snapshot(manager)
