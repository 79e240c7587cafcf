"""Registration and email sign-in routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..constants import LOGIN_FAILED_DETAIL
from ..schemas import LoginRequest, RegisterRequest, SessionResponse, User
from ..services import (
    Repository,
    SessionManager,
    get_current_user,
    get_repository,
    get_session_manager,
    register_user,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _to_session_response(manager: SessionManager) -> SessionResponse:
    return SessionResponse(
        state=str(manager.state),
        user=manager.current_user,
        refresh_tick=manager.refresh_tick,
    )


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register_endpoint(
    payload: RegisterRequest,
    repository: Repository = Depends(get_repository),
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    user = register_user(repository, payload)
    manager.authenticate(user)
    return _to_session_response(manager)


@router.post("/login", response_model=SessionResponse)
async def login_endpoint(
    payload: LoginRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    user = manager.login(payload.email.strip())
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=LOGIN_FAILED_DETAIL)
    return _to_session_response(manager)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout_endpoint(manager: SessionManager = Depends(get_session_manager)) -> None:
    manager.logout()


@router.get("/me", response_model=User)
async def me_endpoint(current_user: User = Depends(get_current_user)) -> User:
    return current_user
