"""Member directory and connection request routes."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import ConnectionRequestPayload, DirectoryEntry, DirectoryResponse, User, UserListResponse
from ..services import Repository, get_current_user, get_repository

router = APIRouter(prefix="/network", tags=["network"])

logger = logging.getLogger(__name__)


def _directory_status(repository: Repository, viewer_id: str, target_id: str) -> str:
    if repository.is_connected(viewer_id, target_id):
        return "connected"
    if repository.is_request_pending(viewer_id, target_id):
        return "pending"
    if repository.is_request_pending(target_id, viewer_id):
        return "incoming"
    return "available"


@router.get("/directory", response_model=DirectoryResponse)
async def directory_endpoint(
    q: str = Query(default="", max_length=100),
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> DirectoryResponse:
    results = [
        DirectoryEntry(user=user, status=_directory_status(repository, current_user.id, user.id))
        for user in repository.search_users(q, exclude_id=current_user.id)
    ]
    return DirectoryResponse(query=q, results=results)


@router.get("/connections", response_model=UserListResponse)
async def connections_endpoint(
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> UserListResponse:
    return UserListResponse(items=repository.list_connections(current_user.id))


@router.get("/requests", response_model=UserListResponse)
async def incoming_requests_endpoint(
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> UserListResponse:
    return UserListResponse(items=repository.list_incoming_requesters(current_user.id))


@router.post("/requests", status_code=status.HTTP_202_ACCEPTED)
async def send_request_endpoint(
    payload: ConnectionRequestPayload,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> dict[str, bool]:
    if payload.target_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot connect to yourself")
    if repository.get_user(payload.target_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    sent = repository.send_connection_request(current_user.id, payload.target_id)
    return {"requested": sent}


@router.post("/requests/{requester_id}/accept", response_model=UserListResponse)
async def accept_request_endpoint(
    requester_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> UserListResponse:
    if not repository.accept_connection_request(current_user.id, requester_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("User %s accepted connection from %s", current_user.id, requester_id)
    return UserListResponse(items=repository.list_connections(current_user.id))


@router.post("/requests/{requester_id}/reject", status_code=status.HTTP_204_NO_CONTENT)
async def reject_request_endpoint(
    requester_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> None:
    if not repository.reject_connection_request(current_user.id, requester_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Connection request not found")


@router.post("/users/{user_id}/view")
async def profile_view_endpoint(
    user_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> dict[str, int]:
    if user_id == current_user.id:
        target = repository.get_user(user_id)
        if target is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return {"profile_views": target.profile_views}
    views = repository.increment_profile_views(user_id)
    if views is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"profile_views": views}
