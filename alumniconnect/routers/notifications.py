"""Notification API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from ..schemas import NotificationListResponse, NotificationSummaryResponse, User
from ..services import Repository, get_current_user, get_repository

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_my_notifications(
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> NotificationListResponse:
    return NotificationListResponse(items=repository.list_notifications(current_user.id))


@router.get("/summary", response_model=NotificationSummaryResponse)
async def notification_summary_endpoint(
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> NotificationSummaryResponse:
    return NotificationSummaryResponse(unread_count=repository.count_unread_notifications(current_user.id))


@router.post("/mark-read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notifications_read(
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> None:
    repository.mark_all_notifications_read(current_user.id)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read_endpoint(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    repository: Repository = Depends(get_repository),
) -> None:
    owned = {item.id for item in repository.list_notifications(current_user.id)}
    if notification_id not in owned or not repository.mark_notification_read(notification_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
