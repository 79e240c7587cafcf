"""Schemas for notifications."""
from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class NotificationType(StrEnum):
    CONNECTION_REQUEST = "CONNECTION_REQUEST"
    CONNECTION_ACCEPTED = "CONNECTION_ACCEPTED"
    NEW_MESSAGE = "NEW_MESSAGE"
    PROFILE_VIEW = "PROFILE_VIEW"


class NotificationCreate(BaseModel):
    """Notification fields supplied by the caller; id, timestamp and read are assigned."""

    user_id: str
    actor_id: str
    actor_name: str
    actor_avatar: str | None = None
    type: NotificationType
    content: str | None = None


class Notification(NotificationCreate):
    model_config = ConfigDict(extra="allow")

    id: str
    timestamp: int
    read: bool = False


class NotificationListResponse(BaseModel):
    items: list[Notification]


class NotificationSummaryResponse(BaseModel):
    unread_count: int = 0


__all__ = [
    "NotificationType",
    "NotificationCreate",
    "Notification",
    "NotificationListResponse",
    "NotificationSummaryResponse",
]
