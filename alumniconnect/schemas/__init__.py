"""Convenience exports for schema layer."""
from .assist import AssistDraftResponse
from .auth import LoginRequest, RegisterRequest, SessionResponse
from .messages import Message, MessageSendRequest, MessageThreadResponse
from .notifications import (
    Notification,
    NotificationCreate,
    NotificationListResponse,
    NotificationSummaryResponse,
    NotificationType,
)
from .posts import (
    Comment,
    CommentCreate,
    LikeStateResponse,
    Post,
    PostCreate,
    PostFeedResponse,
    SharePostRequest,
)
from .profiles import ProfileUpdateRequest
from .users import (
    ConnectionRequestPayload,
    DirectoryEntry,
    DirectoryResponse,
    User,
    UserListResponse,
    UserRole,
    parse_skills,
)

__all__ = [
    "AssistDraftResponse",
    "LoginRequest",
    "RegisterRequest",
    "SessionResponse",
    "Message",
    "MessageSendRequest",
    "MessageThreadResponse",
    "Notification",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationSummaryResponse",
    "NotificationType",
    "Comment",
    "CommentCreate",
    "LikeStateResponse",
    "Post",
    "PostCreate",
    "PostFeedResponse",
    "SharePostRequest",
    "ProfileUpdateRequest",
    "ConnectionRequestPayload",
    "DirectoryEntry",
    "DirectoryResponse",
    "User",
    "UserListResponse",
    "UserRole",
    "parse_skills",
]
