"""Convenience exports for service layer."""
from .assist_service import AssistServiceError, draft_post, set_text_generator
from .auth_service import register_user
from .change_feed import ChangeEvent, ChangeFeed
from .message_service import compose_message
from .post_service import compose_comment, compose_post
from .repository import Repository, get_repository
from .session_service import SessionManager, SessionState, get_current_user, get_session_manager
from .store import (
    Collection,
    FileBackend,
    KeyValueBackend,
    MemoryBackend,
    PersistentStore,
    SQLBackend,
    StorageError,
    build_store,
)

__all__ = [
    "AssistServiceError",
    "draft_post",
    "set_text_generator",
    "register_user",
    "ChangeEvent",
    "ChangeFeed",
    "compose_message",
    "compose_comment",
    "compose_post",
    "Repository",
    "get_repository",
    "SessionManager",
    "SessionState",
    "get_current_user",
    "get_session_manager",
    "Collection",
    "FileBackend",
    "KeyValueBackend",
    "MemoryBackend",
    "PersistentStore",
    "SQLBackend",
    "StorageError",
    "build_store",
]
