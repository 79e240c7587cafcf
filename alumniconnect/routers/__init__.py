"""Aggregate router exports."""
from .assist import router as assist_router
from .auth import router as auth_router
from .messages import router as messages_router
from .network import router as network_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .profiles import router as profiles_router
from .session import router as session_router

__all__ = [
    "assist_router",
    "auth_router",
    "messages_router",
    "network_router",
    "notifications_router",
    "posts_router",
    "profiles_router",
    "session_router",
]
