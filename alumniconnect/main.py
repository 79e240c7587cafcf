"""Application entry point for the FastAPI backend."""
from __future__ import annotations

import logging
import os
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .routers import (
    assist_router,
    auth_router,
    messages_router,
    network_router,
    notifications_router,
    posts_router,
    profiles_router,
    session_router,
)
from .services import Repository, SessionManager, build_store

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version
DISABLE_SESSION_POLLING = settings.disable_session_polling or os.getenv("PYTEST_CURRENT_TEST") is not None

app = FastAPI(title=APP_NAME, version=API_VERSION)

cors_origins = os.getenv("CORS_ORIGINS")
if cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(network_router)
app.include_router(posts_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(profiles_router)
app.include_router(assist_router)
app.include_router(session_router)


@app.on_event("startup")
async def _startup() -> None:
    """Open the store and resume any recorded session before serving."""

    try:
        store = build_store(settings)
    except Exception:  # pragma: no cover
        logger.exception("Storage initialisation failed")
        raise

    repository = Repository(store, avatar_base_url=settings.avatar_base_url)
    manager = SessionManager(
        repository,
        poll_interval=settings.session_poll_seconds,
        polling_enabled=not DISABLE_SESSION_POLLING,
    )
    app.state.repository = repository
    app.state.session_manager = manager

    logger.info("Using %s storage (namespace=%s)", settings.storage_backend, settings.storage_namespace)
    user = manager.restore()
    if user is not None:
        logger.info("Resumed session for %s", user.id)
    if DISABLE_SESSION_POLLING:
        logger.info("Session polling disabled (testing mode)")


@app.on_event("shutdown")
async def _shutdown() -> None:
    """Stop the session poller cleanly during application shutdown."""

    manager: SessionManager | None = getattr(app.state, "session_manager", None)
    if manager is not None:
        await manager.close()


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    """Report which storage backend this process is using."""

    return {"status": "ok", "storage": settings.storage_backend}
