"""Signed-in user state, restored from the store pointer and kept fresh.

The session reacts to repository change events that name the current user
and, for edits made outside this process, re-polls the store on a fixed
interval while a user is signed in.
"""
from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from ..constants import SIGN_IN_REQUIRED_DETAIL
from ..schemas import User
from .change_feed import ChangeEvent
from .repository import Repository

logger = logging.getLogger(__name__)

SessionListener = Callable[[User | None], None]


class SessionState(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


def _watched_fields_differ(latest: User, snapshot: User) -> bool:
    return (
        len(latest.incoming_requests) != len(snapshot.incoming_requests)
        or len(latest.connections) != len(snapshot.connections)
        or latest.profile_views != snapshot.profile_views
    )


class SessionManager:
    def __init__(
        self,
        repository: Repository,
        *,
        poll_interval: float = 5.0,
        polling_enabled: bool = True,
    ) -> None:
        self._repository = repository
        self._poll_interval = poll_interval
        self._polling_enabled = polling_enabled
        self._current_user: User | None = None
        self._refresh_tick = 0
        self._listeners: list[SessionListener] = []
        self._unsubscribe: Callable[[], None] | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._poll_stop: asyncio.Event | None = None

    @property
    def current_user(self) -> User | None:
        return self._current_user

    @property
    def state(self) -> SessionState:
        if self._current_user is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def refresh_tick(self) -> int:
        """Counter bumped on every refresh so dependents know to re-read their data."""
        return self._refresh_tick

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    # --- transitions ---

    def restore(self) -> User | None:
        """Resume the session recorded in the store, if its user still exists."""

        user_id = self._repository.get_session_user_id()
        if not user_id:
            return None
        user = self._repository.get_user(user_id)
        if user is None:
            logger.info("Stored session points at missing user %s", user_id)
            return None
        self._enter(user)
        return user

    def login(self, email: str) -> User | None:
        user = self._repository.login(email)
        if user is None:
            return None
        self.authenticate(user)
        return user

    def authenticate(self, user: User) -> None:
        self._repository.set_session_user_id(user.id)
        self._enter(user)

    def logout(self) -> None:
        self._teardown()
        self._repository.clear_session_user_id()
        self._replace(None)

    def _enter(self, user: User) -> None:
        self._teardown()
        self._replace(user)
        self._unsubscribe = self._repository.changes.subscribe(self._on_change)
        self._start_polling()

    # --- refresh ---

    def refresh(self) -> bool:
        """Single poll tick; returns True when the snapshot was replaced."""

        snapshot = self._current_user
        if snapshot is None:
            return False
        latest = self._repository.get_user(snapshot.id)
        if latest is None:
            return False
        changed = _watched_fields_differ(latest, snapshot)
        if changed:
            self._replace(latest)
        self._refresh_tick += 1
        return changed

    def reload(self) -> User | None:
        """Replace the snapshot with the stored record unconditionally."""

        snapshot = self._current_user
        if snapshot is None:
            return None
        latest = self._repository.get_user(snapshot.id)
        if latest is not None:
            self._replace(latest)
        return self._current_user

    def update_profile(self, user: User) -> bool:
        snapshot = self._current_user
        if snapshot is None or user.id != snapshot.id:
            return False
        if not self._repository.update_user(user):
            return False
        self._replace(user)
        return True

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _replace(self, user: User | None) -> None:
        self._current_user = user
        for listener in list(self._listeners):
            try:
                listener(user)
            except Exception:
                logger.exception("Session listener failed")

    def _on_change(self, event: ChangeEvent) -> None:
        snapshot = self._current_user
        if snapshot is None or snapshot.id not in event.user_ids:
            return
        self.reload()
        self._refresh_tick += 1

    # --- polling ---

    def _start_polling(self) -> None:
        if not self._polling_enabled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; session polling not started")
            return
        stop = asyncio.Event()
        self._poll_stop = stop
        self._poll_task = loop.create_task(self._poll_loop(stop))

    async def _poll_loop(self, stop: asyncio.Event) -> None:
        """Background task that refreshes the session on a fixed interval."""

        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                if stop.is_set():
                    break
                try:
                    self.refresh()
                except Exception:
                    logger.exception("Session refresh failed")

    def _teardown(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._poll_stop is not None:
            self._poll_stop.set()
        self._poll_stop = None
        self._poll_task = None

    async def close(self) -> None:
        """Stop polling and wait for the background task to finish."""

        task = self._poll_task
        self._teardown()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:  # pragma: no cover
                pass


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def get_current_user(manager: SessionManager = Depends(get_session_manager)) -> User:
    """Resolve the signed-in user or reject the request."""

    user = manager.current_user
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SIGN_IN_REQUIRED_DETAIL)
    return user


__all__ = [
    "SessionState",
    "SessionManager",
    "SessionListener",
    "get_session_manager",
    "get_current_user",
]
