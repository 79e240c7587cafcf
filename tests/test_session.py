"""Tests for the session component: restore, login, refresh and polling."""
from __future__ import annotations

import asyncio
import os

import pytest

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DISABLE_SESSION_POLLING", "true")

from alumniconnect.schemas import User  # noqa: E402
from alumniconnect.services import MemoryBackend, PersistentStore, Repository, SessionManager, SessionState  # noqa: E402
from alumniconnect.services import user_service  # noqa: E402


@pytest.fixture
def repository() -> Repository:
    return Repository(PersistentStore(MemoryBackend()))


@pytest.fixture
def manager(repository: Repository) -> SessionManager:
    return SessionManager(repository, poll_interval=0.01)


def test_restore_resumes_recorded_user(repository: Repository, manager: SessionManager) -> None:
    repository.set_session_user_id("user_2")

    user = manager.restore()
    assert user is not None and user.id == "user_2"
    assert manager.state == SessionState.AUTHENTICATED


def test_restore_with_missing_user_stays_signed_out(repository: Repository, manager: SessionManager) -> None:
    repository.set_session_user_id("user_gone")

    assert manager.restore() is None
    assert manager.state == SessionState.UNAUTHENTICATED
    assert manager.current_user is None


def test_login_records_pointer(repository: Repository, manager: SessionManager) -> None:
    assert manager.login("nobody@example.com") is None
    assert manager.state == SessionState.UNAUTHENTICATED
    assert repository.get_session_user_id() is None

    user = manager.login("elena@example.com")
    assert user is not None and user.id == "user_3"
    assert repository.get_session_user_id() == "user_3"


def test_logout_clears_pointer_and_snapshot(repository: Repository, manager: SessionManager) -> None:
    manager.login("sarah@example.com")
    manager.logout()

    assert manager.current_user is None
    assert manager.state == SessionState.UNAUTHENTICATED
    assert repository.get_session_user_id() is None

    # no longer listening once signed out
    repository.send_connection_request("user_2", "user_1")
    assert manager.refresh_tick == 0


def test_refresh_replaces_snapshot_only_on_watched_change(repository: Repository, manager: SessionManager) -> None:
    manager.login("sarah@example.com")
    views = manager.current_user.profile_views if manager.current_user else 0

    # edits written straight to the store bypass the change feed
    user_service.increment_profile_views(repository.store, "user_1")
    assert manager.refresh() is True
    assert manager.current_user is not None and manager.current_user.profile_views == views + 1
    assert manager.refresh_tick == 1

    sarah = user_service.get_user(repository.store, "user_1")
    assert sarah is not None
    user_service.update_user(repository.store, sarah.model_copy(update={"headline": "Changed elsewhere"}))
    assert manager.refresh() is False
    assert manager.current_user.headline != "Changed elsewhere"
    assert manager.refresh_tick == 2


def test_refresh_without_session_does_nothing(manager: SessionManager) -> None:
    assert manager.refresh() is False
    assert manager.refresh_tick == 0


def test_change_feed_reloads_current_user(repository: Repository, manager: SessionManager) -> None:
    manager.login("sarah@example.com")
    seen: list[User | None] = []
    manager.subscribe(seen.append)

    repository.send_connection_request("user_2", "user_1")

    assert manager.current_user is not None
    assert manager.current_user.incoming_requests == ["user_2"]
    assert manager.refresh_tick == 1
    assert seen and seen[-1] is manager.current_user


def test_change_feed_ignores_other_users(repository: Repository, manager: SessionManager) -> None:
    manager.login("sarah@example.com")

    repository.send_connection_request("user_2", "user_3")

    assert manager.refresh_tick == 0
    assert manager.current_user is not None and manager.current_user.incoming_requests == []


def test_update_profile_persists_and_replaces_snapshot(repository: Repository, manager: SessionManager) -> None:
    assert manager.update_profile(User(id="user_1", name="x", email="x@example.com")) is False

    sarah = manager.login("sarah@example.com")
    assert sarah is not None
    updated = sarah.model_copy(update={"location": "Zurich"})

    assert manager.update_profile(updated) is True
    assert manager.current_user is not None and manager.current_user.location == "Zurich"
    stored = repository.get_user("user_1")
    assert stored is not None and stored.location == "Zurich"


def test_polling_needs_running_loop(manager: SessionManager) -> None:
    manager.login("sarah@example.com")
    assert manager.is_polling is False


def test_poller_picks_up_external_changes(repository: Repository, manager: SessionManager) -> None:
    async def scenario() -> None:
        manager.login("david@example.com")
        assert manager.is_polling

        user_service.increment_profile_views(repository.store, "user_2")
        await asyncio.sleep(0.1)

        assert manager.refresh_tick > 0
        stored = repository.get_user("user_2")
        assert manager.current_user is not None and stored is not None
        assert manager.current_user.profile_views == stored.profile_views

        await manager.close()
        assert manager.is_polling is False

    asyncio.run(scenario())


def test_each_login_starts_a_fresh_poller(manager: SessionManager) -> None:
    async def scenario() -> None:
        manager.login("sarah@example.com")
        first = manager._poll_task
        manager.login("david@example.com")
        second = manager._poll_task

        assert first is not None and second is not None and first is not second
        await asyncio.sleep(0.05)
        assert first.done()

        manager.logout()
        await asyncio.sleep(0.05)
        assert second.done()
        assert manager.is_polling is False

    asyncio.run(scenario())
