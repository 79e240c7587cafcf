"""User records: registration, lookup, profile edits and the member directory."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from ..helpers import new_id
from ..schemas import User, UserRole
from .store import Collection, PersistentStore

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_BASE_URL = "https://picsum.photos"


def avatar_url_for(seed: str, *, base_url: str | None = None, size: int = 200) -> str:
    """Deterministic placeholder image addressed by ``seed``."""
    base = (base_url or DEFAULT_AVATAR_BASE_URL).rstrip("/")
    return f"{base}/seed/{seed}/{size}"


def list_users(store: PersistentStore) -> list[User]:
    return store.load_records(Collection.USERS, User)


def get_user(store: PersistentStore, user_id: str) -> User | None:
    return next((user for user in list_users(store) if user.id == user_id), None)


def users_by_ids(store: PersistentStore, user_ids: Iterable[str]) -> list[User]:
    """Return the users whose id is in ``user_ids``, in roster order."""
    wanted = set(user_ids)
    return [user for user in list_users(store) if user.id in wanted]


def create_user(
    store: PersistentStore,
    *,
    data: Mapping[str, Any],
    avatar_base_url: str | None = None,
) -> User:
    """Append a new user built from ``data`` on top of the registration defaults.

    Missing or invalid values fall back to the defaults, so a partial mapping
    always yields a stored user.
    """

    user_id = new_id("user")
    defaults: dict[str, Any] = {
        "name": "",
        "email": "",
        "connections": [],
        "incoming_requests": [],
        "skills": [],
        "role": UserRole.STUDENT,
        "avatar_url": avatar_url_for(user_id, base_url=avatar_base_url),
        "profile_views": 0,
    }
    record = {**defaults, **{key: value for key, value in data.items() if value is not None}}
    record["id"] = user_id
    try:
        user = User.model_validate(record)
    except ValidationError as exc:
        rejected = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
        logger.warning("Ignoring invalid user field(s) %s for %s", ", ".join(sorted(rejected)), user_id)
        for field in rejected:
            if field in defaults:
                record[field] = defaults[field]
            else:
                record.pop(field, None)
        user = User.model_validate(record)

    users = list_users(store)
    users.append(user)
    store.save_records(Collection.USERS, users)
    return user


def save_user(store: PersistentStore, user: User) -> User:
    """Insert ``user`` or replace the stored record with the same id."""

    users = list_users(store)
    for index, existing in enumerate(users):
        if existing.id == user.id:
            users[index] = user
            break
    else:
        users.append(user)
    store.save_records(Collection.USERS, users)
    return user


def update_user(store: PersistentStore, user: User) -> bool:
    """Replace the stored record for ``user.id``; unknown ids are ignored."""

    users = list_users(store)
    for index, existing in enumerate(users):
        if existing.id == user.id:
            users[index] = user
            store.save_records(Collection.USERS, users)
            return True
    return False


def find_by_email(store: PersistentStore, email: str) -> User | None:
    candidate = email.lower()
    return next((user for user in list_users(store) if user.email.lower() == candidate), None)


def increment_profile_views(store: PersistentStore, user_id: str) -> int | None:
    """Bump the view counter and return the new value."""

    users = list_users(store)
    user = next((item for item in users if item.id == user_id), None)
    if user is None:
        return None
    user.profile_views += 1
    store.save_records(Collection.USERS, users)
    return user.profile_views


def _matches(user: User, needle: str) -> bool:
    if needle in user.name.lower() or needle in user.headline.lower():
        return True
    return any(needle in skill.lower() for skill in user.skills)


def search_users(store: PersistentStore, query: str = "", *, exclude_id: str | None = None) -> list[User]:
    """Directory lookup on name, headline or any skill."""

    needle = query.strip().lower()
    users = [user for user in list_users(store) if user.id != exclude_id]
    if not needle:
        return users
    return [user for user in users if _matches(user, needle)]


__all__ = [
    "avatar_url_for",
    "list_users",
    "get_user",
    "users_by_ids",
    "create_user",
    "save_user",
    "update_user",
    "find_by_email",
    "increment_profile_views",
    "search_users",
]
