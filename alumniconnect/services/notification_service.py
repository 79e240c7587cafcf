"""Notification helper logic for the key-value store."""
from __future__ import annotations

from ..helpers import new_id, now_ms
from ..schemas import Notification, NotificationCreate
from .store import Collection, PersistentStore


def _load(store: PersistentStore) -> list[Notification]:
    return store.load_records(Collection.NOTIFICATIONS, Notification)


def list_notifications(store: PersistentStore, user_id: str) -> list[Notification]:
    """Return notifications for the supplied recipient ordered newest first."""

    records = [item for item in _load(store) if item.user_id == user_id]
    return sorted(records, key=lambda item: item.timestamp, reverse=True)


def count_unread_notifications(store: PersistentStore, user_id: str) -> int:
    return sum(1 for item in _load(store) if item.user_id == user_id and not item.read)


def create_notification(store: PersistentStore, data: NotificationCreate) -> Notification:
    """Persist a new unread notification at the head of the collection."""

    notification = Notification(
        **data.model_dump(),
        id=new_id("notif"),
        timestamp=now_ms(),
        read=False,
    )
    records = _load(store)
    records.insert(0, notification)
    store.save_records(Collection.NOTIFICATIONS, records)
    return notification


def mark_notification_read(store: PersistentStore, notification_id: str) -> Notification | None:
    records = _load(store)
    target = next((item for item in records if item.id == notification_id), None)
    if target is None:
        return None
    target.read = True
    store.save_records(Collection.NOTIFICATIONS, records)
    return target


def mark_all_read(store: PersistentStore, user_id: str) -> int:
    """Mark every notification of ``user_id`` as read and return how many were touched."""

    records = _load(store)
    touched = 0
    for item in records:
        if item.user_id == user_id:
            item.read = True
            touched += 1
    if touched:
        store.save_records(Collection.NOTIFICATIONS, records)
    return touched


__all__ = [
    "list_notifications",
    "count_unread_notifications",
    "create_notification",
    "mark_notification_read",
    "mark_all_read",
]
