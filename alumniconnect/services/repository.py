"""Data-access facade that owns every write to the persistent store."""
from __future__ import annotations

import threading
from typing import Any, Iterable, Mapping

from fastapi import Request

from ..schemas import Comment, Message, Notification, NotificationCreate, Post, User
from . import connection_service, message_service, notification_service, post_service, user_service
from .change_feed import ChangeFeed
from .store import PersistentStore


class Repository:
    """Whole-collection read-modify-write operations over a :class:`PersistentStore`.

    Mutations run under a re-entrant lock so overlapping callers in this
    process cannot overwrite each other's snapshot. Each mutation that
    changes something publishes a :class:`~.change_feed.ChangeEvent` naming
    the users whose view of the data changed. Absent records never raise:
    callers get ``None``, ``False`` or an empty list.
    """

    def __init__(
        self,
        store: PersistentStore,
        *,
        changes: ChangeFeed | None = None,
        avatar_base_url: str | None = None,
    ) -> None:
        self._store = store
        self._changes = changes or ChangeFeed()
        self._avatar_base_url = avatar_base_url
        self._lock = threading.RLock()

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def changes(self) -> ChangeFeed:
        return self._changes

    # --- Users -------------------------------------------------------------

    def list_users(self) -> list[User]:
        return user_service.list_users(self._store)

    def get_user(self, user_id: str) -> User | None:
        return user_service.get_user(self._store, user_id)

    def create_user(self, data: Mapping[str, Any]) -> User:
        with self._lock:
            user = user_service.create_user(self._store, data=data, avatar_base_url=self._avatar_base_url)
        self._changes.publish("user.created", [user.id])
        return user

    def save_user(self, user: User) -> User:
        with self._lock:
            saved = user_service.save_user(self._store, user)
        self._changes.publish("user.saved", [saved.id])
        return saved

    def login(self, email: str) -> User | None:
        return user_service.find_by_email(self._store, email)

    def update_user(self, user: User) -> bool:
        with self._lock:
            updated = user_service.update_user(self._store, user)
        if updated:
            self._changes.publish("user.updated", [user.id])
        return updated

    def increment_profile_views(self, user_id: str) -> int | None:
        with self._lock:
            views = user_service.increment_profile_views(self._store, user_id)
        if views is not None:
            self._changes.publish("user.profile_viewed", [user_id])
        return views

    def search_users(self, query: str = "", *, exclude_id: str | None = None) -> list[User]:
        return user_service.search_users(self._store, query, exclude_id=exclude_id)

    # --- Connections -------------------------------------------------------

    def send_connection_request(self, requester_id: str, target_id: str) -> bool:
        with self._lock:
            notification = connection_service.send_connection_request(
                self._store, requester_id=requester_id, target_id=target_id
            )
        if notification is None:
            return False
        self._changes.publish("connection.requested", [requester_id, target_id])
        return True

    def accept_connection_request(self, accepter_id: str, requester_id: str) -> bool:
        with self._lock:
            notification = connection_service.accept_connection_request(
                self._store, accepter_id=accepter_id, requester_id=requester_id
            )
        if notification is None:
            return False
        self._changes.publish("connection.accepted", [accepter_id, requester_id])
        return True

    def reject_connection_request(self, user_id: str, requester_id: str) -> bool:
        with self._lock:
            removed = connection_service.reject_connection_request(
                self._store, user_id=user_id, requester_id=requester_id
            )
        if removed:
            self._changes.publish("connection.rejected", [user_id])
        return removed

    def list_connections(self, user_id: str) -> list[User]:
        return connection_service.list_connections(self._store, user_id)

    def list_incoming_requesters(self, user_id: str) -> list[User]:
        return connection_service.list_incoming_requesters(self._store, user_id)

    def is_connected(self, user_id: str, target_id: str) -> bool:
        return connection_service.is_connected(self._store, user_id=user_id, target_id=target_id)

    def is_request_pending(self, requester_id: str, target_id: str) -> bool:
        return connection_service.is_request_pending(
            self._store, requester_id=requester_id, target_id=target_id
        )

    # --- Posts -------------------------------------------------------------

    def list_posts(self) -> list[Post]:
        return post_service.list_posts(self._store)

    def get_post(self, post_id: str) -> Post | None:
        return post_service.get_post(self._store, post_id)

    def search_posts(self, query: str = "") -> list[Post]:
        return post_service.search_posts(self._store, query)

    def create_post(self, post: Post) -> Post:
        with self._lock:
            created = post_service.create_post(self._store, post)
        self._changes.publish("post.created", [created.author_id])
        return created

    def toggle_like_post(self, post_id: str, user_id: str) -> Post | None:
        with self._lock:
            post = post_service.toggle_like_post(self._store, post_id=post_id, user_id=user_id)
        if post is not None:
            self._changes.publish("post.liked", [user_id])
        return post

    def add_comment(self, post_id: str, comment: Comment) -> Post | None:
        with self._lock:
            post = post_service.add_comment(self._store, post_id=post_id, comment=comment)
        if post is not None:
            self._changes.publish("post.commented", [comment.author_id])
        return post

    # --- Notifications -----------------------------------------------------

    def list_notifications(self, user_id: str) -> list[Notification]:
        return notification_service.list_notifications(self._store, user_id)

    def count_unread_notifications(self, user_id: str) -> int:
        return notification_service.count_unread_notifications(self._store, user_id)

    def create_notification(self, data: NotificationCreate) -> Notification:
        with self._lock:
            notification = notification_service.create_notification(self._store, data)
        self._changes.publish("notification.created", [notification.user_id])
        return notification

    def mark_notification_read(self, notification_id: str) -> bool:
        with self._lock:
            notification = notification_service.mark_notification_read(self._store, notification_id)
        if notification is None:
            return False
        self._changes.publish("notification.read", [notification.user_id])
        return True

    def mark_all_notifications_read(self, user_id: str) -> int:
        with self._lock:
            touched = notification_service.mark_all_read(self._store, user_id)
        if touched:
            self._changes.publish("notification.read_all", [user_id])
        return touched

    # --- Messages ----------------------------------------------------------

    def get_messages(self, user_a: str, user_b: str) -> list[Message]:
        return message_service.get_messages(self._store, user_a, user_b)

    def send_message(self, message: Message) -> Message:
        with self._lock:
            sent = message_service.send_message(self._store, message)
        self._changes.publish("message.sent", [sent.sender_id, sent.receiver_id])
        return sent

    def share_post(self, post_id: str, sender_id: str, recipient_ids: Iterable[str]) -> list[Message]:
        with self._lock:
            sent = message_service.share_post(
                self._store, post_id=post_id, sender_id=sender_id, recipient_ids=recipient_ids
            )
        if sent:
            self._changes.publish("post.shared", [sender_id, *(item.receiver_id for item in sent)])
        return sent

    # --- Session pointer ---------------------------------------------------

    def get_session_user_id(self) -> str | None:
        return self._store.get_current_user_id()

    def set_session_user_id(self, user_id: str) -> None:
        self._store.set_current_user_id(user_id)

    def clear_session_user_id(self) -> None:
        self._store.clear_current_user_id()


def get_repository(request: Request) -> Repository:
    """FastAPI dependency returning the repository bound at startup."""
    return request.app.state.repository


__all__ = ["Repository", "get_repository"]
