"""Business logic for connection requests and the symmetric connection graph."""
from __future__ import annotations

from ..constants import CONNECTION_ACCEPTED_TEXT, CONNECTION_REQUEST_TEXT
from ..schemas import Notification, NotificationCreate, NotificationType, User
from .notification_service import create_notification
from .store import Collection, PersistentStore
from .user_service import get_user, list_users, users_by_ids


def _index(users: list[User]) -> dict[str, User]:
    return {user.id: user for user in users}


def send_connection_request(
    store: PersistentStore,
    *,
    requester_id: str,
    target_id: str,
) -> Notification | None:
    """Queue ``requester_id`` on the target's incoming requests.

    Repeated invitations, invitations to an existing connection and
    invitations to oneself are ignored. Returns the notification sent to the
    target, or ``None`` when nothing changed.
    """

    if requester_id == target_id:
        return None
    users = list_users(store)
    by_id = _index(users)
    target = by_id.get(target_id)
    requester = by_id.get(requester_id)
    if target is None or requester is None:
        return None
    if requester_id in target.incoming_requests or requester_id in target.connections:
        return None

    target.incoming_requests.append(requester_id)
    store.save_records(Collection.USERS, users)

    return create_notification(
        store,
        NotificationCreate(
            user_id=target_id,
            actor_id=requester_id,
            actor_name=requester.name,
            actor_avatar=requester.avatar_url,
            type=NotificationType.CONNECTION_REQUEST,
            content=CONNECTION_REQUEST_TEXT,
        ),
    )


def accept_connection_request(
    store: PersistentStore,
    *,
    accepter_id: str,
    requester_id: str,
) -> Notification | None:
    """Connect both users and clear the accepted request.

    A request the accepter may have sent in the other direction is left in
    place.
    """

    if accepter_id == requester_id:
        return None
    users = list_users(store)
    by_id = _index(users)
    accepter = by_id.get(accepter_id)
    requester = by_id.get(requester_id)
    if accepter is None or requester is None:
        return None

    if requester_id not in accepter.connections:
        accepter.connections.append(requester_id)
    if accepter_id not in requester.connections:
        requester.connections.append(accepter_id)
    accepter.incoming_requests = [uid for uid in accepter.incoming_requests if uid != requester_id]
    store.save_records(Collection.USERS, users)

    return create_notification(
        store,
        NotificationCreate(
            user_id=requester_id,
            actor_id=accepter_id,
            actor_name=accepter.name,
            actor_avatar=accepter.avatar_url,
            type=NotificationType.CONNECTION_ACCEPTED,
            content=CONNECTION_ACCEPTED_TEXT,
        ),
    )


def reject_connection_request(store: PersistentStore, *, user_id: str, requester_id: str) -> bool:
    """Drop ``requester_id`` from the user's incoming requests without telling them."""

    users = list_users(store)
    user = _index(users).get(user_id)
    if user is None or requester_id not in user.incoming_requests:
        return False
    user.incoming_requests = [uid for uid in user.incoming_requests if uid != requester_id]
    store.save_records(Collection.USERS, users)
    return True


def list_connections(store: PersistentStore, user_id: str) -> list[User]:
    user = get_user(store, user_id)
    if user is None:
        return []
    return users_by_ids(store, user.connections)


def list_incoming_requesters(store: PersistentStore, user_id: str) -> list[User]:
    user = get_user(store, user_id)
    if user is None:
        return []
    return users_by_ids(store, user.incoming_requests)


def is_connected(store: PersistentStore, *, user_id: str, target_id: str) -> bool:
    user = get_user(store, user_id)
    return user is not None and target_id in user.connections


def is_request_pending(store: PersistentStore, *, requester_id: str, target_id: str) -> bool:
    """True when ``requester_id`` is waiting on ``target_id`` to respond."""
    target = get_user(store, target_id)
    return target is not None and requester_id in target.incoming_requests


__all__ = [
    "send_connection_request",
    "accept_connection_request",
    "reject_connection_request",
    "list_connections",
    "list_incoming_requesters",
    "is_connected",
    "is_request_pending",
]
