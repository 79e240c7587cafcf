"""Direct messages between two users and post sharing."""
from __future__ import annotations

from typing import Iterable

from ..constants import MESSAGE_PREVIEW_LENGTH
from ..helpers import new_id, now_ms
from ..schemas import Message, NotificationCreate, NotificationType
from .notification_service import create_notification
from .post_service import get_post
from .store import Collection, PersistentStore
from .user_service import get_user


def compose_message(
    *,
    sender_id: str,
    receiver_id: str,
    content: str,
    image_url: str | None = None,
) -> Message | None:
    """Build an outgoing message, or ``None`` when there is neither text nor image."""

    if not content.strip() and not image_url:
        return None
    return Message(
        id=new_id("msg"),
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        image_url=image_url or None,
        timestamp=now_ms(),
    )


def message_preview(content: str) -> str:
    preview = content[:MESSAGE_PREVIEW_LENGTH]
    if len(content) > MESSAGE_PREVIEW_LENGTH:
        preview += "..."
    return f"sent you a message: {preview}"


def get_messages(store: PersistentStore, user_a: str, user_b: str) -> list[Message]:
    """Conversation between two users in either direction, oldest first."""

    pair = {user_a, user_b}
    thread = [
        message
        for message in store.load_records(Collection.MESSAGES, Message)
        if {message.sender_id, message.receiver_id} == pair
    ]
    return sorted(thread, key=lambda message: message.timestamp)


def send_message(store: PersistentStore, message: Message) -> Message:
    """Store ``message`` and notify the receiver when the sender is known."""

    messages = store.load_records(Collection.MESSAGES, Message)
    messages.append(message)
    store.save_records(Collection.MESSAGES, messages)

    sender = get_user(store, message.sender_id)
    if sender is not None:
        create_notification(
            store,
            NotificationCreate(
                user_id=message.receiver_id,
                actor_id=message.sender_id,
                actor_name=sender.name,
                actor_avatar=sender.avatar_url,
                type=NotificationType.NEW_MESSAGE,
                content=message_preview(message.content),
            ),
        )
    return message


def share_post(
    store: PersistentStore,
    *,
    post_id: str,
    sender_id: str,
    recipient_ids: Iterable[str],
) -> list[Message]:
    """Send a copy of a post to each recipient as a direct message."""

    post = get_post(store, post_id)
    if post is None:
        return []
    content = f'Shared post from {post.author_name}:\n\n"{post.content}"'
    sent: list[Message] = []
    for recipient_id in dict.fromkeys(recipient_ids):
        message = Message(
            id=new_id("msg"),
            sender_id=sender_id,
            receiver_id=recipient_id,
            content=content,
            image_url=post.image_url,
            timestamp=now_ms(),
        )
        sent.append(send_message(store, message))
    return sent


__all__ = [
    "compose_message",
    "message_preview",
    "get_messages",
    "send_message",
    "share_post",
]
