"""Behavioural tests for the data-access layer."""
from __future__ import annotations

import json
import os
from typing import Iterator

import pytest

os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("DISABLE_SESSION_POLLING", "true")

from alumniconnect.schemas import Message, NotificationCreate, NotificationType, Post, User  # noqa: E402
from alumniconnect.services import (  # noqa: E402
    ChangeEvent,
    MemoryBackend,
    PersistentStore,
    Repository,
    compose_comment,
    compose_message,
    compose_post,
)
from alumniconnect.services.message_service import message_preview  # noqa: E402


@pytest.fixture
def repository() -> Repository:
    return Repository(PersistentStore(MemoryBackend()), avatar_base_url="https://avatars.test")


@pytest.fixture
def events(repository: Repository) -> Iterator[list[ChangeEvent]]:
    received: list[ChangeEvent] = []
    unsubscribe = repository.changes.subscribe(received.append)
    yield received
    unsubscribe()


def _user(repository: Repository, user_id: str) -> User:
    user = repository.get_user(user_id)
    assert user is not None
    return user


def test_create_user_applies_registration_defaults(repository: Repository) -> None:
    user = repository.create_user({"name": "Priya", "email": "priya@example.com", "about": None})

    assert user.id.startswith("user_")
    assert user.role == "Student"
    assert user.avatar_url == f"https://avatars.test/seed/{user.id}/200"
    assert user.connections == [] and user.incoming_requests == [] and user.skills == []
    assert user.profile_views == 0
    assert repository.list_users()[-1].id == user.id


def test_create_user_ids_are_unique(repository: Repository) -> None:
    ids = {repository.create_user({"name": f"n{i}", "email": f"n{i}@example.com"}).id for i in range(20)}
    assert len(ids) == 20


def test_login_is_case_insensitive(repository: Repository) -> None:
    user = repository.login("SARAH@Example.com")
    assert user is not None and user.id == "user_1"
    assert repository.login("nobody@example.com") is None


def test_update_user_replaces_whole_record(repository: Repository) -> None:
    sarah = _user(repository, "user_1")
    assert repository.update_user(sarah.model_copy(update={"headline": "Staff Engineer", "skills": ["Go"]}))

    stored = _user(repository, "user_1")
    assert stored.headline == "Staff Engineer"
    assert stored.skills == ["Go"]

    ghost = sarah.model_copy(update={"id": "user_missing"})
    assert repository.update_user(ghost) is False
    assert repository.get_user("user_missing") is None


def test_save_user_upserts(repository: Repository) -> None:
    newcomer = User(id="user_new", name="Kim", email="kim@example.com")
    repository.save_user(newcomer)
    repository.save_user(newcomer.model_copy(update={"headline": "Intern"}))

    assert [user.id for user in repository.list_users()].count("user_new") == 1
    assert _user(repository, "user_new").headline == "Intern"


def test_profile_views_only_grow(repository: Repository) -> None:
    before = _user(repository, "user_3").profile_views
    assert repository.increment_profile_views("user_3") == before + 1
    assert repository.increment_profile_views("user_3") == before + 2
    assert repository.increment_profile_views("user_missing") is None


def test_users_never_reference_themselves() -> None:
    user = User(
        id="user_1",
        name="Sarah",
        email="sarah@example.com",
        connections=["user_1", "user_2", "user_2"],
        incoming_requests=["user_1"],
    )
    assert user.connections == ["user_2"]
    assert user.incoming_requests == []


def test_connection_request_is_idempotent(repository: Repository, events: list[ChangeEvent]) -> None:
    assert repository.send_connection_request("user_2", "user_1") is True
    assert repository.send_connection_request("user_2", "user_1") is False

    assert _user(repository, "user_1").incoming_requests == ["user_2"]
    notifications = repository.list_notifications("user_1")
    assert len(notifications) == 1
    assert notifications[0].type == NotificationType.CONNECTION_REQUEST
    assert notifications[0].content == "sent you a connection request."
    assert notifications[0].actor_name == "David Chen"
    assert [event.kind for event in events] == ["connection.requested"]
    assert events[0].user_ids == frozenset({"user_1", "user_2"})


def test_connection_request_ignores_self_missing_and_connected(repository: Repository) -> None:
    assert repository.send_connection_request("user_1", "user_1") is False
    assert repository.send_connection_request("user_1", "user_missing") is False
    assert repository.send_connection_request("user_missing", "user_1") is False

    repository.send_connection_request("user_2", "user_1")
    repository.accept_connection_request("user_1", "user_2")
    assert repository.send_connection_request("user_2", "user_1") is False
    assert repository.list_notifications("user_1")[0].type == NotificationType.CONNECTION_REQUEST


def test_accept_creates_symmetric_connection(repository: Repository) -> None:
    repository.send_connection_request("user_2", "user_1")
    assert repository.accept_connection_request("user_1", "user_2") is True

    sarah = _user(repository, "user_1")
    david = _user(repository, "user_2")
    assert "user_2" in sarah.connections and "user_1" in david.connections
    assert "user_2" not in sarah.incoming_requests
    assert repository.is_connected("user_1", "user_2")
    assert repository.is_connected("user_2", "user_1")

    accepted = repository.list_notifications("user_2")
    assert accepted[0].type == NotificationType.CONNECTION_ACCEPTED
    assert accepted[0].content == "accepted your connection request."


def test_accept_twice_keeps_single_edge(repository: Repository) -> None:
    repository.accept_connection_request("user_1", "user_2")
    repository.accept_connection_request("user_1", "user_2")

    assert _user(repository, "user_1").connections == ["user_2"]
    assert _user(repository, "user_2").connections == ["user_1"]


def test_accept_leaves_reciprocal_request_pending(repository: Repository) -> None:
    repository.send_connection_request("user_2", "user_1")
    repository.send_connection_request("user_1", "user_2")
    repository.accept_connection_request("user_1", "user_2")

    assert repository.is_request_pending("user_1", "user_2")
    assert not repository.is_request_pending("user_2", "user_1")


def test_accept_with_missing_user_is_noop(repository: Repository) -> None:
    assert repository.accept_connection_request("user_1", "user_missing") is False
    assert repository.accept_connection_request("user_1", "user_1") is False
    assert repository.list_notifications("user_1") == []


def test_reject_removes_request_without_notification(repository: Repository) -> None:
    repository.send_connection_request("user_3", "user_1")
    assert [user.id for user in repository.list_incoming_requesters("user_1")] == ["user_3"]

    assert repository.reject_connection_request("user_1", "user_3") is True
    assert repository.reject_connection_request("user_1", "user_3") is False
    assert repository.list_incoming_requesters("user_1") == []
    assert repository.list_connections("user_1") == []
    assert repository.list_notifications("user_3") == []


def test_feed_is_newest_first(repository: Repository) -> None:
    author = _user(repository, "user_3")
    older = compose_post(author, content="older")
    newer = compose_post(author, content="newer")
    assert older is not None and newer is not None
    repository.create_post(newer.model_copy(update={"timestamp": 10**13}))
    repository.create_post(older.model_copy(update={"timestamp": 1}))

    timestamps = [post.timestamp for post in repository.list_posts()]
    assert timestamps == sorted(timestamps, reverse=True)
    assert repository.list_posts()[0].content == "newer"
    assert repository.list_posts()[-1].content == "older"


def test_compose_post_snapshots_author(repository: Repository) -> None:
    author = _user(repository, "user_1")
    assert compose_post(author, content="   ") is None

    post = compose_post(author, content="", image_url="https://img.test/1.png")
    assert post is not None
    assert post.author_name == "Sarah Jenkins"
    assert post.author_headline == author.headline

    repository.update_user(author.model_copy(update={"name": "Sarah J."}))
    repository.create_post(post)
    assert _get_post(repository, post.id).author_name == "Sarah Jenkins"


def _get_post(repository: Repository, post_id: str) -> Post:
    post = repository.get_post(post_id)
    assert post is not None
    return post


def test_like_toggle_is_an_involution(repository: Repository) -> None:
    original = _get_post(repository, "post_2").likes

    liked = repository.toggle_like_post("post_2", "user_3")
    assert liked is not None and "user_3" in liked.likes
    unliked = repository.toggle_like_post("post_2", "user_3")
    assert unliked is not None and unliked.likes == original
    assert repository.toggle_like_post("post_missing", "user_3") is None
    assert repository.list_notifications("user_2") == []


def test_comments_append_in_order(repository: Repository) -> None:
    elena = _user(repository, "user_3")
    assert compose_comment(elena, content="  ") is None

    first = compose_comment(elena, content="first")
    second = compose_comment(elena, content="second")
    assert first is not None and second is not None
    repository.add_comment("post_2", first)
    post = repository.add_comment("post_2", second)

    assert post is not None
    assert [comment.content for comment in post.comments] == ["first", "second"]
    assert post.comments[0].author_avatar == elena.avatar_url
    assert repository.add_comment("post_missing", first) is None


def test_search_posts_matches_content_and_author(repository: Repository) -> None:
    assert [post.id for post in repository.search_posts("kubernetes")] == ["post_1"]
    assert [post.id for post in repository.search_posts("david")] == ["post_2"]
    assert len(repository.search_posts("")) == 2


def test_search_users_excludes_viewer(repository: Repository) -> None:
    assert [user.id for user in repository.search_users("", exclude_id="user_1")] == ["user_2", "user_3"]
    assert [user.id for user in repository.search_users("pytorch")] == ["user_3"]
    assert [user.id for user in repository.search_users("spotify")] == ["user_2"]


def test_messages_are_symmetric_and_ordered(repository: Repository) -> None:
    for sender, receiver, content in [("user_1", "user_2", "hi"), ("user_2", "user_1", "hey"), ("user_1", "user_3", "x")]:
        message = compose_message(sender_id=sender, receiver_id=receiver, content=content)
        assert message is not None
        repository.send_message(message)

    forward = repository.get_messages("user_1", "user_2")
    backward = repository.get_messages("user_2", "user_1")
    assert [item.id for item in forward] == [item.id for item in backward]
    assert [item.content for item in forward] == ["hi", "hey"]
    assert all(not item.read for item in forward)


def test_empty_message_is_not_composed() -> None:
    assert compose_message(sender_id="user_1", receiver_id="user_2", content="  ") is None
    assert compose_message(sender_id="user_1", receiver_id="user_2", content="", image_url="https://img.test/a.png")


def test_send_message_notifies_with_preview(repository: Repository) -> None:
    body = "This message is definitely longer than thirty characters"
    message = compose_message(sender_id="user_2", receiver_id="user_1", content=body)
    assert message is not None
    repository.send_message(message)

    notification = repository.list_notifications("user_1")[0]
    assert notification.type == NotificationType.NEW_MESSAGE
    assert notification.content == f"sent you a message: {body[:30]}..."
    assert message_preview("short") == "sent you a message: short"


def test_send_message_from_unknown_sender_skips_notification(repository: Repository) -> None:
    message = Message(id="msg_x", sender_id="user_ghost", receiver_id="user_1", content="boo", timestamp=1)
    repository.send_message(message)

    assert repository.get_messages("user_1", "user_ghost")[0].id == "msg_x"
    assert repository.list_notifications("user_1") == []


def test_share_post_sends_one_message_per_recipient(repository: Repository) -> None:
    sent = repository.share_post("post_1", "user_3", ["user_1", "user_2", "user_2"])

    assert [item.receiver_id for item in sent] == ["user_1", "user_2"]
    assert sent[0].content.startswith("Shared post from Sarah Jenkins:\n\n\"Just finished")
    assert repository.get_messages("user_3", "user_2")[0].id == sent[1].id
    assert repository.share_post("post_missing", "user_3", ["user_1"]) == []


def test_notifications_are_scoped_and_newest_first(repository: Repository) -> None:
    for content in ["one", "two"]:
        repository.create_notification(
            NotificationCreate(
                user_id="user_1",
                actor_id="user_2",
                actor_name="David Chen",
                type=NotificationType.PROFILE_VIEW,
                content=content,
            )
        )
    repository.send_connection_request("user_1", "user_3")

    notifications = repository.list_notifications("user_1")
    assert [item.content for item in notifications] == ["two", "one"]
    assert repository.count_unread_notifications("user_1") == 2
    assert repository.count_unread_notifications("user_3") == 1


def test_mark_notification_read_touches_one_record(repository: Repository) -> None:
    repository.send_connection_request("user_2", "user_1")
    repository.send_connection_request("user_3", "user_1")
    target, other = repository.list_notifications("user_1")

    assert repository.mark_notification_read(target.id) is True
    assert repository.mark_notification_read("notif_missing") is False
    by_id = {item.id: item for item in repository.list_notifications("user_1")}
    assert by_id[target.id].read is True
    assert by_id[other.id].read is False


def test_mark_all_read_is_isolated_per_user(repository: Repository) -> None:
    repository.send_connection_request("user_2", "user_1")
    repository.send_connection_request("user_1", "user_3")

    assert repository.mark_all_notifications_read("user_1") == 1
    assert repository.count_unread_notifications("user_1") == 0
    assert repository.count_unread_notifications("user_3") == 1
    assert repository.mark_all_notifications_read("user_1") == 1


def test_noop_mutations_publish_nothing(repository: Repository, events: list[ChangeEvent]) -> None:
    repository.send_connection_request("user_1", "user_1")
    repository.reject_connection_request("user_1", "user_2")
    repository.toggle_like_post("post_missing", "user_1")
    repository.mark_notification_read("notif_missing")

    assert events == []
    assert repository.changes.revision == 0


def test_writes_keep_records_that_fail_validation() -> None:
    payload = json.dumps(
        [
            {"id": "user_1", "name": "Sarah", "email": "sarah@example.com", "pronouns": "she/her"},
            {"id": "user_2", "name": "David", "email": "david@example.com"},
            {"id": "user_9", "name": "Prof. Ortiz", "email": "ortiz@example.com", "role": "Faculty"},
        ]
    )
    backend = MemoryBackend({"alumniconnect_users": payload})
    repository = Repository(PersistentStore(backend))

    assert [user.id for user in repository.list_users()] == ["user_1", "user_2"]
    assert repository.send_connection_request("user_2", "user_1") is True

    stored = {item["id"]: item for item in json.loads(backend.get("alumniconnect_users") or "[]")}
    assert set(stored) == {"user_1", "user_2", "user_9"}
    assert stored["user_9"]["role"] == "Faculty"
    assert stored["user_1"]["pronouns"] == "she/her"
    assert stored["user_1"]["incoming_requests"] == ["user_2"]


def test_create_user_accepts_partial_mapping(repository: Repository) -> None:
    user = repository.create_user({"email": "no-name@example.com"})

    assert user.name == ""
    assert user.email == "no-name@example.com"
    assert repository.get_user(user.id) is not None


def test_create_user_drops_invalid_values(repository: Repository) -> None:
    user = repository.create_user({"name": "Ravi", "email": "ravi@example.com", "role": "Faculty", "skills": 7})

    assert user.role == "Student"
    assert user.skills == []
    stored = repository.get_user(user.id)
    assert stored is not None and stored.name == "Ravi"
