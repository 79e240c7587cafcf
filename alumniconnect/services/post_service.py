"""Business logic for the feed: posts, likes and comments."""
from __future__ import annotations

from ..helpers import new_id, now_ms
from ..schemas import Comment, Post, User
from .store import Collection, PersistentStore


def compose_post(author: User, *, content: str, image_url: str | None = None) -> Post | None:
    """Build a post from the author's current profile, or ``None`` when empty."""

    if not content.strip() and not image_url:
        return None
    return Post(
        id=new_id("post"),
        author_id=author.id,
        author_name=author.name,
        author_headline=author.headline,
        content=content,
        image_url=image_url or None,
        timestamp=now_ms(),
    )


def compose_comment(author: User, *, content: str) -> Comment | None:
    if not content.strip():
        return None
    return Comment(
        id=new_id("c"),
        author_id=author.id,
        author_name=author.name,
        author_avatar=author.avatar_url,
        content=content,
        timestamp=now_ms(),
    )


def list_posts(store: PersistentStore) -> list[Post]:
    """Return the whole feed, newest first."""
    posts = store.load_records(Collection.POSTS, Post)
    return sorted(posts, key=lambda post: post.timestamp, reverse=True)


def get_post(store: PersistentStore, post_id: str) -> Post | None:
    return next((post for post in list_posts(store) if post.id == post_id), None)


def search_posts(store: PersistentStore, query: str = "") -> list[Post]:
    needle = query.strip().lower()
    posts = list_posts(store)
    if not needle:
        return posts
    return [post for post in posts if needle in post.content.lower() or needle in post.author_name.lower()]


def create_post(store: PersistentStore, post: Post) -> Post:
    posts = list_posts(store)
    posts.insert(0, post)
    store.save_records(Collection.POSTS, posts)
    return post


def toggle_like_post(store: PersistentStore, *, post_id: str, user_id: str) -> Post | None:
    """Flip ``user_id`` in the post's likes and return the updated post."""

    posts = list_posts(store)
    post = next((item for item in posts if item.id == post_id), None)
    if post is None:
        return None
    if user_id in post.likes:
        post.likes = [uid for uid in post.likes if uid != user_id]
    else:
        post.likes.append(user_id)
    store.save_records(Collection.POSTS, posts)
    return post


def add_comment(store: PersistentStore, *, post_id: str, comment: Comment) -> Post | None:
    posts = list_posts(store)
    post = next((item for item in posts if item.id == post_id), None)
    if post is None:
        return None
    post.comments.append(comment)
    store.save_records(Collection.POSTS, posts)
    return post


__all__ = [
    "compose_post",
    "compose_comment",
    "list_posts",
    "get_post",
    "search_posts",
    "create_post",
    "toggle_like_post",
    "add_comment",
]
