"""Pydantic schemas for feed posts and their comments."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..helpers import unique_ids


class Comment(BaseModel):
    """Comment owned by a single post; author fields are a creation-time snapshot."""

    model_config = ConfigDict(extra="allow")

    id: str
    author_id: str
    author_name: str
    author_avatar: str | None = None
    content: str
    timestamp: int


class Post(BaseModel):
    """Feed post with a snapshot of the author's name and headline."""

    model_config = ConfigDict(extra="allow")

    id: str
    author_id: str
    author_name: str
    author_headline: str = ""
    content: str = ""
    image_url: str | None = None
    timestamp: int
    likes: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)

    @field_validator("likes", "comments", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @field_validator("likes")
    @classmethod
    def _unique_likes(cls, value: list[str]) -> list[str]:
        return unique_ids(value)

    @field_validator("author_headline", "content", mode="before")
    @classmethod
    def _default_text(cls, value: Any) -> Any:
        return "" if value is None else value


class PostCreate(BaseModel):
    """Payload used by API clients when composing a post."""

    content: str = Field(default="", max_length=3000)
    image_url: str | None = None


class CommentCreate(BaseModel):
    content: str = Field(default="", max_length=1000)


class SharePostRequest(BaseModel):
    recipient_ids: list[str] = Field(..., min_length=1)


class PostFeedResponse(BaseModel):
    """Envelope used when returning a collection of posts."""

    items: list[Post]


class LikeStateResponse(BaseModel):
    post_id: str
    liked: bool
    like_count: int


__all__ = [
    "Comment",
    "Post",
    "PostCreate",
    "CommentCreate",
    "SharePostRequest",
    "PostFeedResponse",
    "LikeStateResponse",
]
