"""Schemas for user records and the member directory."""
from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..helpers import unique_ids


class UserRole(StrEnum):
    STUDENT = "Student"
    ALUMNI = "Alumni"


def parse_skills(raw: str | list[str] | None) -> list[str]:
    """Split a comma separated skills string, trimming and dropping blanks."""

    if raw is None:
        return []
    items = raw.split(",") if isinstance(raw, str) else raw
    return [item.strip() for item in items if item and item.strip()]


class User(BaseModel):
    """Stored user record; missing collections and counters are normalized, unknown keys kept."""

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    headline: str = ""
    about: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    skills: list[str] = Field(default_factory=list)
    connections: list[str] = Field(default_factory=list)
    incoming_requests: list[str] = Field(default_factory=list)
    profile_views: int = 0

    @field_validator("skills", "connections", "incoming_requests", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("profile_views", mode="before")
    @classmethod
    def _default_counter(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("headline", mode="before")
    @classmethod
    def _default_headline(cls, value: Any) -> Any:
        return "" if value is None else value

    @model_validator(mode="after")
    def _drop_self_references(self) -> "User":
        # connections and requests are sets; a user never links to itself
        self.connections = [uid for uid in unique_ids(self.connections) if uid != self.id]
        self.incoming_requests = [uid for uid in unique_ids(self.incoming_requests) if uid != self.id]
        return self


class DirectoryEntry(BaseModel):
    user: User
    status: Literal["connected", "pending", "incoming", "available"]


class DirectoryResponse(BaseModel):
    query: str
    results: list[DirectoryEntry]


class ConnectionRequestPayload(BaseModel):
    target_id: str = Field(..., min_length=1)


class UserListResponse(BaseModel):
    items: list[User]


__all__ = [
    "UserRole",
    "User",
    "parse_skills",
    "DirectoryEntry",
    "DirectoryResponse",
    "ConnectionRequestPayload",
    "UserListResponse",
]
