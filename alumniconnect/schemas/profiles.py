"""Schemas for profile endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .users import parse_skills


class ProfileUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=150)
    headline: str | None = Field(default=None, max_length=220)
    about: str | None = Field(default=None, max_length=2000)
    location: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = None
    skills: list[str] | None = None

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> list[str] | None:
        if value is None:
            return None
        return parse_skills(value)

    @field_validator("avatar_url", mode="before")
    @classmethod
    def _blank_avatar(cls, value: Any) -> Any:
        # keep the existing avatar when the client sends an empty value
        if value in ("", "None"):
            return None
        return value


__all__ = ["ProfileUpdateRequest"]
