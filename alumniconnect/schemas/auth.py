"""Pydantic schemas for registration, login and session endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from .users import User, UserRole, parse_skills


class RegisterRequest(BaseModel):
    # name and email are checked by the service so the caller gets a single message
    name: str | None = Field(default=None, max_length=150)
    email: EmailStr | None = None
    role: UserRole = UserRole.STUDENT
    headline: str = Field(default="", max_length=220)
    about: str | None = Field(default=None, max_length=2000)
    location: str | None = Field(default=None, max_length=255)
    skills: list[str] = Field(default_factory=list)

    @field_validator("skills", mode="before")
    @classmethod
    def _split_skills(cls, value: Any) -> list[str]:
        return parse_skills(value)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)


class SessionResponse(BaseModel):
    state: str
    user: User | None = None
    refresh_tick: int = 0


__all__ = ["RegisterRequest", "LoginRequest", "SessionResponse"]
