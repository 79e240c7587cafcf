"""Schemas for direct messages."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    sender_id: str
    receiver_id: str
    content: str = ""
    image_url: str | None = None
    timestamp: int
    # Stored for compatibility; nothing marks messages as read.
    read: bool = False


class MessageSendRequest(BaseModel):
    receiver_id: str = Field(..., min_length=1)
    content: str = Field(default="", max_length=5000)
    image_url: str | None = None


class MessageThreadResponse(BaseModel):
    partner_id: str
    items: list[Message]


__all__ = ["Message", "MessageSendRequest", "MessageThreadResponse"]
