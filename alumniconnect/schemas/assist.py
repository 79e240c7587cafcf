"""Schemas for the post drafting assist."""
from __future__ import annotations

from pydantic import BaseModel


class AssistDraftResponse(BaseModel):
    content: str
    generated: bool


__all__ = ["AssistDraftResponse"]
