"""SQLAlchemy ORM model backing the SQL key-value store."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.sql import func

from alumniconnect.database import Base


class KeyValueEntry(Base):
    """One namespaced store key and its JSON text."""

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)


__all__ = ["KeyValueEntry"]
