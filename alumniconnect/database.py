"""Database layer utilities for the SQL key-value backend."""
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import get_settings

Base = declarative_base()


@lru_cache(maxsize=None)
def get_engine(database_url: str | None = None) -> Engine:
    """Return the engine for ``database_url`` (defaults to DATABASE_URL)."""

    url = database_url or get_settings().database_url
    return create_engine(url, pool_pre_ping=True, future=True)


def get_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        future=True,
        expire_on_commit=False,
    )


def init_db(engine: Engine | None = None) -> None:
    """Initialise database schema by creating tables when missing."""
    # Import models to ensure they are registered on the metadata before create_all runs.
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


__all__ = [
    "Base",
    "get_engine",
    "get_sessionmaker",
    "init_db",
]
