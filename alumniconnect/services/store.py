"""Key-value persistence for the four collections and the session pointer.

Every collection is kept under a single namespaced key as JSON text. Reads
never fail: absent keys, unreadable text, non-list payloads and records that
no longer validate all degrade to "nothing stored". Writes replace the whole
collection but carry over stored records that failed validation untouched.
"""
from __future__ import annotations

import json
import logging
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol, Sequence, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings
from ..constants import DEFAULT_NAMESPACE
from ..database import get_engine, get_sessionmaker, init_db
from ..models import KeyValueEntry

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Collection(StrEnum):
    USERS = "users"
    POSTS = "posts"
    MESSAGES = "messages"
    NOTIFICATIONS = "notifications"


CURRENT_USER_KEY = "current_user_id"


class StorageError(RuntimeError):
    """Raised when a backend cannot persist a value."""


class KeyValueBackend(Protocol):
    def get(self, key: str) -> str | None:
        """Return the stored text for ``key`` or ``None`` when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryBackend:
    """Process-local backend, mostly useful for tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """Stores each key as a UTF-8 JSON file inside ``directory``."""

    def __init__(self, directory: Path | str) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        return self._directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Unable to read %s", self._path(key), exc_info=True)
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        staging = path.with_name(f"{path.name}.tmp")
        try:
            staging.write_text(value, encoding="utf-8")
            staging.replace(path)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}") from exc

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to remove {self._path(key)}") from exc


class SQLBackend:
    """Keeps values in the ``kv_entries`` table through SQLAlchemy sessions."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as db:
                entry = db.get(KeyValueEntry, key)
                return None if entry is None else str(entry.value)
        except SQLAlchemyError:
            logger.warning("Unable to read key %s", key, exc_info=True)
            return None

    def set(self, key: str, value: str) -> None:
        with self._session_factory() as db:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                setattr(entry, "value", value)
            try:
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError(f"Failed to store key {key}") from exc

    def delete(self, key: str) -> None:
        with self._session_factory() as db:
            try:
                db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise StorageError(f"Failed to remove key {key}") from exc


class PersistentStore:
    """Namespaced collection store layered over a :class:`KeyValueBackend`."""

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        namespace: str = DEFAULT_NAMESPACE,
        seed: bool = True,
    ) -> None:
        self._backend = backend
        self._namespace = namespace
        self._models: dict[Collection, type[BaseModel]] = {}
        if seed:
            self.ensure_seeded()

    @property
    def backend(self) -> KeyValueBackend:
        return self._backend

    def key_for(self, name: str) -> str:
        return f"{self._namespace}_{name}"

    def ensure_seeded(self) -> None:
        """Populate every absent collection key with its initial contents."""
        from .seed import initial_collections

        for collection, records in initial_collections().items():
            key = self.key_for(collection)
            if self._backend.get(key) is not None:
                continue
            self._write(key, records)
            logger.info("Seeded %s with %d record(s)", key, len(records))

    # --- raw collections ---
    def load(self, collection: Collection) -> list[dict[str, Any]]:
        raw = self._backend.get(self.key_for(collection))
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding malformed %s payload", collection)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding non-list %s payload", collection)
            return []
        return [item for item in data if isinstance(item, dict)]

    def save(self, collection: Collection, records: Iterable[dict[str, Any]]) -> None:
        self._write(self.key_for(collection), list(records))

    def _write(self, key: str, payload: Any) -> None:
        self._backend.set(key, json.dumps(payload, ensure_ascii=False, indent=2))

    # --- typed collections ---
    def load_records(self, collection: Collection, model: type[ModelT]) -> list[ModelT]:
        self._models[collection] = model
        records: list[ModelT] = []
        for item in self.load(collection):
            try:
                records.append(model.model_validate(item))
            except ValidationError:
                logger.warning("Skipping invalid %s record %r", collection, item.get("id"))
        return records

    def save_records(self, collection: Collection, records: Sequence[BaseModel]) -> None:
        """Write ``records`` back, carrying over stored entries that never validated."""

        if records:
            self._models.setdefault(collection, type(records[0]))
        payload = [record.model_dump(mode="json") for record in records]
        payload.extend(self._unreadable_records(collection, {item.get("id") for item in payload}))
        self.save(collection, payload)

    def _unreadable_records(self, collection: Collection, written_ids: set[Any]) -> list[dict[str, Any]]:
        model = self._models.get(collection)
        if model is None:
            return []
        kept: list[dict[str, Any]] = []
        for item in self.load(collection):
            if item.get("id") in written_ids:
                continue
            try:
                model.model_validate(item)
            except ValidationError:
                kept.append(item)
        return kept

    # --- session pointer ---
    def get_current_user_id(self) -> str | None:
        value = self._backend.get(self.key_for(CURRENT_USER_KEY))
        return value or None

    def set_current_user_id(self, user_id: str) -> None:
        self._backend.set(self.key_for(CURRENT_USER_KEY), user_id)

    def clear_current_user_id(self) -> None:
        self._backend.delete(self.key_for(CURRENT_USER_KEY))


def build_backend(settings: Settings) -> KeyValueBackend:
    """Instantiate the backend selected by ``STORAGE_BACKEND``."""

    if settings.storage_backend == "memory":
        return MemoryBackend()
    if settings.storage_backend == "sql":
        engine = get_engine(settings.database_url)
        init_db(engine)
        return SQLBackend(get_sessionmaker(engine))
    return FileBackend(settings.storage_dir)


def build_store(settings: Settings) -> PersistentStore:
    return PersistentStore(
        build_backend(settings),
        namespace=settings.storage_namespace,
        seed=settings.seed_demo_data,
    )


__all__ = [
    "Collection",
    "CURRENT_USER_KEY",
    "StorageError",
    "KeyValueBackend",
    "MemoryBackend",
    "FileBackend",
    "SQLBackend",
    "PersistentStore",
    "build_backend",
    "build_store",
]
