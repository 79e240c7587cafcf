"""In-process publish/subscribe channel for store mutations."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    revision: int
    kind: str
    user_ids: frozenset[str]


ChangeListener = Callable[[ChangeEvent], None]


class ChangeFeed:
    """Fans out one event per effective mutation and tracks a revision counter."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []
        self._revision = 0
        self._lock = threading.Lock()

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(listener)

        return _unsubscribe

    def unsubscribe(self, listener: ChangeListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def publish(self, kind: str, user_ids: Iterable[str]) -> ChangeEvent:
        with self._lock:
            self._revision += 1
            event = ChangeEvent(revision=self._revision, kind=kind, user_ids=frozenset(user_ids))
            targets = list(self._listeners)
        for listener in targets:
            try:
                listener(event)
            except Exception:
                logger.exception("Change listener failed for %s (revision %d)", kind, event.revision)
        return event


__all__ = ["ChangeEvent", "ChangeFeed", "ChangeListener"]
