"""Small helpers shared by the storage and service layers."""
from __future__ import annotations

import time
from typing import Iterable
from uuid import uuid4


def now_ms() -> int:
    """Current time as integer milliseconds since the epoch."""
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    """Return a time-ordered id that stays unique within one millisecond."""
    return f"{prefix}_{now_ms()}_{uuid4().hex[:8]}"


def unique_ids(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


__all__ = ["now_ms", "new_id", "unique_ids"]
