from __future__ import annotations

import time
from typing import Any, Callable, Hashable


class TTLCache:
    """In-memory cache whose entries expire ``ttl_seconds`` after being set.

    The clock is injectable so tests can move time forward deterministically.
    A non-positive TTL turns ``set`` into a no-op.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, dict[str, Any]] = {}
        self._hits = 0
        self._misses = 0

    def _is_fresh(self, entry: dict[str, Any]) -> bool:
        return self._clock() - entry["created_at"] < self.ttl_seconds

    def get(self, key: Hashable) -> Any | None:
        entry = self._entries.get(key)
        if entry and self._is_fresh(entry):
            self._hits += 1
            return entry["value"]
        if entry:
            del self._entries[key]
        self._misses += 1
        return None

    def set(self, key: Hashable, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        self._entries[key] = {"value": value, "created_at": self._clock()}

    def delete(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }
