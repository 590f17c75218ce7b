from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    value: Any
    stored_at: float


class TTLCache:
    """Process-local cache with per-entry expiry and a soft size bound.

    When an insert pushes the size above ``max_entries`` the cache drops
    expired entries first, then the oldest ones until ``trim_to`` remain.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        max_entries: int = 1000,
        trim_to: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if trim_to > max_entries:
            raise ValueError("trim_to must not exceed max_entries")
        self.ttl_seconds = float(ttl_seconds)
        self.max_entries = int(max_entries)
        self.trim_to = int(trim_to)
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _is_fresh(self, entry: _Entry, now: float) -> bool:
        return now - entry.stored_at < self.ttl_seconds

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry, self._clock()):
                self._hits += 1
                return entry.value
            if entry is not None:
                del self._entries[key]
            self._misses += 1
            return None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, stored_at=self._clock())
            if len(self._entries) > self.max_entries:
                self._cleanup_locked()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _cleanup_locked(self) -> None:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if not self._is_fresh(e, now)]
        for key in expired:
            del self._entries[key]

        if len(self._entries) > self.trim_to:
            by_age = sorted(self._entries.items(), key=lambda kv: kv[1].stored_at)
            for key, _entry in by_age[: len(self._entries) - self.trim_to]:
                del self._entries[key]

        logger.debug("cache cleaned, %d entries remaining", len(self._entries))

    def stats(self) -> dict[str, float]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hitRate": (self._hits / lookups) if lookups else 0.0,
            }


def make_cache_key(payload: dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
