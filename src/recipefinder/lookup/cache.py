"""Time-bounded in-memory cache for lookup results."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """Cached result list for one namespaced query key."""

    key: str
    value: List[str]
    stored_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at < ttl_seconds


class TTLCache:
    """Map of query key to result list with lazy expiry.

    Stale entries are reported as misses and overwritten on the next
    ``put``; nothing is evicted eagerly.
    """

    def __init__(self, ttl_seconds: float = 300.0, clock: Clock = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[List[str]]:
        """Return a copy of the live entry for ``key`` or ``None``."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self.ttl_seconds):
            self._misses += 1
            return None
        self._hits += 1
        return list(entry.value)

    def put(self, key: str, results: List[str]) -> None:
        """Store ``results`` (possibly empty), replacing any prior entry."""
        self._entries[key] = CacheEntry(key=key, value=list(results), stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()
        logger.debug("Lookup cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def stats(self) -> Dict[str, float]:
        """Return cache statistics for monitoring."""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0.0
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate_percent": round(hit_rate, 2),
        }
