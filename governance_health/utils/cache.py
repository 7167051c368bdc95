"""
Thread-safe in-memory TTL cache.

Used write-through by the analyzer (full analyses, 30 min) and by the Tally
client (raw governance lookups, 5 min).  Nothing is persisted; a restart
starts cold.

Entries expire lazily on read.  When ``max_entries`` is reached the entry
closest to expiry is evicted first.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def cache_key(kind: str, platform: str, identifier: str) -> str:
    """Build a cache key such as ``analysis_tally_uniswap``."""
    return f"{kind}_{platform.lower()}_{identifier.strip().lower()}"


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache counters."""

    hits: int
    misses: int
    keys: int


class TTLCache:
    """In-memory key/value store with per-entry time-to-live.

    Args:
        default_ttl: Seconds an entry lives when ``set`` is called without ``ttl``.
        max_entries: Upper bound on stored entries.
        clock:       Monotonic time source; injectable for tests.
    """

    def __init__(
        self,
        default_ttl: float = 3600.0,
        max_entries: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}.")
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key`` for ``ttl`` seconds (default TTL if None)."""
        lifetime = self._default_ttl if ttl is None else ttl
        with self._lock:
            if key not in self._entries and len(self._entries) >= self._max_entries:
                self._evict()
            self._entries[key] = (self._clock() + lifetime, value)

    def delete(self, key: str) -> bool:
        """Remove ``key``.  Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def flush(self) -> int:
        """Drop every entry.  Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(hits=self._hits, misses=self._misses, keys=len(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, (exp, _) in self._entries.items() if exp <= now]
        for key in expired:
            del self._entries[key]
        if len(self._entries) >= self._max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k][0])
            del self._entries[oldest]
            logger.debug("TTLCache: evicted %s (max_entries=%d)", oldest, self._max_entries)
