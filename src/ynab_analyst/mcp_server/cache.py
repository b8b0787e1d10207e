"""
cache.py — In-memory TTL cache for YNAB API responses.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0  # 5 minutes
LOCK_TIMEOUT_SECONDS = 1.0


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl


class ResponseCache:
    """
    A keyed store of JSON responses with per-entry TTL.

    Thread-safe via a single lock. Readers lazily evict an expired entry they
    find; cleanup_expired() sweeps all of them. When the lock cannot be
    acquired within LOCK_TIMEOUT_SECONDS the cache behaves as empty: reads
    miss and writes are skipped.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        lock_timeout: float = LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._entries: dict[str, CacheEntry] = {}

    def _acquire(self) -> bool:
        acquired = self._lock.acquire(timeout=self._lock_timeout)
        if not acquired:
            logger.warning("Response cache lock unavailable; treating as cache miss")
        return acquired

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for *key*, or None if missing or expired."""
        if not self._acquire():
            return None
        try:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Evicted expired cache entry %s", key)
                return None
            return entry.value
        finally:
            self._lock.release()

    def set(self, key: str, value: Any) -> None:
        self.set_with_ttl(key, value, self.default_ttl)

    def set_with_ttl(self, key: str, value: Any, ttl: float) -> None:
        if not self._acquire():
            return
        try:
            self._entries[key] = CacheEntry(value=value, created_at=self._clock(), ttl=ttl)
        finally:
            self._lock.release()

    def cleanup_expired(self) -> int:
        """Remove expired entries. Returns how many were evicted."""
        if not self._acquire():
            return 0
        try:
            now = self._clock()
            expired = [k for k, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        finally:
            self._lock.release()
        if expired:
            logger.info("Evicted %d expired cache entries", len(expired))
        return len(expired)

    def size(self) -> int:
        if not self._acquire():
            return 0
        try:
            return len(self._entries)
        finally:
            self._lock.release()

    def clear(self) -> None:
        if not self._acquire():
            return
        try:
            self._entries.clear()
        finally:
            self._lock.release()
