"""
Expiring cache for expensive per-user aggregates.

Caches a computed value (e.g. a user's vocabulary level) for a bounded
time so repeated page loads do not rescan every study item. Entries expire
after a configurable TTL (default 10 minutes); collaborators must call
`invalidate` whenever the data behind a key changes.

Usage:

    cache = ExpiringCache(namespace="level")

    level = cache.get(user_id)
    if level is MISS:
        level = cache.put(user_id, compute_level(user_id))

    # Invalidate when the user reviews words or adds items
    cache.invalidate(user_id)
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable, Optional, Tuple

from vocab_scheduler.logging import get_logger


logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 600


class _Miss:
    """Sentinel for a cache miss (absent or expired entry)."""

    _instance: Optional["_Miss"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "MISS"

    def __bool__(self):
        return False


MISS = _Miss()


class CacheTable:
    """
    Physical key -> (value, expires_at) store with set semantics.

    Lookups read the dict without locking; inserts and deletes are
    serialized so racing writers resolve to the last write applied.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, Tuple[Any, float]] = {}
        self._write_lock = threading.Lock()

    def lookup(self, key: Hashable) -> Optional[Tuple[Any, float]]:
        return self._entries.get(key)

    def insert(self, key: Hashable, value: Any, expires_at: float) -> None:
        with self._write_lock:
            self._entries[key] = (value, expires_at)

    def delete(self, key: Hashable) -> None:
        with self._write_lock:
            self._entries.pop(key, None)

    def delete_where(self, predicate: Callable[[Hashable], bool]) -> int:
        with self._write_lock:
            doomed = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def __len__(self) -> int:
        return len(self._entries)


_shared_table: Optional[CacheTable] = None
_shared_table_lock = threading.Lock()


def shared_table() -> CacheTable:
    """
    Return the process-wide table, creating it on first use.

    Safe to call concurrently; only one table is ever created.
    """
    global _shared_table
    if _shared_table is None:
        with _shared_table_lock:
            if _shared_table is None:
                _shared_table = CacheTable()
    return _shared_table


class ExpiringCache:
    """
    TTL-bound key -> value cache.

    Entries live in a CacheTable under (namespace, key), so several caches
    can share one table without colliding. Pass `table` to own an isolated
    store (tests do this); otherwise the process-wide table is used.

    Args:
        namespace: Prefix separating this cache's keys from others
        ttl_seconds: Lifetime of each entry
        clock: Returns the current time in seconds
        table: Backing store (defaults to shared_table())
    """

    def __init__(
        self,
        namespace: str = "default",
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        table: Optional[CacheTable] = None
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._table = table
        # Lazy: the shared table is only created on first access

    @property
    def table(self) -> CacheTable:
        if self._table is None:
            self._table = shared_table()
        return self._table

    def _key(self, key: Hashable) -> Tuple[str, Hashable]:
        return (self.namespace, key)

    def get(self, key: Hashable) -> Any:
        """
        Return the cached value, or MISS if absent or expired.

        An entry is live only while its expiry is strictly after now.
        """
        entry = self.table.lookup(self._key(key))
        if entry is None:
            logger.debug("cache.miss", namespace=self.namespace, key=key)
            return MISS

        value, expires_at = entry
        if expires_at > self._clock():
            logger.debug("cache.hit", namespace=self.namespace, key=key)
            return value

        logger.debug("cache.expired", namespace=self.namespace, key=key)
        return MISS

    def put(self, key: Hashable, value: Any) -> Any:
        """
        Store a value until now + TTL, replacing any prior entry.

        Returns:
            The value, unchanged (for compute-then-cache chaining)
        """
        expires_at = self._clock() + self.ttl_seconds
        self.table.insert(self._key(key), value, expires_at)
        return value

    def invalidate(self, key: Hashable) -> None:
        """Remove the entry for key; a no-op if there is none."""
        self.table.delete(self._key(key))
        logger.debug("cache.invalidate", namespace=self.namespace, key=key)

    def clear(self) -> None:
        """Remove every entry in this cache's namespace."""
        removed = self.table.delete_where(lambda stored: stored[0] == self.namespace)
        logger.debug("cache.clear", namespace=self.namespace, removed=removed)

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """Return the cached value, computing and storing it on a miss."""
        value = self.get(key)
        if value is MISS:
            value = self.put(key, compute())
        return value
