"""
Schema Cache
============

Memoizes compiled schemas by path with lazy time-based expiration.
"""

import logging
import os
import time
from typing import Any, Callable, Dict, Optional

from .settings import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def cache_key(path: str) -> str:
    """Normalize a schema path so equivalent spellings share one entry."""
    return os.path.normcase(os.path.normpath(os.path.abspath(str(path))))


class CacheEntry:
    __slots__ = ("value", "inserted_at")

    def __init__(self, value: Any, inserted_at: float):
        self.value = value
        self.inserted_at = inserted_at


class SchemaCache:
    """
    Caches compiled schemas keyed by path.

    Entries older than ``ttl`` seconds are treated as absent and evicted on
    access. There is no lock: entries are immutable once built and concurrent
    writers for the same path simply overwrite each other.
    """

    def __init__(
        self,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, path: str) -> Optional[Any]:
        entry = self._entries.get(path)
        if entry is None:
            logger.debug("Schema cache miss: %s", path)
            return None
        if self._clock() - entry.inserted_at > self.ttl:
            logger.debug("Schema cache entry expired: %s", path)
            self._entries.pop(path, None)
            return None
        logger.debug("Schema cache hit: %s", path)
        return entry.value

    def set(self, path: str, value: Any) -> None:
        self._entries[path] = CacheEntry(value, self._clock())

    def invalidate(self, path: str) -> None:
        self._entries.pop(path, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None

    def __len__(self) -> int:
        return len(self._entries)
