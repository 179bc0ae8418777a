"""TTL cache for fetched configuration, keyed by source identity."""

import copy
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from cascade.fetch.integrity import compute_integrity_tag, verify_integrity_tag
from cascade.observability.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """A cached fetch result.

    ``fetched_at`` is read from the cache's clock (monotonic seconds by
    default), not wall-clock time.
    """

    data: dict[str, Any]
    fetched_at: float
    integrity_tag: str | None = None

    def is_fresh(self, now: float, ttl: float) -> bool:
        """Return True while the entry is younger than ttl."""
        return (now - self.fetched_at) < ttl

    def verify(self) -> bool:
        """Return True if the entry has no tag or its data still matches it."""
        if self.integrity_tag is None:
            return True
        return verify_integrity_tag(self.data, self.integrity_tag)


class FetchCacheStats(BaseModel):
    """Cache statistics."""

    size: int = Field(default=0, ge=0, description="Number of cached entries")
    hits: int = Field(default=0, ge=0, description="Lookups served from cache")
    misses: int = Field(default=0, ge=0, description="Lookups that required a fetch")
    evictions: int = Field(default=0, ge=0, description="Entries dropped as stale or corrupt")


@dataclass
class FetchCache:
    """Per-source cache of fetch results with TTL and integrity checks.

    Entries are stored and returned as deep copies so callers can never
    mutate a cached payload in place.
    """

    clock: Callable[[], float] = time.monotonic
    integrity_checks: bool = True
    _entries: dict[str, CacheEntry] = field(default_factory=dict, init=False)
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _evictions: int = field(default=0, init=False)

    def get(self, key: str, ttl: float, *, record: bool = True) -> CacheEntry | None:
        """Return a fresh, verified entry for key or None.

        Expired entries and entries failing integrity verification are
        evicted. With record=False the lookup is left out of hit/miss stats.
        """
        entry = self._entries.get(key)
        if entry is not None and not entry.is_fresh(self.clock(), ttl):
            self._evict(key, reason="expired")
            entry = None
        elif entry is not None and not entry.verify():
            logger.warning("fetch_cache_integrity_failed", source=key)
            self._evict(key, reason="integrity")
            entry = None

        if entry is None:
            if record:
                self._misses += 1
            return None

        if record:
            self._hits += 1
        return CacheEntry(
            data=copy.deepcopy(entry.data),
            fetched_at=entry.fetched_at,
            integrity_tag=entry.integrity_tag,
        )

    def peek(self, key: str) -> CacheEntry | None:
        """Return the raw entry for key without freshness checks or stats."""
        return self._entries.get(key)

    def put(self, key: str, data: dict[str, Any], integrity_tag: str | None = None) -> CacheEntry:
        """Store data for key, superseding any previous entry."""
        if integrity_tag is None and self.integrity_checks:
            integrity_tag = compute_integrity_tag(data)
        entry = CacheEntry(
            data=copy.deepcopy(data),
            fetched_at=self.clock(),
            integrity_tag=integrity_tag,
        )
        self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> bool:
        """Drop the entry for key. Returns True if one existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def stats(self) -> FetchCacheStats:
        """Get cache statistics."""
        return FetchCacheStats(
            size=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def _evict(self, key: str, reason: str) -> None:
        self._entries.pop(key, None)
        self._evictions += 1
        logger.debug("fetch_cache_evicted", source=key, reason=reason)
