from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlencode

from sports_hub.cache.entry import CacheEntry
from sports_hub.cache.errors import CacheStoreError
from sports_hub.cache.store import PersistentCacheStore
from sports_hub.cache.ttl import ttl_for
from sports_hub.core.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStats:
    memory_entries: int
    database_entries: int
    hits: int
    misses: int
    hit_rate: float
    storage_size: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "memory_entries": self.memory_entries,
            "database_entries": self.database_entries,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hit_rate,
            "storage_size": self.storage_size,
        }


class TieredCache:
    """
    In-process map in front of a persistent store, with per-category TTLs.

    Purely a performance and quota-protection layer: misses and persistent-tier
    failures both just mean "go to the providers".

    Callers always get their own copy of a payload, so mutating a result never
    leaks into later hits. Methods may run on worker threads.
    """

    def __init__(self, persistent: PersistentCacheStore, *, clock: Clock | None = None) -> None:
        self._persistent = persistent
        self._clock = clock or SystemClock()
        self._memory: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0
        self._lock = threading.Lock()

    @staticmethod
    def key(data_type: str, params: Mapping[str, Any]) -> str:
        """Stable key; param insertion order never matters."""
        ordered = sorted((str(k), "" if v is None else str(v)) for k, v in params.items())
        return f"sports_{data_type}_{urlencode(ordered)}"

    def lookup(self, data_type: str, params: Mapping[str, Any]) -> CacheEntry | None:
        cache_key = self.key(data_type, params)
        now = self._clock.now()

        with self._lock:
            entry = self._memory.get(cache_key)
            if entry is not None:
                if entry.is_live(now):
                    self._hits += 1
                    logger.info("Memory cache hit for %s", data_type)
                    return _detached(entry)
                del self._memory[cache_key]

        try:
            entry = self._persistent.get_latest(cache_key, now=now)
        except CacheStoreError:
            logger.exception("Persistent cache lookup failed for %s", cache_key)
            entry = None

        with self._lock:
            if entry is None or not entry.is_live(now):
                self._misses += 1
                return None
            self._memory[cache_key] = entry
            self._hits += 1
        logger.info("Database cache hit for %s", data_type)
        return _detached(entry)

    def store(
        self,
        data_type: str,
        params: Mapping[str, Any],
        payload: dict[str, Any],
        source_provider: str,
    ) -> CacheEntry:
        now = self._clock.now()
        ttl = ttl_for(data_type)
        entry = CacheEntry(
            cache_key=self.key(data_type, params),
            data_type=str(data_type),
            params={str(k): "" if v is None else str(v) for k, v in params.items()},
            payload=copy.deepcopy(payload),
            source_provider=source_provider,
            created_at=now,
            expires_at=now + ttl,
        )
        with self._lock:
            self._memory[entry.cache_key] = entry

        try:
            self._persistent.upsert(entry)
        except CacheStoreError:
            logger.exception("Persistent cache store failed for %s", entry.cache_key)
        else:
            logger.info("Cached %s for %d seconds", data_type, int(ttl.total_seconds()))
        return _detached(entry)

    def sweep(self) -> int:
        """Drop expired entries from both tiers; returns how many were removed."""
        now = self._clock.now()
        with self._lock:
            expired = [k for k, e in self._memory.items() if not e.is_live(now)]
            for k in expired:
                del self._memory[k]

        removed = len(expired)
        try:
            removed += self._persistent.delete_expired(now=now)
        except CacheStoreError:
            logger.exception("Persistent cache sweep failed")
        logger.info("Cleaned %d expired cache entries", removed)
        return removed

    def stats(self) -> CacheStats:
        now = self._clock.now()
        try:
            db_count = self._persistent.count_live(now=now)
        except CacheStoreError:
            logger.exception("Persistent cache count failed")
            db_count = 0

        with self._lock:
            entries = list(self._memory.values())
            hits, misses = self._hits, self._misses
        size = sum(len(json.dumps(e.payload, default=str)) for e in entries)
        lookups = hits + misses
        return CacheStats(
            memory_entries=len(entries),
            database_entries=db_count,
            hits=hits,
            misses=misses,
            hit_rate=round(hits / lookups, 3) if lookups else 0.0,
            storage_size=f"{size / 1024:.1f} KB",
        )


def _detached(entry: CacheEntry) -> CacheEntry:
    return replace(entry, payload=copy.deepcopy(entry.payload))
