from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest
from conftest import FakeClock

from sports_hub.cache.entry import CacheEntry
from sports_hub.cache.errors import CacheStoreError
from sports_hub.cache.store import SqlCacheStore
from sports_hub.cache.sweeper import CacheSweeper
from sports_hub.cache.tiered import TieredCache
from sports_hub.cache.ttl import DEFAULT_TTL, ttl_for

PARAMS = {"league": "premier-league", "region": "global"}
PAYLOAD = {"type": "standings", "content": {"table": []}}


class BrokenStore:
    def get_latest(self, cache_key: str, *, now: datetime) -> CacheEntry | None:
        raise CacheStoreError("db down")

    def upsert(self, entry: CacheEntry) -> None:
        raise CacheStoreError("db down")

    def delete_expired(self, *, now: datetime) -> int:
        raise CacheStoreError("db down")

    def count_live(self, *, now: datetime) -> int:
        raise CacheStoreError("db down")


def test_key_ignores_param_order() -> None:
    a = TieredCache.key("fixtures", {"league": "la-liga", "region": "es"})
    b = TieredCache.key("fixtures", {"region": "es", "league": "la-liga"})

    assert a == b == "sports_fixtures_league=la-liga&region=es"


def test_ttls_per_category() -> None:
    assert ttl_for("fixtures") == timedelta(minutes=5)
    assert ttl_for("results") == timedelta(hours=1)
    assert ttl_for("standings") == timedelta(minutes=30)
    assert ttl_for("teams") == timedelta(hours=24)
    assert ttl_for("something-else") == DEFAULT_TTL


def test_entry_must_expire_after_creation(clock: FakeClock) -> None:
    with pytest.raises(ValueError):
        CacheEntry("k", "teams", {}, {}, "p", clock.now(), clock.now())


def test_store_then_lookup_hits_memory(session_factory, clock: FakeClock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    cache.store("standings", PARAMS, PAYLOAD, "football-data-org")

    entry = cache.lookup("standings", dict(reversed(list(PARAMS.items()))))

    assert entry is not None
    assert entry.payload == PAYLOAD
    assert entry.source_provider == "football-data-org"
    assert entry.expires_at - entry.created_at == timedelta(minutes=30)


def test_cached_payload_is_isolated_from_callers(clock: FakeClock) -> None:
    cache = TieredCache(BrokenStore(), clock=clock)
    original = {"type": "standings", "content": {"table": [{"team": "Arsenal"}]}}

    stored = cache.store("standings", PARAMS, original, "p")
    original["content"]["table"].append({"team": "Chelsea"})
    stored.payload["content"]["table"].clear()
    cache.lookup("standings", PARAMS).payload["type"] = "teams"

    entry = cache.lookup("standings", PARAMS)
    assert entry.payload == {"type": "standings", "content": {"table": [{"team": "Arsenal"}]}}


def test_persistent_tier_survives_restart_and_backfills(session_factory, clock) -> None:
    TieredCache(SqlCacheStore(session_factory), clock=clock).store(
        "teams", PARAMS, PAYLOAD, "api-football"
    )

    fresh = TieredCache(SqlCacheStore(session_factory), clock=clock)
    entry = fresh.lookup("teams", PARAMS)

    assert entry is not None
    assert entry.payload == PAYLOAD
    assert entry.created_at == clock.now()
    assert fresh.stats().memory_entries == 1


def test_expired_entries_miss_in_both_tiers(session_factory, clock: FakeClock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    cache.store("fixtures", PARAMS, PAYLOAD, "p")

    clock.advance(5 * 60)

    assert cache.lookup("fixtures", PARAMS) is None
    assert cache.stats().memory_entries == 0


def test_store_overwrites_same_key(session_factory, clock: FakeClock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    cache.store("teams", PARAMS, {"v": 1}, "a")
    clock.advance(10)
    cache.store("teams", PARAMS, {"v": 2}, "b")

    fresh = TieredCache(SqlCacheStore(session_factory), clock=clock)
    entry = fresh.lookup("teams", PARAMS)

    assert entry is not None
    assert entry.payload == {"v": 2}
    assert entry.source_provider == "b"
    assert fresh.stats().database_entries == 1


def test_sweep_removes_expired_from_both_tiers(session_factory, clock: FakeClock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    cache.store("fixtures", PARAMS, PAYLOAD, "p")
    cache.store("teams", PARAMS, PAYLOAD, "p")

    clock.advance(60 * 60)
    removed = cache.sweep()

    # fixtures expired in memory and on disk; teams still live
    assert removed == 2
    stats = cache.stats()
    assert stats.memory_entries == 1
    assert stats.database_entries == 1


def test_failing_persistent_tier_degrades_to_memory_only(clock: FakeClock) -> None:
    cache = TieredCache(BrokenStore(), clock=clock)

    entry = cache.store("standings", PARAMS, PAYLOAD, "p")

    assert entry.payload == PAYLOAD
    assert cache.lookup("standings", PARAMS) is not None
    assert cache.lookup("standings", {"league": "other"}) is None
    assert cache.sweep() == 0
    assert cache.stats().database_entries == 0


def test_stats_count_hits_and_misses(session_factory, clock: FakeClock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    assert cache.lookup("teams", PARAMS) is None
    cache.store("teams", PARAMS, PAYLOAD, "p")
    cache.lookup("teams", PARAMS)
    cache.lookup("teams", PARAMS)

    stats = cache.stats().as_dict()

    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["hit_rate"] == 0.667
    assert stats["storage_size"].endswith(" KB")


async def test_sweeper_runs_on_interval_until_stopped(session_factory, clock) -> None:
    cache = TieredCache(SqlCacheStore(session_factory), clock=clock)
    cache.store("fixtures", PARAMS, PAYLOAD, "p")
    clock.advance(10 * 60)

    sweeper = CacheSweeper(cache, interval_s=0.01)
    sweeper.start()
    assert sweeper.running
    await asyncio.sleep(0.05)
    await sweeper.stop()

    assert not sweeper.running
    assert cache.stats().database_entries == 0
    assert cache.stats().memory_entries == 0
