from __future__ import annotations

from datetime import datetime
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from sports_hub.cache.entry import CacheEntry
from sports_hub.cache.errors import CacheStoreError
from sports_hub.core.clock import ensure_utc
from sports_hub.db.models.cache_entry import SportsCacheEntry
from sports_hub.db.repos.cache_entry_repo import CacheEntryRepository


class PersistentCacheStore(Protocol):
    """Durable tier: upsert by key, range-delete by expiry. Raises CacheStoreError."""

    def get_latest(self, cache_key: str, *, now: datetime) -> CacheEntry | None: ...

    def upsert(self, entry: CacheEntry) -> None: ...

    def delete_expired(self, *, now: datetime) -> int: ...

    def count_live(self, *, now: datetime) -> int: ...


def _to_entry(row: SportsCacheEntry) -> CacheEntry:
    return CacheEntry(
        cache_key=row.cache_key,
        data_type=row.data_type,
        params=dict(row.params_json),
        payload=row.payload_json,
        source_provider=row.source_provider,
        created_at=ensure_utc(row.created_at),
        expires_at=ensure_utc(row.expires_at),
    )


class SqlCacheStore:
    """PersistentCacheStore over the `sports_cache` table."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get_latest(self, cache_key: str, *, now: datetime) -> CacheEntry | None:
        try:
            with self._session_factory() as session:
                row = CacheEntryRepository(session).latest_live(cache_key, now=now)
                return None if row is None else _to_entry(row)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"cache lookup failed for {cache_key}") from e

    def upsert(self, entry: CacheEntry) -> None:
        try:
            with self._session_factory() as session, session.begin():
                CacheEntryRepository(session).upsert(
                    cache_key=entry.cache_key,
                    data_type=entry.data_type,
                    params=entry.params,
                    payload=entry.payload,
                    source_provider=entry.source_provider,
                    created_at=entry.created_at,
                    expires_at=entry.expires_at,
                )
        except SQLAlchemyError as e:
            raise CacheStoreError(f"cache store failed for {entry.cache_key}") from e

    def delete_expired(self, *, now: datetime) -> int:
        try:
            with self._session_factory() as session, session.begin():
                return CacheEntryRepository(session).delete_expired(now=now)
        except SQLAlchemyError as e:
            raise CacheStoreError("cache sweep failed") from e

    def count_live(self, *, now: datetime) -> int:
        try:
            with self._session_factory() as session:
                return CacheEntryRepository(session).count_live(now=now)
        except SQLAlchemyError as e:
            raise CacheStoreError("cache count failed") from e
