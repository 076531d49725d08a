from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from sports_hub.db.models.cache_entry import SportsCacheEntry
from sports_hub.db.repos.base import BaseRepository


class CacheEntryRepository(BaseRepository[SportsCacheEntry]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=SportsCacheEntry)

    def latest_live(self, cache_key: str, *, now: datetime) -> SportsCacheEntry | None:
        stmt = (
            select(SportsCacheEntry)
            .where(SportsCacheEntry.cache_key == cache_key, SportsCacheEntry.expires_at > now)
            .order_by(SportsCacheEntry.created_at.desc())
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def upsert(
        self,
        *,
        cache_key: str,
        data_type: str,
        params: dict[str, Any],
        payload: dict[str, Any],
        source_provider: str,
        created_at: datetime,
        expires_at: datetime,
    ) -> SportsCacheEntry:
        existing = self.first_where(SportsCacheEntry.cache_key == cache_key)
        if existing is None:
            return self.add(
                SportsCacheEntry(
                    cache_key=cache_key,
                    data_type=data_type,
                    params_json=params,
                    payload_json=payload,
                    source_provider=source_provider,
                    created_at=created_at,
                    expires_at=expires_at,
                )
            )
        return self.patch(
            existing,
            {
                "data_type": data_type,
                "params_json": params,
                "payload_json": payload,
                "source_provider": source_provider,
                "created_at": created_at,
                "expires_at": expires_at,
            },
        )

    def delete_expired(self, *, now: datetime) -> int:
        return self.delete_where(SportsCacheEntry.expires_at <= now)

    def count_live(self, *, now: datetime) -> int:
        return self.count_where(SportsCacheEntry.expires_at > now)
