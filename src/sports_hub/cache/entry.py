from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    cache_key: str
    data_type: str
    params: dict[str, str]
    payload: dict[str, Any]
    source_provider: str
    created_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if self.expires_at <= self.created_at:
            raise ValueError(f"expires_at must be after created_at for {self.cache_key}")

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at
