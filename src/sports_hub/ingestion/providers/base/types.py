from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sports_hub.db.enums import DataTypeEnum

Json = dict[str, Any]


@dataclass(frozen=True)
class FetchQuery:
    """
    Standardized request handed to adapters by the orchestrator.
    """
    data_type: DataTypeEnum
    league: str | None = None
    region: str | None = None


@dataclass
class ProviderConfig:
    """
    In-memory view of a configured provider row.
    Mutated by usage recording; the daily reset happens outside this service.
    """
    id: int
    name: str
    kind: str
    base_url: str
    credential: str | None
    priority: int
    daily_quota_used: int
    daily_quota_limit: int
    last_called_at: datetime | None = None
    is_active: bool = True

    @property
    def has_quota(self) -> bool:
        return self.daily_quota_used < self.daily_quota_limit
