from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import ClassVar

from sports_hub.db.enums import DataTypeEnum

from .client import BaseHttpClient
from .errors import ProviderCapabilityError
from .types import FetchQuery, Json

DEFAULT_LEAGUE = "premier-league"


def _utc_today() -> date:
    return datetime.now(UTC).date()


@dataclass
class HttpProviderAdapter:
    """
    Shared plumbing for adapters backed by one BaseHttpClient.

    Subclasses set `kind` and `league_ids` and implement `fetch`.
    """

    http: BaseHttpClient
    api_key: str
    today: Callable[[], date] = field(default=_utc_today, repr=False)

    kind: ClassVar[str] = "base"
    league_ids: ClassVar[Mapping[str, str]] = {}

    def league_id(self, query: FetchQuery) -> str:
        league = (query.league or DEFAULT_LEAGUE).strip().lower()
        if league == "all":
            league = DEFAULT_LEAGUE
        try:
            return self.league_ids[league]
        except KeyError:
            raise ProviderCapabilityError(
                f"{self.kind} has no mapping for league={league}"
            ) from None

    def unsupported(self, query: FetchQuery) -> ProviderCapabilityError:
        return ProviderCapabilityError(f"{self.kind} cannot serve data_type={query.data_type}")

    @staticmethod
    def envelope(data_type: DataTypeEnum, items: list[Json]) -> Json:
        key = {
            DataTypeEnum.FIXTURES: "matches",
            DataTypeEnum.RESULTS: "matches",
            DataTypeEnum.STANDINGS: "standings",
            DataTypeEnum.TEAMS: "teams",
        }[data_type]
        return {key: items}

    async def aclose(self) -> None:
        await self.http.aclose()
