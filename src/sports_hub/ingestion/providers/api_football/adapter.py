from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sports_hub.db.enums import DataTypeEnum, ProviderKindEnum
from sports_hub.ingestion.dates import current_season
from sports_hub.ingestion.providers.base.errors import ProviderResponseError
from sports_hub.ingestion.providers.base.http_adapter import HttpProviderAdapter
from sports_hub.ingestion.providers.base.types import FetchQuery, Json

API_FOOTBALL_BASE_URL = "https://api-football-v1.p.rapidapi.com/v3"
API_FOOTBALL_HOST = "api-football-v1.p.rapidapi.com"


def _items(body: Json) -> list[dict[str, Any]]:
    items = body.get("response")
    if not isinstance(items, list):
        return []
    return [i for i in items if isinstance(i, dict)]


@dataclass
class ApiFootballAdapter(HttpProviderAdapter):
    """
    API-Football v3 via RapidAPI. Everything comes back under `response`;
    standings are nested as response[0].league.standings[group][row].
    """

    kind = ProviderKindEnum.API_FOOTBALL.value
    league_ids = {
        "premier-league": "39",
        "la-liga": "140",
        "bundesliga": "78",
        "serie-a": "135",
        "ligue-1": "61",
        "champions-league": "2",
    }

    def _headers(self) -> dict[str, str]:
        return {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": API_FOOTBALL_HOST}

    async def fetch(self, query: FetchQuery) -> Json:
        league = self.league_id(query)
        season = str(current_season(self.today()))
        match query.data_type:
            case DataTypeEnum.FIXTURES:
                path, params = "/fixtures", {"league": league, "next": "20"}
            case DataTypeEnum.RESULTS:
                path, params = "/fixtures", {"league": league, "last": "50"}
            case DataTypeEnum.STANDINGS:
                path, params = "/standings", {"league": league, "season": season}
            case DataTypeEnum.TEAMS:
                path, params = "/teams", {"league": league, "season": season}
            case _:
                raise self.unsupported(query)

        body = await self.http.get_json(path, params=params, headers=self._headers())

        # `errors` is a list when empty and a dict when populated.
        errors = body.get("errors") or []
        if errors:
            raise ProviderResponseError(f"api-football returned errors: {errors}")

        items = _items(body)
        if query.data_type is DataTypeEnum.STANDINGS:
            rows: list[dict[str, Any]] = []
            for item in items[:1]:
                groups = (item.get("league") or {}).get("standings") or []
                if groups and isinstance(groups[0], list):
                    rows = [r for r in groups[0] if isinstance(r, dict)]
            return self.envelope(query.data_type, rows)

        if query.data_type is DataTypeEnum.TEAMS:
            teams = []
            for item in items:
                team = dict(item.get("team") or {})
                venue = item.get("venue") or {}
                team["venue"] = venue.get("name")
                teams.append(team)
            return self.envelope(query.data_type, teams)

        return self.envelope(query.data_type, items)
