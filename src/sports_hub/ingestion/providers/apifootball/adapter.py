from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sports_hub.db.enums import DataTypeEnum, ProviderKindEnum
from sports_hub.ingestion.dates import date_window
from sports_hub.ingestion.providers.base.errors import ProviderResponseError
from sports_hub.ingestion.providers.base.http_adapter import HttpProviderAdapter
from sports_hub.ingestion.providers.base.types import FetchQuery, Json

APIFOOTBALL_BASE_URL = "https://apiv3.apifootball.com"


@dataclass
class ApiFootballComAdapter(HttpProviderAdapter):
    """
    apifootball.com v3. Single endpoint switched by `action`; the key travels
    as the `APIkey` query parameter. Successful calls return a bare list,
    failures a {"error": ..., "message": ...} object.
    """

    kind = ProviderKindEnum.APIFOOTBALL.value
    league_ids = {
        "premier-league": "152",
        "la-liga": "302",
        "bundesliga": "175",
        "serie-a": "207",
        "ligue-1": "168",
        "champions-league": "3",
    }

    async def fetch(self, query: FetchQuery) -> Json:
        league = self.league_id(query)
        params: dict[str, str] = {"APIkey": self.api_key, "league_id": league}
        today = self.today()
        match query.data_type:
            case DataTypeEnum.FIXTURES:
                start, end = date_window(today, days=30)
                params.update(action="get_events", **{"from": start, "to": end})
            case DataTypeEnum.RESULTS:
                start, end = date_window(today, days=-30)
                params.update(action="get_events", match_live="0", **{"from": start, "to": end})
            case DataTypeEnum.STANDINGS:
                params.update(action="get_standings")
            case DataTypeEnum.TEAMS:
                params.update(action="get_teams")
            case _:
                raise self.unsupported(query)

        value = await self.http.get_json_value("/", params=params)
        if isinstance(value, dict):
            raise ProviderResponseError(
                f"apifootball returned error {value.get('error')}: {value.get('message', '')}"
            )
        items: list[dict[str, Any]] = []
        if isinstance(value, list):
            items = [v for v in value if isinstance(v, dict)]
        if query.data_type is DataTypeEnum.RESULTS:
            finished = [i for i in items if str(i.get("match_status", "")).lower() == "finished"]
            items = finished or items
        return self.envelope(query.data_type, items)
