from __future__ import annotations

from dataclasses import dataclass

from sports_hub.db.enums import DataTypeEnum, ProviderKindEnum
from sports_hub.ingestion.providers.base.errors import ProviderResponseError
from sports_hub.ingestion.providers.base.http_adapter import HttpProviderAdapter
from sports_hub.ingestion.providers.base.types import FetchQuery, Json

FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"


@dataclass
class FootballDataOrgAdapter(HttpProviderAdapter):
    """
    football-data.org v4. Responses already use the envelope keys
    (`matches`, `standings`, `teams`), so bodies pass through unchanged.
    """

    kind = ProviderKindEnum.FOOTBALL_DATA_ORG.value
    league_ids = {
        "premier-league": "PL",
        "la-liga": "PD",
        "bundesliga": "BL1",
        "serie-a": "SA",
        "ligue-1": "FL1",
        "champions-league": "CL",
    }

    async def fetch(self, query: FetchQuery) -> Json:
        code = self.league_id(query)
        match query.data_type:
            case DataTypeEnum.FIXTURES:
                path, params = f"/competitions/{code}/matches", {"status": "SCHEDULED"}
            case DataTypeEnum.RESULTS:
                path, params = f"/competitions/{code}/matches", {"status": "FINISHED"}
            case DataTypeEnum.STANDINGS:
                path, params = f"/competitions/{code}/standings", None
            case DataTypeEnum.TEAMS:
                path, params = f"/competitions/{code}/teams", None
            case _:
                raise self.unsupported(query)

        body = await self.http.get_json(path, params=params, headers={"X-Auth-Token": self.api_key})
        if "errorCode" in body or body.get("error"):
            raise ProviderResponseError(
                f"football-data-org returned error: {body.get('message') or body.get('error')}"
            )
        return body
