from __future__ import annotations

from dataclasses import dataclass

from sports_hub.db.enums import DataTypeEnum, ProviderKindEnum
from sports_hub.ingestion.providers.base.errors import ProviderResponseError
from sports_hub.ingestion.providers.base.http_adapter import HttpProviderAdapter
from sports_hub.ingestion.providers.base.types import FetchQuery, Json

SOCCERSAPI_BASE_URL = "https://api.soccersapi.com/v2.2"


@dataclass
class SoccersApiAdapter(HttpProviderAdapter):
    kind = ProviderKindEnum.SOCCERSAPI.value
    league_ids = {"premier-league": "152"}

    async def fetch(self, query: FetchQuery) -> Json:
        league = self.league_id(query)
        match query.data_type:
            case DataTypeEnum.FIXTURES:
                path, params = "/matches", {"status": "scheduled", "league_id": league}
            case DataTypeEnum.RESULTS:
                path, params = "/matches", {"status": "finished", "league_id": league}
            case DataTypeEnum.STANDINGS:
                path, params = f"/leagues/{league}/standings", None
            case DataTypeEnum.TEAMS:
                path, params = f"/leagues/{league}/teams", None
            case _:
                raise self.unsupported(query)

        body = await self.http.get_json(
            path, params=params, headers={"Authorization": f"Bearer {self.api_key}"}
        )
        if body.get("error"):
            raise ProviderResponseError(f"soccersapi returned error: {body['error']}")

        # Either already enveloped or wrapped in `data`.
        data = body.get("data")
        if isinstance(data, list):
            return self.envelope(query.data_type, [d for d in data if isinstance(d, dict)])
        return body
