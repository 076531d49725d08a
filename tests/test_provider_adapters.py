from __future__ import annotations

from datetime import date

import httpx
import pytest

from sports_hub.db.enums import DataTypeEnum
from sports_hub.ingestion.providers.api_football.adapter import ApiFootballAdapter
from sports_hub.ingestion.providers.apifootball.adapter import ApiFootballComAdapter
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.errors import (
    ProviderCapabilityError,
    ProviderResponseError,
)
from sports_hub.ingestion.providers.base.types import FetchQuery
from sports_hub.ingestion.providers.football_data.adapter import FootballDataOrgAdapter
from sports_hub.ingestion.providers.soccersapi.adapter import SoccersApiAdapter


def _http(handler, base_url: str = "https://api.example.test") -> BaseHttpClient:
    return BaseHttpClient(base_url=base_url, transport=httpx.MockTransport(handler))


async def test_football_data_passes_body_through_with_auth_header() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v4/competitions/PL/standings"
        assert request.headers["X-Auth-Token"] == "fd-key"
        return httpx.Response(200, json={"standings": [{"type": "TOTAL", "table": []}]})

    adapter = FootballDataOrgAdapter(
        http=_http(handler, "https://api.football-data.org/v4"), api_key="fd-key"
    )
    body = await adapter.fetch(FetchQuery(DataTypeEnum.STANDINGS, league="premier-league"))
    await adapter.aclose()

    assert body == {"standings": [{"type": "TOTAL", "table": []}]}


async def test_football_data_error_body_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errorCode": 400, "message": "bad competition"})

    adapter = FootballDataOrgAdapter(http=_http(handler), api_key="k")
    with pytest.raises(ProviderResponseError, match="bad competition"):
        await adapter.fetch(FetchQuery(DataTypeEnum.TEAMS))


async def test_unknown_league_is_a_capability_error() -> None:
    adapter = FootballDataOrgAdapter(http=_http(lambda r: httpx.Response(200)), api_key="k")
    with pytest.raises(ProviderCapabilityError):
        await adapter.fetch(FetchQuery(DataTypeEnum.FIXTURES, league="eredivisie"))


async def test_api_football_flattens_standings_and_merges_venue() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["X-RapidAPI-Key"] == "rk"
        if request.url.path.endswith("/standings"):
            assert request.url.params["league"] == "39"
            assert request.url.params["season"] == "2025"
            return httpx.Response(
                200,
                json={
                    "errors": [],
                    "response": [
                        {"league": {"standings": [[{"rank": 1, "team": {"name": "Arsenal"}}]]}}
                    ],
                },
            )
        return httpx.Response(
            200,
            json={
                "errors": [],
                "response": [
                    {"team": {"name": "Arsenal", "code": "ARS"}, "venue": {"name": "Emirates"}}
                ],
            },
        )

    adapter = ApiFootballAdapter(
        http=_http(handler, "https://api-football-v1.p.rapidapi.com/v3"),
        api_key="rk",
        today=lambda: date(2026, 3, 14),
    )

    standings = await adapter.fetch(FetchQuery(DataTypeEnum.STANDINGS))
    teams = await adapter.fetch(FetchQuery(DataTypeEnum.TEAMS))

    assert standings == {"standings": [{"rank": 1, "team": {"name": "Arsenal"}}]}
    assert teams == {"teams": [{"name": "Arsenal", "code": "ARS", "venue": "Emirates"}]}


async def test_api_football_populated_errors_raise() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": {"token": "invalid key"}, "response": []})

    adapter = ApiFootballAdapter(http=_http(handler), api_key="rk")
    with pytest.raises(ProviderResponseError, match="invalid key"):
        await adapter.fetch(FetchQuery(DataTypeEnum.FIXTURES))


async def test_apifootball_results_keep_finished_matches_only() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["APIkey"] == "ak"
        assert request.url.params["action"] == "get_events"
        assert request.url.params["from"] == "2026-02-12"
        assert request.url.params["to"] == "2026-03-14"
        return httpx.Response(
            200,
            json=[
                {"match_id": "1", "match_status": "Finished"},
                {"match_id": "2", "match_status": "45'"},
            ],
        )

    adapter = ApiFootballComAdapter(
        http=_http(handler), api_key="ak", today=lambda: date(2026, 3, 14)
    )
    body = await adapter.fetch(FetchQuery(DataTypeEnum.RESULTS))

    assert body == {"matches": [{"match_id": "1", "match_status": "Finished"}]}


async def test_apifootball_error_object_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": 404, "message": "No event found"})

    adapter = ApiFootballComAdapter(http=_http(handler), api_key="ak")
    with pytest.raises(ProviderResponseError, match="No event found"):
        await adapter.fetch(FetchQuery(DataTypeEnum.STANDINGS))


async def test_soccersapi_unwraps_data_list() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer sk"
        return httpx.Response(200, json={"data": [{"name": "Arsenal"}, "junk"]})

    adapter = SoccersApiAdapter(http=_http(handler), api_key="sk")
    assert await adapter.fetch(FetchQuery(DataTypeEnum.TEAMS)) == {"teams": [{"name": "Arsenal"}]}
