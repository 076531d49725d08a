from __future__ import annotations

import httpx
import pytest

from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.errors import (
    ProviderRateLimited,
    ProviderRequestError,
    ProviderTimeoutError,
)


@pytest.fixture
async def make_client():
    clients: list[BaseHttpClient] = []

    def factory(handler) -> BaseHttpClient:
        http = BaseHttpClient(
            base_url="https://api.example.test/v4", transport=httpx.MockTransport(handler)
        )
        clients.append(http)
        return http

    yield factory
    for http in clients:
        await http.aclose()


async def test_get_json_joins_base_path_and_sends_headers(make_client) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"matches": []})

    body = await make_client(handler).get_json(
        "/competitions/PL/matches",
        params={"status": "SCHEDULED"},
        headers={"X-Auth-Token": "abc"},
    )

    assert body == {"matches": []}
    assert seen[0].url.path == "/v4/competitions/PL/matches"
    assert seen[0].url.params["status"] == "SCHEDULED"
    assert seen[0].headers["X-Auth-Token"] == "abc"
    assert seen[0].headers["Accept"] == "application/json"


async def test_http_429_maps_to_rate_limited(make_client) -> None:
    http = make_client(lambda r: httpx.Response(429))
    with pytest.raises(ProviderRateLimited):
        await http.get_json("/x")


async def test_non_2xx_maps_to_request_error(make_client) -> None:
    http = make_client(lambda r: httpx.Response(503, text="down"))
    with pytest.raises(ProviderRequestError, match="HTTP 503"):
        await http.get_json("/x")


async def test_transport_timeout_maps_to_timeout_error(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ProviderTimeoutError):
        await make_client(handler).get_json("/x")


async def test_invalid_json_and_non_object_bodies_are_rejected(make_client) -> None:
    html = make_client(lambda r: httpx.Response(200, text="<html>"))
    with pytest.raises(ProviderRequestError, match="not valid JSON"):
        await html.get_json("/x")

    array = make_client(lambda r: httpx.Response(200, json=[1, 2]))
    assert await array.get_json_value("/x") == [1, 2]
    with pytest.raises(ProviderRequestError, match="Expected JSON object"):
        await array.get_json("/x")
