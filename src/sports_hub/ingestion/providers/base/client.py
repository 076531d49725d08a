from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .errors import ProviderRateLimited, ProviderRequestError, ProviderTimeoutError

Json = dict[str, Any]


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic async HTTP client wrapper.

    - Uses a single underlying httpx.AsyncClient for connection pooling.
    - Provides consistent error handling.
    - Provider adapters hold one and add auth headers per request.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers={"Accept": "application/json", **dict(self.headers)},
            transport=self.transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json_value(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        GET and return the parsed JSON body (object or list).
        Raises ProviderRequestError (including timeout / rate-limit subtypes) on
        transport issues, non-2xx or an unparsable body.
        """
        try:
            resp = await self._client.get(path.lstrip("/"), params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(str(e) or "transport timeout") from e
        except httpx.HTTPError as e:
            raise ProviderRequestError(str(e) or type(e).__name__) from e

        if resp.status_code == 429:
            raise ProviderRateLimited("Provider rate limited the request (HTTP 429).")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderRequestError(
                f"HTTP {resp.status_code} for GET {resp.request.url.copy_with(query=None)}"
            ) from e

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderRequestError("Response was not valid JSON.") from e

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        data = await self.get_json_value(path, params=params, headers=headers)
        if not isinstance(data, dict):
            raise ProviderRequestError(f"Expected JSON object, got {type(data)}")
        return data
