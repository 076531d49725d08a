from __future__ import annotations

from sports_hub.core.config import Settings
from sports_hub.db.enums import ProviderKindEnum
from sports_hub.ingestion.providers.api_football.adapter import ApiFootballAdapter
from sports_hub.ingestion.providers.apifootball.adapter import ApiFootballComAdapter
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.http_adapter import HttpProviderAdapter
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.base.types import ProviderConfig
from sports_hub.ingestion.providers.football_data.adapter import FootballDataOrgAdapter
from sports_hub.ingestion.providers.soccersapi.adapter import SoccersApiAdapter

ADAPTER_CLASSES: dict[ProviderKindEnum, type[HttpProviderAdapter]] = {
    ProviderKindEnum.FOOTBALL_DATA_ORG: FootballDataOrgAdapter,
    ProviderKindEnum.API_FOOTBALL: ApiFootballAdapter,
    ProviderKindEnum.APIFOOTBALL: ApiFootballComAdapter,
    ProviderKindEnum.SOCCERSAPI: SoccersApiAdapter,
}


def register_default_adapters(registry: AdapterRegistry, *, settings: Settings) -> None:
    for kind, adapter_cls in ADAPTER_CLASSES.items():

        def make_adapter(
            provider: ProviderConfig,
            credential: str,
            adapter_cls: type[HttpProviderAdapter] = adapter_cls,
        ) -> HttpProviderAdapter:
            # Transport timeout sits just above the orchestrator's per-call
            # timeout so the logical deadline always fires first.
            http = BaseHttpClient(
                base_url=provider.base_url,
                timeout_s=settings.per_call_timeout_s + 5.0,
            )
            return adapter_cls(http=http, api_key=credential)

        registry.register(kind.value, make_adapter)


def build_default_adapter_registry(settings: Settings) -> AdapterRegistry:
    registry = AdapterRegistry()
    register_default_adapters(registry, settings=settings)
    return registry
