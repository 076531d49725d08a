from __future__ import annotations

from typing import Callable

from .adapter import ProviderAdapter
from .errors import ProviderCapabilityError
from .types import ProviderConfig

# Builds an adapter bound to one provider row (base URL + resolved credential).
AdapterFactory = Callable[[ProviderConfig, str], ProviderAdapter]


class AdapterRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, AdapterFactory] = {}

    def register(self, kind: str, factory: AdapterFactory) -> None:
        if kind in self._factories:
            raise ValueError(f"Duplicate adapter registration: {kind}")
        self._factories[kind] = factory

    def supports(self, kind: str) -> bool:
        return kind in self._factories

    def kinds(self) -> list[str]:
        return sorted(self._factories)

    def create(self, provider: ProviderConfig, credential: str) -> ProviderAdapter:
        factory = self._factories.get(provider.kind)
        if factory is None:
            raise ProviderCapabilityError(
                f"No adapter registered for provider={provider.name} kind={provider.kind}"
            )
        return factory(provider, credential)
