from __future__ import annotations

from typing import Protocol

from .types import FetchQuery, Json


class ProviderAdapter(Protocol):
    """
    Orchestration depends on this, not on any HTTP client.

    One implementation per provider kind. Adding a provider means adding an
    adapter and registering it; nothing else branches on provider names.
    """

    kind: str

    async def fetch(self, query: FetchQuery) -> Json:
        """
        Call the provider and return its body lifted into the common raw
        envelope: {"matches": [...]}, {"standings": [...]} or {"teams": [...]}.
        Field names inside the list stay provider-specific; the normalizer maps them.
        """
        ...

    async def aclose(self) -> None: ...
