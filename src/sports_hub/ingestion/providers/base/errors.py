from __future__ import annotations

from dataclasses import dataclass


class ProviderError(RuntimeError):
    """Base exception for provider-related failures."""


class ProviderRequestError(ProviderError):
    """HTTP/network/transport layer failures (connection errors, non-2xx, malformed body)."""


class ProviderTimeoutError(ProviderRequestError):
    """The call did not settle within its per-call timeout and was abandoned."""


class ProviderRateLimited(ProviderRequestError):
    """Provider throttled the request (e.g., HTTP 429)."""


class ProviderResponseError(ProviderError):
    """Provider returned a well-formed response indicating an application-level error."""


class ProviderCapabilityError(ProviderError):
    """Adapter does not support a requested operation."""


@dataclass(eq=False)
class QuotaExceededError(ProviderError):
    """Provider skipped pre-emptively; no call was attempted."""

    provider_name: str
    used: int
    limit: int

    def __str__(self) -> str:
        return f"{self.provider_name} is over quota ({self.used}/{self.limit})"


class MissingCredentialError(ProviderError):
    """Provider has no usable credential configured; no call was attempted."""


class TotalExhaustionError(ProviderError):
    """Every provider failed or was skipped. Resolved by the fallback dataset, never surfaced."""
