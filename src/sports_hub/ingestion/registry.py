from __future__ import annotations

import base64
import binascii
import logging
import threading
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from sports_hub.core.clock import Clock, SystemClock
from sports_hub.db.enums import ProviderKindEnum
from sports_hub.db.models.provider import SportsProvider
from sports_hub.db.repos.provider_repo import ProviderRepository
from sports_hub.db.repos.usage_log_repo import UsageLogRepository
from sports_hub.ingestion.providers.base.types import ProviderConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimit:
    requests: int
    period: timedelta


# Published plan limits, enforced from the usage ledger on top of the daily quota.
DEFAULT_RATE_LIMITS: dict[str, RateLimit] = {
    ProviderKindEnum.SOCCERSAPI.value: RateLimit(100, timedelta(hours=1)),
    ProviderKindEnum.FOOTBALL_DATA_ORG.value: RateLimit(10, timedelta(minutes=1)),
    ProviderKindEnum.API_FOOTBALL.value: RateLimit(100, timedelta(days=1)),
    ProviderKindEnum.APIFOOTBALL.value: RateLimit(1000, timedelta(days=1)),
}


def resolve_credential(raw: str | None) -> str:
    """
    Normalize a stored credential into the value sent to the provider.

    Keys are stored as plain text, but older rows may hold a multi-line paste
    or a base64-encoded value. Returns "" when nothing usable is present.
    """
    if not raw:
        return ""
    key = raw.strip()
    if "\n" in key:
        return key.split("\n", 1)[0].strip()
    if len(key) > 10 and " " not in key:
        return key
    try:
        decoded = base64.b64decode(key, validate=True).decode("utf-8").strip()
    except (binascii.Error, UnicodeDecodeError):
        return key
    return decoded if len(decoded) > 10 else key


def _to_config(row: SportsProvider) -> ProviderConfig:
    return ProviderConfig(
        id=row.id,
        name=row.name,
        kind=row.kind,
        base_url=row.base_url,
        credential=row.credential,
        priority=row.priority,
        daily_quota_used=row.daily_quota_used,
        daily_quota_limit=row.daily_quota_limit,
        last_called_at=row.last_called_at,
        is_active=row.is_active,
    )


class ProviderRegistry:
    """
    Configured providers plus their quota bookkeeping.

    The provider table is the source of truth; `refresh()` reloads it so that
    admin edits and the external daily reset are picked up. Usage increments
    are applied in memory and written through as relative updates. Methods
    may run on worker threads, so in-memory state sits behind a lock; the
    database work itself needs none.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        clock: Clock | None = None,
        rate_limits: dict[str, RateLimit] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or SystemClock()
        self._rate_limits = DEFAULT_RATE_LIMITS if rate_limits is None else rate_limits
        self._providers: dict[int, ProviderConfig] = {}
        self._loaded = False
        self._rr_index = 0
        self._lock = threading.Lock()

    def refresh(self) -> list[ProviderConfig]:
        with self._session_factory() as session:
            rows = ProviderRepository(session).list_active()
            providers = {row.id: _to_config(row) for row in rows}
        with self._lock:
            self._providers = providers
            self._loaded = True
        return self.active_providers()

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    def get(self, provider_id: int) -> ProviderConfig | None:
        self._ensure_loaded()
        return self._providers.get(provider_id)

    def active_providers(self) -> list[ProviderConfig]:
        self._ensure_loaded()
        active = [p for p in self._providers.values() if p.is_active]
        return sorted(active, key=lambda p: (p.priority, p.id))

    def select_next(self) -> ProviderConfig | None:
        """Round-robin over active providers, skipping any that used up their daily quota."""
        active = self.active_providers()
        if not active:
            return None
        with self._lock:
            start = self._rr_index % len(active)
            for offset in range(len(active)):
                candidate = active[(start + offset) % len(active)]
                if candidate.has_quota:
                    self._rr_index = (start + offset + 1) % len(active)
                    return candidate
        return None

    def is_rate_limited(self, provider: ProviderConfig) -> bool:
        limit = self._rate_limits.get(provider.kind)
        if limit is None:
            return False
        since = self._clock.now() - limit.period
        try:
            with self._session_factory() as session:
                used = UsageLogRepository(session).count_since(provider.name, since=since)
        except SQLAlchemyError:
            logger.warning("Rate limit check failed for %s; assuming available", provider.name)
            return False
        if used >= limit.requests:
            logger.info("Provider %s is rate limited: %d/%d", provider.name, used, limit.requests)
            return True
        return False

    def is_over_quota(self, provider: ProviderConfig) -> bool:
        return not provider.has_quota or self.is_rate_limited(provider)

    def record_usage(
        self, provider_id: int, *, success: bool = True, response_time_ms: int = 0
    ) -> None:
        """Count one attempted call against the provider, whatever its outcome."""
        now = self._clock.now()
        with self._lock:
            provider = self._providers.get(provider_id)
            if provider is not None:
                provider.daily_quota_used += 1
                provider.last_called_at = now

        try:
            with self._session_factory() as session, session.begin():
                ProviderRepository(session).increment_usage(provider_id, called_at=now)
                if provider is not None:
                    UsageLogRepository(session).append(
                        provider_name=provider.name,
                        success=success,
                        response_time_ms=response_time_ms,
                        created_at=now,
                    )
        except SQLAlchemyError:
            # Best-effort: the call already happened and must not fail the fetch.
            logger.exception("Failed to persist usage for provider id=%s", provider_id)
