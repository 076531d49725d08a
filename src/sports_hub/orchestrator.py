from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from sports_hub.cache.store import SqlCacheStore
from sports_hub.cache.tiered import TieredCache
from sports_hub.core.clock import Clock, SystemClock
from sports_hub.core.config import Settings
from sports_hub.db import DatabaseConfig, create_db_engine, create_session_factory
from sports_hub.db.enums import ApiResultStatusEnum, DataTypeEnum
from sports_hub.ingestion.dates import iso_z
from sports_hub.ingestion.fallback import FallbackDataSource
from sports_hub.ingestion.normalizer import DataNormalizer
from sports_hub.ingestion.providers.base.errors import (
    MissingCredentialError,
    ProviderCapabilityError,
    ProviderError,
    ProviderTimeoutError,
    QuotaExceededError,
    TotalExhaustionError,
)
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.base.types import FetchQuery, Json, ProviderConfig
from sports_hub.ingestion.providers.defaults import build_default_adapter_registry
from sports_hub.ingestion.registry import ProviderRegistry, resolve_credential
from sports_hub.progress import ProgressTracker, ProviderResult

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"
CACHE_SOURCE_PREFIX = "cache_"


@dataclass
class OrchestratorContext:
    """
    Everything one orchestrator instance owns. Nothing here is module-global,
    so tests and multiple server instances never share state by accident.
    """

    registry: ProviderRegistry
    adapters: AdapterRegistry
    cache: TieredCache
    progress: ProgressTracker
    settings: Settings
    clock: Clock = field(default_factory=SystemClock)
    normalizer: DataNormalizer = field(default_factory=DataNormalizer)
    fallback: FallbackDataSource = field(default_factory=FallbackDataSource)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        session_factory: sessionmaker[Session] | None = None,
        clock: Clock | None = None,
    ) -> OrchestratorContext:
        if session_factory is None:
            engine = create_db_engine(
                DatabaseConfig(database_url=settings.database_url, echo=settings.db_echo)
            )
            session_factory = create_session_factory(engine)
        clock = clock or SystemClock()
        return cls(
            registry=ProviderRegistry(session_factory, clock=clock),
            adapters=build_default_adapter_registry(settings),
            cache=TieredCache(SqlCacheStore(session_factory), clock=clock),
            progress=ProgressTracker(
                ttl_s=settings.progress_ttl_s,
                default_estimate_s=settings.progress_default_estimate_s,
                clock=clock,
            ),
            settings=settings,
            clock=clock,
            fallback=FallbackDataSource(clock),
        )


@dataclass(frozen=True)
class AttemptOutcome:
    provider: ProviderConfig
    status: ApiResultStatusEnum
    raw: Json | None = None
    error: str | None = None
    duration_ms: int = 0

    @property
    def valid(self) -> bool:
        return self.status is ApiResultStatusEnum.SUCCESS


@dataclass
class RunStats:
    chunks_attempted: int = 0
    providers_attempted: int = 0
    deadline_exceeded: bool = False


@dataclass(frozen=True)
class FetchResult:
    payload: dict[str, Any]
    source: str
    cached_at: datetime
    processing_time_ms: int
    session_id: str | None
    timing: dict[str, Any]

    @property
    def from_cache(self) -> bool:
        return self.source.startswith(CACHE_SOURCE_PREFIX)

    def as_response(self) -> dict[str, Any]:
        return {
            "success": True,
            "data": self.payload,
            "source": self.source,
            "cached_at": iso_z(self.cached_at),
            "processing_time": self.processing_time_ms,
            "session_id": self.session_id,
        }


@dataclass(frozen=True)
class ProbeResult:
    session_id: str
    outcomes: list[AttemptOutcome]


def chunked(items: Sequence[ProviderConfig], size: int) -> list[list[ProviderConfig]]:
    size = max(1, size)
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class FetchOrchestrator:
    """
    Cache first, then providers in fixed-size concurrent chunks, then fallback.

    Chunks run strictly one after another; calls inside a chunk run together and
    the first response that passes the shape check wins. Siblings still in
    flight at that point are left to finish in the background and their results
    are discarded. Per-call timeouts cancel the awaiting coroutine; whether the
    socket is torn down immediately is up to the transport, so cancellation is
    best-effort rather than a guaranteed interrupt.
    """

    def __init__(self, context: OrchestratorContext) -> None:
        self.ctx = context
        self._background: set[asyncio.Task[AttemptOutcome]] = set()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def request_data(
        self,
        data_type: DataTypeEnum | str,
        league: str | None = None,
        region: str | None = None,
    ) -> FetchResult:
        kind = DataTypeEnum(data_type)
        settings = self.ctx.settings
        started = self.ctx.clock.monotonic()
        params = {"league": league or "all", "region": region or settings.default_region}

        # Registry and cache tiers do blocking DB work; keep it off the event loop.
        cached = await asyncio.to_thread(self.ctx.cache.lookup, kind.value, params)
        if cached is not None:
            return FetchResult(
                payload=cached.payload,
                source=f"{CACHE_SOURCE_PREFIX}{cached.source_provider}",
                cached_at=cached.created_at,
                processing_time_ms=self._elapsed_ms(started),
                session_id=None,
                timing={"cache_hit": True, "processing_time_ms": self._elapsed_ms(started)},
            )

        providers = await asyncio.to_thread(self.ctx.registry.refresh)
        session_id = self.ctx.progress.create(len(providers))
        self.ctx.progress.update(
            session_id, current_task=f"Scanning {len(providers)} providers for {kind.value}"
        )

        query = FetchQuery(data_type=kind, league=league, region=params["region"])
        stats = RunStats()
        try:
            winner = await self._run_chunks(query, providers, session_id, started, stats)
            raw: Any = winner.raw
            source = winner.provider.name
            logger.info("Adopted %s data from %s", kind.value, source)
        except TotalExhaustionError as e:
            logger.warning("All providers failed for %s (%s); using fallback data", kind.value, e)
            self.ctx.progress.update(
                session_id, current_task="All providers failed, using fallback data"
            )
            raw = self.ctx.fallback.provide(kind, league=params["league"], region=params["region"])
            source = FALLBACK_SOURCE

        payload = self.ctx.normalizer.normalize(
            raw,
            kind,
            league=params["league"],
            region=params["region"],
            generated_at=self.ctx.clock.now(),
        )
        entry = await asyncio.to_thread(self.ctx.cache.store, kind.value, params, payload, source)
        self.ctx.progress.complete(session_id)

        elapsed_ms = self._elapsed_ms(started)
        return FetchResult(
            payload=payload,
            source=source,
            cached_at=entry.created_at,
            processing_time_ms=elapsed_ms,
            session_id=session_id,
            timing={
                "cache_hit": False,
                "processing_time_ms": elapsed_ms,
                "chunks_attempted": stats.chunks_attempted,
                "providers_attempted": stats.providers_attempted,
                "deadline_exceeded": stats.deadline_exceeded,
            },
        )

    async def probe_providers(self, data_type: DataTypeEnum | str) -> ProbeResult:
        """
        Time one call per active provider, all at once, without caching anything.
        Progress is tracked under the returned session id like a normal fetch.
        """
        kind = DataTypeEnum(data_type)
        providers = await asyncio.to_thread(self.ctx.registry.refresh)
        session_id = self.ctx.progress.create(len(providers))
        query = FetchQuery(data_type=kind, region=self.ctx.settings.default_region)
        timeout = self.ctx.settings.per_call_timeout_s
        outcomes = await asyncio.gather(
            *(self._attempt(p, query, session_id, timeout) for p in providers)
        )
        self.ctx.progress.complete(session_id)
        return ProbeResult(session_id=session_id, outcomes=list(outcomes))

    async def drain(self) -> None:
        """Wait for discarded sibling calls still running in the background."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def aclose(self) -> None:
        for task in list(self._background):
            task.cancel()
        await asyncio.gather(*list(self._background), return_exceptions=True)
        self._background.clear()

    # ------------------------------------------------------------------
    # Chunk scheduling
    # ------------------------------------------------------------------

    async def _run_chunks(
        self,
        query: FetchQuery,
        providers: Sequence[ProviderConfig],
        session_id: str,
        started: float,
        stats: RunStats,
    ) -> AttemptOutcome:
        settings = self.ctx.settings
        for index, chunk in enumerate(chunked(providers, settings.max_parallel)):
            elapsed = self.ctx.clock.monotonic() - started
            remaining = settings.global_deadline_s - elapsed
            if remaining <= 0:
                stats.deadline_exceeded = True
                message = f"Global deadline of {settings.global_deadline_s:.0f}s exceeded"
                logger.warning("%s after %d chunk(s)", message, index)
                self.ctx.progress.update(session_id, error=message)
                break

            stats.chunks_attempted += 1
            stats.providers_attempted += len(chunk)
            self.ctx.progress.update(
                session_id,
                current_task=f"Trying {', '.join(p.name for p in chunk)}",
            )
            winner = await self._run_chunk(
                chunk, query, session_id, settings.call_timeout_within(remaining)
            )
            if winner is not None:
                return winner

        raise TotalExhaustionError(
            f"no valid {query.data_type.value} data from {len(providers)} provider(s)"
        )

    async def _run_chunk(
        self,
        chunk: Sequence[ProviderConfig],
        query: FetchQuery,
        session_id: str,
        timeout: float,
    ) -> AttemptOutcome | None:
        tasks = [
            asyncio.ensure_future(self._attempt(provider, query, session_id, timeout))
            for provider in chunk
        ]
        try:
            for next_settled in asyncio.as_completed(tasks):
                outcome = await next_settled
                if outcome.valid:
                    return outcome
            return None
        finally:
            for task in tasks:
                if not task.done():
                    self._background.add(task)
                    task.add_done_callback(self._background.discard)

    # ------------------------------------------------------------------
    # Single provider attempt
    # ------------------------------------------------------------------

    def _skip(
        self, provider: ProviderConfig, session_id: str, reason: ProviderError
    ) -> AttemptOutcome:
        logger.info("Skipping %s: %s", provider.name, reason)
        outcome = AttemptOutcome(provider, ApiResultStatusEnum.SKIPPED, error=str(reason))
        self.ctx.progress.update(
            session_id,
            completed_delta=1,
            provider_result=ProviderResult(provider.name, outcome.status, error=outcome.error),
        )
        return outcome

    async def _attempt(
        self,
        provider: ProviderConfig,
        query: FetchQuery,
        session_id: str,
        timeout: float,
    ) -> AttemptOutcome:
        """One provider call. Never raises: every failure becomes an outcome."""
        credential = resolve_credential(provider.credential)
        if not credential:
            return self._skip(
                provider, session_id, MissingCredentialError(f"no API key for {provider.name}")
            )
        if await asyncio.to_thread(self.ctx.registry.is_over_quota, provider):
            return self._skip(
                provider,
                session_id,
                QuotaExceededError(
                    provider.name, provider.daily_quota_used, provider.daily_quota_limit
                ),
            )
        if not self.ctx.adapters.supports(provider.kind):
            return self._skip(
                provider,
                session_id,
                ProviderCapabilityError(f"no adapter for kind={provider.kind}"),
            )

        self.ctx.progress.update(
            session_id,
            current_task=f"Fetching from {provider.name}",
            provider_result=ProviderResult(provider.name, ApiResultStatusEnum.PENDING),
        )

        adapter = self.ctx.adapters.create(provider, credential)
        started = self.ctx.clock.monotonic()
        raw: Json | None = None
        status = ApiResultStatusEnum.SUCCESS
        error: str | None = None
        try:
            raw = await asyncio.wait_for(adapter.fetch(query), timeout=timeout)
        except (TimeoutError, ProviderTimeoutError):
            status = ApiResultStatusEnum.TIMEOUT
            error = f"{provider.name}: timed out after {timeout:.1f}s"
        except ProviderError as e:
            status = ApiResultStatusEnum.ERROR
            error = f"{provider.name}: {e}"
        except Exception as e:
            logger.exception("Unexpected failure calling %s", provider.name)
            status = ApiResultStatusEnum.ERROR
            error = f"{provider.name}: {type(e).__name__}: {e}"
        finally:
            await adapter.aclose()

        duration_ms = self._elapsed_ms(started)
        await asyncio.to_thread(
            self.ctx.registry.record_usage,
            provider.id,
            success=status is ApiResultStatusEnum.SUCCESS,
            response_time_ms=duration_ms,
        )

        if status is ApiResultStatusEnum.SUCCESS and not self.ctx.normalizer.has_valid_data(
            raw, query.data_type
        ):
            status = ApiResultStatusEnum.ERROR
            error = f"{provider.name}: returned no valid {query.data_type.value} data"

        if error is not None:
            logger.info("%s", error)

        outcome = AttemptOutcome(provider, status, raw=raw, error=error, duration_ms=duration_ms)
        self.ctx.progress.update(
            session_id,
            completed_delta=1,
            error=error,
            provider_result=ProviderResult(provider.name, status, duration_ms, error),
        )
        return outcome

    def _elapsed_ms(self, started: float) -> int:
        return int((self.ctx.clock.monotonic() - started) * 1000)
