from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest
from sqlalchemy.orm import Session, sessionmaker

from sports_hub.cache.store import SqlCacheStore
from sports_hub.cache.tiered import TieredCache
from sports_hub.core.config import Settings
from sports_hub.db import DatabaseConfig, create_db_engine, create_schema, create_session_factory
from sports_hub.db.models.provider import SportsProvider
from sports_hub.ingestion.fallback import FallbackDataSource
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.base.types import FetchQuery, ProviderConfig
from sports_hub.ingestion.registry import ProviderRegistry
from sports_hub.orchestrator import OrchestratorContext
from sports_hub.progress import ProgressTracker

SCRIPTED_KIND = "scripted"
TEST_KEY = "test-key-0123456789"


class FakeClock:
    def __init__(self, start: datetime = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)) -> None:
        self.current = start
        self.mono = 1000.0

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)
        self.mono += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_factory(tmp_path) -> Iterator[sessionmaker[Session]]:
    # File-backed so that worker threads each get their own connection.
    url = f"sqlite+pysqlite:///{tmp_path / 'sports_hub.db'}"
    engine = create_db_engine(DatabaseConfig(database_url=url))
    create_schema(engine)
    yield create_session_factory(engine)
    engine.dispose()


def add_provider(
    session_factory: sessionmaker[Session],
    name: str,
    *,
    priority: int = 1,
    kind: str = SCRIPTED_KIND,
    credential: str | None = TEST_KEY,
    used: int = 0,
    limit: int = 100,
    is_active: bool = True,
) -> int:
    with session_factory() as session, session.begin():
        row = SportsProvider(
            name=name,
            kind=kind,
            base_url=f"https://{name}.example.test",
            credential=credential,
            priority=priority,
            daily_quota_used=used,
            daily_quota_limit=limit,
            is_active=is_active,
        )
        session.add(row)
        session.flush()
        return row.id


Behaviour = Callable[[FetchQuery], Awaitable[Any]]


def respond(payload: Any, *, delay: float = 0.0, on_call: Callable[[], None] | None = None):
    async def behaviour(query: FetchQuery) -> Any:
        if on_call is not None:
            on_call()
        if delay:
            await asyncio.sleep(delay)
        return payload

    return behaviour


def fail(exc: Exception, *, delay: float = 0.0, on_call: Callable[[], None] | None = None):
    async def behaviour(query: FetchQuery) -> Any:
        if on_call is not None:
            on_call()
        if delay:
            await asyncio.sleep(delay)
        raise exc

    return behaviour


def hang():
    async def behaviour(query: FetchQuery) -> Any:
        await asyncio.sleep(3600)

    return behaviour


@dataclass
class ScriptedAdapter:
    name: str
    behaviour: Behaviour
    kind: str = SCRIPTED_KIND
    closed: bool = False

    async def fetch(self, query: FetchQuery) -> Any:
        return await self.behaviour(query)

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class ScriptedAdapters:
    """Per-provider-name behaviours behind one adapter kind; counts calls."""

    behaviours: dict[str, Behaviour]
    calls: dict[str, int] = field(default_factory=dict)
    created: list[ScriptedAdapter] = field(default_factory=list)

    def registry(self) -> AdapterRegistry:
        registry = AdapterRegistry()
        registry.register(SCRIPTED_KIND, self._create)
        return registry

    def _create(self, provider: ProviderConfig, credential: str) -> ScriptedAdapter:
        self.calls[provider.name] = self.calls.get(provider.name, 0) + 1
        adapter = ScriptedAdapter(provider.name, self.behaviours[provider.name])
        self.created.append(adapter)
        return adapter


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "per_call_timeout_s": 1.0,
        "global_deadline_s": 120.0,
        "max_parallel": 3,
        "default_region": "global",
    }
    values.update(overrides)
    return Settings(**values)


def make_context(
    session_factory: sessionmaker[Session],
    adapters: AdapterRegistry,
    clock: FakeClock,
    **overrides: Any,
) -> OrchestratorContext:
    return OrchestratorContext(
        registry=ProviderRegistry(session_factory, clock=clock, rate_limits={}),
        adapters=adapters,
        cache=TieredCache(SqlCacheStore(session_factory), clock=clock),
        progress=ProgressTracker(clock=clock),
        settings=make_settings(**overrides),
        clock=clock,
        fallback=FallbackDataSource(clock),
    )


STANDINGS_RAW = {
    "standings": [
        {
            "position": 1,
            "team": {"name": "Arsenal"},
            "points": 30,
            "playedGames": 12,
            "won": 9,
            "draw": 3,
            "lost": 0,
        },
        {
            "position": 2,
            "team": {"name": "Chelsea"},
            "points": 25,
            "playedGames": 12,
            "won": 7,
            "draw": 4,
            "lost": 1,
        },
    ]
}
