from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import TypeVar

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from sports_hub.core.config import settings
from sports_hub.core.log_setup import configure_logging
from sports_hub.db import DatabaseConfig, create_db_engine, create_session_factory
from sports_hub.orchestrator import FetchOrchestrator, OrchestratorContext

T = TypeVar("T")


@lru_cache(maxsize=1)
def db_engine() -> Engine:
    return create_db_engine(
        DatabaseConfig(database_url=settings.database_url, echo=settings.db_echo)
    )


@lru_cache(maxsize=1)
def session_factory() -> sessionmaker[Session]:
    return create_session_factory(db_engine())


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Context-managed DB session for CLI commands.
    Ensures proper close and rolls back on exception.
    """
    session = session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def run_with_orchestrator(fn: Callable[[FetchOrchestrator], Awaitable[T]]) -> T:
    """Build a one-shot orchestrator, run `fn` on a fresh event loop, then drain."""
    configure_logging(settings.log_level)
    context = OrchestratorContext.from_settings(settings, session_factory=session_factory())

    async def _main() -> T:
        orchestrator = FetchOrchestrator(context)
        try:
            return await fn(orchestrator)
        finally:
            await orchestrator.aclose()

    return asyncio.run(_main())
