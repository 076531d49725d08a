from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from sports_hub.db.base import Base


@dataclass(frozen=True)
class DatabaseConfig:
    database_url: str
    echo: bool = False


def _is_sqlite_memory(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/").endswith(":"))


def create_db_engine(cfg: DatabaseConfig) -> Engine:
    kwargs: dict[str, Any] = {"echo": cfg.echo}
    if _is_sqlite_memory(cfg.database_url):
        # One shared connection, otherwise every session sees an empty database.
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(cfg.database_url, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create all tables directly (tests, `db init`); alembic owns real deployments."""
    import sports_hub.db.models  # noqa: F401

    Base.metadata.create_all(engine)
