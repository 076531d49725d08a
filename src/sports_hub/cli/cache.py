from __future__ import annotations

import typer

from sports_hub.cache.store import SqlCacheStore
from sports_hub.cache.tiered import TieredCache
from sports_hub.cli.common import session_factory
from sports_hub.core.config import settings
from sports_hub.core.log_setup import configure_logging

app = typer.Typer(help="Inspect and maintain the sports data cache.")


def _cache() -> TieredCache:
    configure_logging(settings.log_level)
    return TieredCache(SqlCacheStore(session_factory()))


@app.command("sweep")
def sweep_cmd() -> None:
    """Delete expired entries from the persistent tier."""
    removed = _cache().sweep()
    typer.echo(f"Removed {removed} expired cache entries")


@app.command("stats")
def stats_cmd() -> None:
    for name, value in _cache().stats().as_dict().items():
        typer.echo(f"{name}={value}")
