from __future__ import annotations

import typer

from sports_hub.cli.common import db_engine
from sports_hub.db import create_schema

app = typer.Typer(help="Local database helpers.")


@app.command("init")
def init_db() -> None:
    """Create the provider, cache and usage-ledger tables (use alembic in production)."""
    engine = db_engine()
    create_schema(engine)
    typer.echo(f"Initialized schema on {engine.url.render_as_string(hide_password=True)}")
