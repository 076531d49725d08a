from __future__ import annotations

import typer

from sports_hub.cli.cache import app as cache_app
from sports_hub.cli.db import app as db_app
from sports_hub.cli.fetch import fetch_data_cmd, probe_cmd
from sports_hub.cli.providers import app as providers_app

app = typer.Typer(no_args_is_help=True)
app.add_typer(db_app, name="db")
app.add_typer(providers_app, name="providers")
app.add_typer(cache_app, name="cache")
app.command("fetch")(fetch_data_cmd)
app.command("probe")(probe_cmd)


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Run the HTTP API (fetch-data, progress, cache-stats)."""
    import uvicorn

    from sports_hub.api.app import create_app

    uvicorn.run(create_app(), host=host, port=port)
