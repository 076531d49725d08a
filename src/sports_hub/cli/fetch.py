from __future__ import annotations

import json

import typer

from sports_hub.cli.common import run_with_orchestrator
from sports_hub.db.enums import DataTypeEnum
from sports_hub.orchestrator import FetchOrchestrator


def fetch_data_cmd(
    data_type: DataTypeEnum = typer.Argument(..., help="fixtures, results, standings or teams."),
    league: str | None = typer.Option(None, "--league", help="League slug (e.g. premier-league)."),
    region: str | None = typer.Option(None, "--region", help="Region key (default: global)."),
    show_progress: bool = typer.Option(
        False, "--show-progress/--no-show-progress", help="Print per-provider results."
    ),
) -> None:
    """Fetch one payload (cache, providers, then fallback) and print it as JSON."""

    async def _fetch(orchestrator: FetchOrchestrator) -> dict:
        result = await orchestrator.request_data(data_type, league=league, region=region)
        body = result.as_response()
        if show_progress and result.session_id is not None:
            snapshot = orchestrator.ctx.progress.get(result.session_id)
            if snapshot is not None:
                body["progress"] = snapshot.as_dict()
        return body

    typer.echo(json.dumps(run_with_orchestrator(_fetch), indent=2))


def probe_cmd(
    data_type: DataTypeEnum = typer.Argument(DataTypeEnum.STANDINGS, help="Data type to request."),
) -> None:
    """Call every active provider once and report status and latency."""

    async def _probe(orchestrator: FetchOrchestrator):
        report = await orchestrator.probe_providers(data_type)
        return report.outcomes, orchestrator.ctx.progress.get(report.session_id)

    outcomes, snapshot = run_with_orchestrator(_probe)
    if not outcomes:
        typer.echo("No active providers configured.")
        return
    for o in outcomes:
        line = f"{o.provider.name:<20} {o.status.value:<8} {o.duration_ms:>6}ms"
        if o.error:
            line += f"  {o.error}"
        typer.echo(line)
    ok = sum(1 for o in outcomes if o.valid)
    summary = f"{ok}/{len(outcomes)} providers returned valid {data_type.value} data"
    if snapshot is not None:
        summary += f" in {snapshot.elapsed_s:.2f}s ({snapshot.session_id})"
    typer.echo(summary)
