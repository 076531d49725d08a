from __future__ import annotations

import typer

from sports_hub.cli.common import session_scope
from sports_hub.core.config import settings
from sports_hub.db.enums import ProviderKindEnum
from sports_hub.db.models.provider import SportsProvider
from sports_hub.db.repos.provider_repo import ProviderRepository
from sports_hub.ingestion.providers.api_football.adapter import API_FOOTBALL_BASE_URL
from sports_hub.ingestion.providers.apifootball.adapter import APIFOOTBALL_BASE_URL
from sports_hub.ingestion.providers.defaults import build_default_adapter_registry
from sports_hub.ingestion.providers.football_data.adapter import FOOTBALL_DATA_BASE_URL
from sports_hub.ingestion.providers.soccersapi.adapter import SOCCERSAPI_BASE_URL

app = typer.Typer(help="Manage configured sports data providers.")

# name, kind, base url, priority, daily limit (free plans)
providers_to_seed: list[tuple[str, ProviderKindEnum, str, int, int]] = [
    ("football-data-org", ProviderKindEnum.FOOTBALL_DATA_ORG, FOOTBALL_DATA_BASE_URL, 1, 14400),
    ("api-football", ProviderKindEnum.API_FOOTBALL, API_FOOTBALL_BASE_URL, 2, 100),
    ("apifootball", ProviderKindEnum.APIFOOTBALL, APIFOOTBALL_BASE_URL, 3, 1000),
    ("soccersapi", ProviderKindEnum.SOCCERSAPI, SOCCERSAPI_BASE_URL, 4, 2400),
]


@app.command("seed")
def seed_providers() -> None:
    """Upsert the known providers. Credentials are left untouched."""
    created = updated = 0
    with session_scope() as session:
        repo = ProviderRepository(session)
        for name, kind, base_url, priority, limit in providers_to_seed:
            existing = repo.first_where(SportsProvider.name == name)
            if existing is None:
                repo.add(
                    SportsProvider(
                        name=name,
                        kind=kind.value,
                        base_url=base_url,
                        priority=priority,
                        daily_quota_limit=limit,
                    ),
                    flush=False,
                )
                created += 1
            else:
                repo.patch(
                    existing,
                    {"kind": kind.value, "base_url": base_url, "daily_quota_limit": limit},
                    flush=False,
                )
                updated += 1

    typer.echo(f"Seeded providers: created={created} updated={updated}")


@app.command("set-key")
def set_key(
    name: str = typer.Argument(..., help="Provider name, e.g. football-data-org."),
    key: str = typer.Option(..., "--key", prompt=True, hide_input=True),
) -> None:
    with session_scope() as session:
        provider = ProviderRepository(session).first_where(SportsProvider.name == name)
        if provider is None:
            typer.echo(f"Unknown provider: {name}", err=True)
            raise typer.Exit(code=1)
        provider.credential = key
    typer.echo(f"Stored credential for {name}")


@app.command("list")
def list_providers() -> None:
    """Configured providers, and whether this build has an adapter for each kind."""
    kinds = build_default_adapter_registry(settings).kinds()
    with session_scope() as session:
        rows = ProviderRepository(session).list_where(order_by=SportsProvider.priority.asc())
        for p in rows:
            typer.echo(
                " ".join(
                    [
                        f"{p.priority:>3}",
                        f"{p.name:<20}",
                        f"kind={p.kind}",
                        f"active={p.is_active}",
                        f"quota={p.daily_quota_used}/{p.daily_quota_limit}",
                        f"key={'yes' if p.credential else 'no'}",
                        f"adapter={'yes' if p.kind in kinds else 'no'}",
                    ]
                )
            )
    typer.echo(f"Adapter kinds: {', '.join(kinds)}")
