from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from conftest import add_provider
from sqlalchemy.orm import Session
from typer.testing import CliRunner

from sports_hub.cli import providers as providers_cli
from sports_hub.cli.app import app


def test_cli_help_smoke() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    # Basic sanity checks that top-level commands are registered.
    for command in ("fetch", "probe", "providers", "cache", "serve"):
        assert command in result.stdout


def test_providers_help_lists_seed() -> None:
    result = CliRunner().invoke(app, ["providers", "--help"])
    assert result.exit_code == 0
    assert "seed" in result.stdout


def test_providers_list_marks_kinds_without_an_adapter(session_factory, monkeypatch) -> None:
    add_provider(session_factory, "football-data-org", kind="football-data-org")
    add_provider(session_factory, "legacy-feed", kind="legacy", priority=2)

    @contextmanager
    def scope() -> Iterator[Session]:
        with session_factory() as session, session.begin():
            yield session

    monkeypatch.setattr(providers_cli, "session_scope", scope)
    result = CliRunner().invoke(app, ["providers", "list"])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert "adapter=yes" in next(line for line in lines if "football-data-org " in line)
    assert "adapter=no" in next(line for line in lines if "legacy-feed" in line)
    assert lines[-1] == (
        "Adapter kinds: api-football, apifootball, football-data-org, soccersapi"
    )
