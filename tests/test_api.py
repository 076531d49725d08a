from __future__ import annotations

from conftest import STANDINGS_RAW, ScriptedAdapters, add_provider, make_context, respond
from fastapi.testclient import TestClient

from sports_hub.api.app import create_app


def _client(session_factory, clock, behaviours=None) -> TestClient:
    scripted = ScriptedAdapters(behaviours or {})
    context = make_context(session_factory, scripted.registry(), clock)
    return TestClient(create_app(context, run_sweeper=False))


def test_fetch_data_requires_a_known_type(session_factory, clock) -> None:
    with _client(session_factory, clock) as client:
        missing = client.get("/sports/fetch-data")
        unknown = client.get("/sports/fetch-data", params={"type": "odds"})

    assert missing.status_code == 400
    assert "Data type is required" in missing.json()["error"]
    assert unknown.status_code == 400
    assert "odds" in unknown.json()["error"]


def test_fetch_data_then_poll_progress(session_factory, clock) -> None:
    add_provider(session_factory, "football-data-org")
    behaviours = {"football-data-org": respond(STANDINGS_RAW)}

    with _client(session_factory, clock, behaviours) as client:
        resp = client.get(
            "/sports/fetch-data", params={"type": "standings", "league": "premier-league"}
        )
        body = resp.json()
        progress = client.get("/sports/progress", params={"session": body["session_id"]})

    assert resp.status_code == 200
    assert body["success"] is True
    assert body["source"] == "football-data-org"
    assert body["data"]["content"]["table"][0]["team"] == "Arsenal"
    assert body["cached_at"] == "2026-03-14T12:00:00Z"
    assert "progress" not in body or body["progress"] is None

    assert progress.status_code == 200
    report = progress.json()["progress"]
    assert report["state"] == "completed"
    assert report["percentage"] == 100
    assert report["api_results"][0]["name"] == "football-data-org"
    assert report["api_results"][0]["status"] == "success"


def test_fetch_data_can_inline_progress(session_factory, clock) -> None:
    with _client(session_factory, clock) as client:
        body = client.get(
            "/sports/fetch-data", params={"type": "teams", "progress": "true"}
        ).json()

    assert body["source"] == "fallback"
    assert body["progress"]["state"] == "completed"
    assert len(body["data"]["content"]["teams"]) == 8


def test_second_fetch_is_served_from_cache(session_factory, clock) -> None:
    with _client(session_factory, clock) as client:
        client.get("/sports/fetch-data", params={"type": "results"})
        body = client.get("/sports/fetch-data", params={"type": "results"}).json()
        stats = client.get("/sports/cache-stats").json()

    assert body["source"] == "cache_fallback"
    assert body["session_id"] is None
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["memory_entries"] == 1
    assert stats["database_entries"] == 1


def test_progress_errors(session_factory, clock) -> None:
    with _client(session_factory, clock) as client:
        missing = client.get("/sports/progress")
        unknown = client.get("/sports/progress", params={"session": "session_1_abc"})

    assert missing.status_code == 400
    assert missing.json() == {"error": "Session ID is required"}
    assert unknown.status_code == 404
    assert unknown.json() == {"error": "Session not found"}


def test_unexpected_failure_is_a_500(session_factory, clock, monkeypatch) -> None:
    client = _client(session_factory, clock)
    orchestrator = client.app.state.orchestrator  # type: ignore[attr-defined]

    async def boom(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(orchestrator, "request_data", boom)

    with client:
        resp = client.get("/sports/fetch-data", params={"type": "fixtures"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
