from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from sports_hub.db.enums import DataTypeEnum
from sports_hub.ingestion.dates import iso_z

Payload = dict[str, Any]


@dataclass(frozen=True)
class Fixture:
    home_team: str
    away_team: str
    date: str
    time: str
    competition: str


@dataclass(frozen=True)
class Result:
    home_team: str
    away_team: str
    home_score: int | None
    away_score: int | None
    date: str
    competition: str


@dataclass(frozen=True)
class StandingRow:
    position: int
    team: str
    points: int
    played: int
    wins: int
    draws: int
    losses: int


@dataclass(frozen=True)
class TeamInfo:
    name: str
    short_name: str
    logo: str
    founded: int | None
    venue: str


CanonicalRecord = Fixture | Result | StandingRow | TeamInfo

# List key inside `content` of a canonical payload.
CONTENT_KEYS: dict[DataTypeEnum, str] = {
    DataTypeEnum.FIXTURES: "upcoming_matches",
    DataTypeEnum.RESULTS: "recent_results",
    DataTypeEnum.STANDINGS: "table",
    DataTypeEnum.TEAMS: "teams",
}

# List key a raw provider envelope must carry to be usable.
RAW_KEYS: dict[DataTypeEnum, str] = {
    DataTypeEnum.FIXTURES: "matches",
    DataTypeEnum.RESULTS: "matches",
    DataTypeEnum.STANDINGS: "standings",
    DataTypeEnum.TEAMS: "teams",
}

RECORD_TYPES: dict[DataTypeEnum, type[CanonicalRecord]] = {
    DataTypeEnum.FIXTURES: Fixture,
    DataTypeEnum.RESULTS: Result,
    DataTypeEnum.STANDINGS: StandingRow,
    DataTypeEnum.TEAMS: TeamInfo,
}


def canonical_payload(
    data_type: DataTypeEnum,
    records: list[CanonicalRecord],
    *,
    league: str | None,
    region: str | None,
    generated_at: datetime,
) -> Payload:
    return {
        "type": data_type.value,
        "league": league or "all",
        "region": region or "international",
        "generated_at": iso_z(generated_at),
        "content": {CONTENT_KEYS[data_type]: [asdict(r) for r in records]},
    }


def is_canonical(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    return "type" in payload and isinstance(payload.get("content"), dict)


def content_items(payload: Payload) -> list[dict[str, Any]]:
    """The record list of a canonical payload, whatever its type."""
    data_type = DataTypeEnum(payload["type"])
    return list(payload["content"].get(CONTENT_KEYS[data_type], []))
