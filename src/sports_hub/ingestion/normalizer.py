from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sports_hub.db.enums import DataTypeEnum
from sports_hub.ingestion.canonical import (
    RAW_KEYS,
    CanonicalRecord,
    Fixture,
    Payload,
    Result,
    StandingRow,
    TeamInfo,
    canonical_payload,
    is_canonical,
)
from sports_hub.ingestion.dates import iso_z, kickoff_time, parse_match_datetime

MAX_MATCHES = 10
MAX_TABLE_ROWS = 10
MAX_TEAMS = 20

# Field aliases per canonical field, first non-empty wins. Covers
# football-data.org (camelCase), API-Football (nested) and apifootball.com
# (match_*/overall_league_*) shapes, plus already-flat payloads.
HOME_TEAM = ("homeTeam.name", "teams.home.name", "match_hometeam_name", "team_home", "home_team")
AWAY_TEAM = ("awayTeam.name", "teams.away.name", "match_awayteam_name", "team_away", "away_team")
HOME_SCORE = (
    "score.fullTime.home",
    "goals.home",
    "match_hometeam_score",
    "team_home_score",
    "home_score",
)
AWAY_SCORE = (
    "score.fullTime.away",
    "goals.away",
    "match_awayteam_score",
    "team_away_score",
    "away_score",
)
KICKOFF = ("utcDate", "fixture.date", "match_date", "date")
COMPETITION = ("competition.name", "league.name", "league_name", "competition")

POSITION = ("position", "rank", "overall_league_position")
TEAM = ("team.name", "team_name", "team")
POINTS = ("points", "overall_league_PTS", "overall_league_pts")
PLAYED = ("playedGames", "all.played", "overall_league_payed", "played")
WINS = ("won", "all.win", "overall_league_W", "wins")
DRAWS = ("draw", "all.draw", "overall_league_D", "draws")
LOSSES = ("lost", "all.lose", "overall_league_L", "losses")

TEAM_NAME = ("name", "team_name")
SHORT_NAME = ("shortName", "tla", "code", "team_short_code", "short_name")
LOGO = ("crest", "logo", "team_badge", "team_logo")
FOUNDED = ("founded", "team_founded")
VENUE = ("venue.venue_name", "venue.name", "venue_name", "venue")


def _walk(item: Any, path: str) -> Any:
    value = item
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _pick(item: dict[str, Any], paths: Sequence[str]) -> Any:
    for path in paths:
        value = _walk(item, path)
        if value not in (None, ""):
            return value
    return None


def _str(item: dict[str, Any], paths: Sequence[str]) -> str:
    for path in paths:
        value = _walk(item, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def _int_or_none(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _int(item: dict[str, Any], paths: Sequence[str]) -> int:
    value = _int_or_none(_pick(item, paths))
    return 0 if value is None else value


def _kickoff(item: dict[str, Any]) -> tuple[str, str]:
    raw = _pick(item, KICKOFF)
    dt = parse_match_datetime(raw, time_value=item.get("match_time"))
    if dt is None:
        return (raw if isinstance(raw, str) else ""), ""
    return iso_z(dt), kickoff_time(dt)


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


class DataNormalizer:
    """Maps any provider's raw envelope onto the canonical payload for a data type."""

    def has_valid_data(self, raw: Any, data_type: DataTypeEnum) -> bool:
        """
        Usable only when the list for the type is present and non-empty.
        An empty list is a soft failure: the orchestrator moves on instead of
        adopting a degenerate payload.
        """
        if not isinstance(raw, dict):
            return False
        items = raw.get(RAW_KEYS[data_type])
        return isinstance(items, list) and len(items) > 0

    def normalize(
        self,
        raw: Any,
        data_type: DataTypeEnum,
        *,
        league: str | None = None,
        region: str | None = None,
        generated_at: datetime | None = None,
    ) -> Payload:
        if is_canonical(raw) and raw.get("type") == data_type.value:
            return raw

        source = raw if isinstance(raw, dict) else {}
        items = _dicts(source.get(RAW_KEYS[data_type]))

        records: list[CanonicalRecord]
        match data_type:
            case DataTypeEnum.FIXTURES:
                records = [self._fixture(i) for i in items[:MAX_MATCHES]]
            case DataTypeEnum.RESULTS:
                records = [self._result(i) for i in items[:MAX_MATCHES]]
            case DataTypeEnum.STANDINGS:
                records = [self._standing(i) for i in self._table_rows(items)[:MAX_TABLE_ROWS]]
            case DataTypeEnum.TEAMS:
                records = [self._team(i) for i in items[:MAX_TEAMS]]

        return canonical_payload(
            data_type,
            records,
            league=league,
            region=region,
            generated_at=generated_at or datetime.now(UTC),
        )

    @staticmethod
    def _table_rows(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        # football-data.org groups rows: [{"type": "TOTAL", "table": [...]}, ...]
        if items and "table" in items[0]:
            return _dicts(items[0].get("table"))
        return items

    @staticmethod
    def _fixture(item: dict[str, Any]) -> Fixture:
        date, time = _kickoff(item)
        return Fixture(
            home_team=_str(item, HOME_TEAM),
            away_team=_str(item, AWAY_TEAM),
            date=date,
            time=time,
            competition=_str(item, COMPETITION),
        )

    @staticmethod
    def _result(item: dict[str, Any]) -> Result:
        date, _ = _kickoff(item)
        return Result(
            home_team=_str(item, HOME_TEAM),
            away_team=_str(item, AWAY_TEAM),
            home_score=_int_or_none(_pick(item, HOME_SCORE)),
            away_score=_int_or_none(_pick(item, AWAY_SCORE)),
            date=date,
            competition=_str(item, COMPETITION),
        )

    @staticmethod
    def _standing(item: dict[str, Any]) -> StandingRow:
        return StandingRow(
            position=_int(item, POSITION),
            team=_str(item, TEAM),
            points=_int(item, POINTS),
            played=_int(item, PLAYED),
            wins=_int(item, WINS),
            draws=_int(item, DRAWS),
            losses=_int(item, LOSSES),
        )

    @staticmethod
    def _team(item: dict[str, Any]) -> TeamInfo:
        return TeamInfo(
            name=_str(item, TEAM_NAME),
            short_name=_str(item, SHORT_NAME),
            logo=_str(item, LOGO),
            founded=_int_or_none(_pick(item, FOUNDED)),
            venue=_str(item, VENUE),
        )
