from __future__ import annotations

import logging
from datetime import UTC, datetime, time, timedelta

from sports_hub.core.clock import Clock, SystemClock
from sports_hub.db.enums import DataTypeEnum
from sports_hub.ingestion.canonical import (
    CanonicalRecord,
    Fixture,
    Payload,
    Result,
    StandingRow,
    TeamInfo,
    canonical_payload,
)
from sports_hub.ingestion.dates import iso_z

logger = logging.getLogger(__name__)

COMPETITION = "Premier League"

# (home, away, days from today, kickoff "HH:MM")
_FIXTURES: tuple[tuple[str, str, int, str], ...] = (
    ("Arsenal", "Manchester City", 2, "16:00"),
    ("Liverpool", "Chelsea", 3, "14:30"),
    ("Manchester United", "Tottenham", 4, "17:00"),
    ("Newcastle", "Brighton", 5, "15:00"),
    ("Aston Villa", "West Ham", 6, "13:30"),
)

# (home, away, home goals, away goals, days before today)
_RESULTS: tuple[tuple[str, str, int, int, int], ...] = (
    ("Arsenal", "Liverpool", 2, 1, 1),
    ("Manchester City", "Chelsea", 3, 0, 2),
    ("Tottenham", "Newcastle", 1, 2, 3),
    ("Brighton", "Manchester United", 1, 1, 4),
    ("West Ham", "Aston Villa", 0, 2, 5),
)

_TABLE: tuple[StandingRow, ...] = (
    StandingRow(1, "Arsenal", 78, 32, 24, 6, 2),
    StandingRow(2, "Manchester City", 75, 32, 23, 6, 3),
    StandingRow(3, "Liverpool", 71, 32, 22, 5, 5),
    StandingRow(4, "Newcastle", 65, 32, 19, 8, 5),
    StandingRow(5, "Manchester United", 62, 32, 19, 5, 8),
    StandingRow(6, "Tottenham", 60, 32, 18, 6, 8),
    StandingRow(7, "Brighton", 55, 31, 16, 7, 8),
    StandingRow(8, "Aston Villa", 52, 32, 15, 7, 10),
    StandingRow(9, "West Ham", 48, 32, 14, 6, 12),
    StandingRow(10, "Chelsea", 45, 31, 12, 9, 10),
)

_TEAMS: tuple[TeamInfo, ...] = (
    TeamInfo("Arsenal", "ARS", "https://logos.pl/logo/arsenal-fc", 1886, "Emirates Stadium"),
    TeamInfo(
        "Manchester City", "MCI", "https://logos.pl/logo/manchester-city-fc", 1880, "Etihad Stadium"
    ),
    TeamInfo("Liverpool", "LIV", "https://logos.pl/logo/liverpool-fc", 1892, "Anfield"),
    TeamInfo("Chelsea", "CHE", "https://logos.pl/logo/chelsea-fc", 1905, "Stamford Bridge"),
    TeamInfo(
        "Manchester United",
        "MUN",
        "https://logos.pl/logo/manchester-united-fc",
        1878,
        "Old Trafford",
    ),
    TeamInfo(
        "Tottenham",
        "TOT",
        "https://logos.pl/logo/tottenham-hotspur-fc",
        1882,
        "Tottenham Hotspur Stadium",
    ),
    TeamInfo(
        "Newcastle", "NEW", "https://logos.pl/logo/newcastle-united-fc", 1892, "St. James' Park"
    ),
    TeamInfo(
        "Brighton",
        "BRI",
        "https://logos.pl/logo/brighton-hove-albion-fc",
        1901,
        "American Express Community Stadium",
    ),
)


class FallbackDataSource:
    """
    Static dataset served when no provider produced usable data in time.

    Records use exactly the canonical field sets and fixed list lengths, so a
    consumer cannot tell it from a live payload by structure. Dates are
    anchored to the injected clock's current day.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()

    def provide(
        self,
        data_type: DataTypeEnum | str,
        league: str | None = None,
        region: str | None = None,
    ) -> Payload:
        try:
            kind = DataTypeEnum(data_type)
        except ValueError:
            kind = DataTypeEnum.STANDINGS

        now = self._clock.now()
        logger.info("Serving fallback dataset for %s (league=%s)", kind.value, league or "all")
        return canonical_payload(
            kind, self._records(kind, now), league=league, region=region, generated_at=now
        )

    @staticmethod
    def _records(kind: DataTypeEnum, now: datetime) -> list[CanonicalRecord]:
        today = now.astimezone(UTC).date()
        match kind:
            case DataTypeEnum.FIXTURES:
                fixtures: list[CanonicalRecord] = []
                for home, away, days, kickoff in _FIXTURES:
                    hour, minute = (int(p) for p in kickoff.split(":"))
                    at = datetime.combine(today + timedelta(days=days), time(hour, minute), UTC)
                    fixtures.append(Fixture(home, away, iso_z(at), kickoff, COMPETITION))
                return fixtures
            case DataTypeEnum.RESULTS:
                results: list[CanonicalRecord] = []
                for home, away, hg, ag, days in _RESULTS:
                    at = datetime.combine(today - timedelta(days=days), time(15, 0), UTC)
                    results.append(Result(home, away, hg, ag, iso_z(at), COMPETITION))
                return results
            case DataTypeEnum.STANDINGS:
                return list(_TABLE)
            case DataTypeEnum.TEAMS:
                return list(_TEAMS)
        return list(_TABLE)
