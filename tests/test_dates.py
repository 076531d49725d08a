from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from sports_hub.ingestion.dates import current_season, date_window, iso_z, parse_match_datetime


@pytest.mark.parametrize(
    ("value", "time_value", "expected"),
    [
        ("2025-09-07T20:20:00Z", None, datetime(2025, 9, 7, 20, 20, tzinfo=UTC)),
        ("2025-09-07T22:20:00+02:00", None, datetime(2025, 9, 7, 20, 20, tzinfo=UTC)),
        ("2025-09-07", "20:20", datetime(2025, 9, 7, 20, 20, tzinfo=UTC)),
        (1757276400, None, datetime(2025, 9, 7, 20, 20, tzinfo=UTC)),
        ("not a date", None, None),
        ("", None, None),
        (None, None, None),
    ],
)
def test_parse_match_datetime(value, time_value, expected) -> None:
    assert parse_match_datetime(value, time_value=time_value) == expected


def test_iso_z_drops_microseconds() -> None:
    assert iso_z(datetime(2026, 1, 2, 3, 4, 5, 678, tzinfo=UTC)) == "2026-01-02T03:04:05Z"


def test_current_season_turns_over_in_july() -> None:
    assert current_season(date(2026, 6, 30)) == 2025
    assert current_season(date(2026, 7, 1)) == 2026


def test_date_window_orders_bounds() -> None:
    assert date_window(date(2026, 3, 14), days=7) == ("2026-03-14", "2026-03-21")
    assert date_window(date(2026, 3, 14), days=-7) == ("2026-03-07", "2026-03-14")
