from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any


def parse_match_datetime(value: Any, *, time_value: Any = None) -> datetime | None:
    """
    Best-effort parse of a provider kickoff value into tz-aware UTC.

    Supports:
      - ISO string: "2025-09-07T20:20:00Z" / "+00:00"
      - Date string plus separate time (apifootball): "2025-09-07", "20:20"
      - Unix timestamp (int)
    Returns None instead of raising on anything else.
    """
    if value in (None, ""):
        return None

    if isinstance(value, int) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=UTC)

    if not isinstance(value, str):
        return None

    v = value.strip()
    if len(v) == 10 and isinstance(time_value, str) and time_value.strip():
        v = f"{v}T{time_value.strip()}"
    try:
        dt = datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_z(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    dt = dt.astimezone(UTC).replace(microsecond=0)
    return dt.isoformat().replace("+00:00", "Z")


def kickoff_time(dt: datetime | None) -> str:
    return dt.strftime("%H:%M") if dt is not None else ""


def current_season(today: date) -> int:
    """European seasons start in summer: Oct 2025 -> 2025, Mar 2026 -> 2025."""
    return today.year if today.month >= 7 else today.year - 1


def date_window(today: date, *, days: int) -> tuple[str, str]:
    """(from, to) ISO dates; negative days look back."""
    other = today + timedelta(days=days)
    start, end = sorted((today, other))
    return start.isoformat(), end.isoformat()
