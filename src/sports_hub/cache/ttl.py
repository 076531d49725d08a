from __future__ import annotations

from datetime import timedelta

# Short for live data, hour-scale for historical/derived data, day-scale for
# reference data.
CATEGORY_TTLS: dict[str, timedelta] = {
    "live_scores": timedelta(seconds=30),
    "fixtures": timedelta(minutes=5),
    "results": timedelta(hours=1),
    "standings": timedelta(minutes=30),
    "teams": timedelta(hours=24),
    "leagues": timedelta(hours=24),
    "players": timedelta(hours=12),
}

DEFAULT_TTL = timedelta(minutes=30)


def ttl_for(data_type: str) -> timedelta:
    return CATEGORY_TTLS.get(str(data_type), DEFAULT_TTL)
