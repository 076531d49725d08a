from sports_hub.db.models.cache_entry import SportsCacheEntry
from sports_hub.db.models.provider import SportsProvider
from sports_hub.db.models.usage_log import ApiUsageLog

__all__ = [
    "ApiUsageLog",
    "SportsCacheEntry",
    "SportsProvider",
]
