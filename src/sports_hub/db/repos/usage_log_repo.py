from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from sports_hub.db.models.usage_log import ApiUsageLog
from sports_hub.db.repos.base import BaseRepository


class UsageLogRepository(BaseRepository[ApiUsageLog]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=ApiUsageLog)

    def append(
        self, *, provider_name: str, success: bool, response_time_ms: int, created_at: datetime
    ) -> ApiUsageLog:
        return self.add(
            ApiUsageLog(
                provider_name=provider_name,
                success=success,
                response_time_ms=response_time_ms,
                created_at=created_at,
            ),
            flush=False,
        )

    def count_since(self, provider_name: str, *, since: datetime) -> int:
        return self.count_where(
            ApiUsageLog.provider_name == provider_name,
            ApiUsageLog.created_at >= since,
        )
