from __future__ import annotations

from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from sports_hub.db.models.provider import SportsProvider
from sports_hub.db.repos.base import BaseRepository


class ProviderRepository(BaseRepository[SportsProvider]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=SportsProvider)

    def list_active(self) -> list[SportsProvider]:
        return self.list_where(
            SportsProvider.is_active.is_(True),
            order_by=SportsProvider.priority.asc(),
        )

    def increment_usage(self, provider_id: int, *, called_at: datetime) -> None:
        # Relative increment; concurrent writers never lose a count.
        self.session.execute(
            update(SportsProvider)
            .where(SportsProvider.id == provider_id)
            .values(
                daily_quota_used=SportsProvider.daily_quota_used + 1,
                last_called_at=called_at,
            )
        )
