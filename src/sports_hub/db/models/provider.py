from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sports_hub.db.base import Base, CreatedAtMixin


class SportsProvider(Base, CreatedAtMixin):
    """Configured external data source. Rows are maintained by admins, not by this service."""

    __tablename__ = "sports_providers"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    kind: Mapped[str] = mapped_column(String(64), nullable=False)  # ProviderKindEnum value
    base_url: Mapped[str] = mapped_column(String(255), nullable=False)
    credential: Mapped[str | None] = mapped_column(Text, nullable=True)

    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    daily_quota_used: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    daily_quota_limit: Mapped[int] = mapped_column(
        Integer, nullable=False, default=100, server_default="100"
    )
    last_called_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default="true"
    )

    __table_args__ = (Index("ix_sports_providers_active_priority", "is_active", "priority"),)
