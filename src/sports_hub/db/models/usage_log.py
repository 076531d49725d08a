from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sports_hub.db.base import Base


class ApiUsageLog(Base):
    """Append-only ledger of provider calls; feeds sliding-window rate limits."""

    __tablename__ = "api_usage_log"

    id: Mapped[int] = mapped_column(primary_key=True)

    provider_name: Mapped[str] = mapped_column(String(64), nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    response_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_api_usage_log_provider_created", "provider_name", "created_at"),)
