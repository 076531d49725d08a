from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from sports_hub.db.base import Base, JsonColumn


class SportsCacheEntry(Base):
    __tablename__ = "sports_cache"

    id: Mapped[int] = mapped_column(primary_key=True)

    cache_key: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    data_type: Mapped[str] = mapped_column(String(32), nullable=False)
    params_json: Mapped[dict[str, Any]] = mapped_column(JsonColumn, nullable=False)
    payload_json: Mapped[dict[str, Any]] = mapped_column(JsonColumn, nullable=False)
    source_provider: Mapped[str] = mapped_column(String(64), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_sports_cache_expires_at", "expires_at"),)
