"""Create provider, cache and usage ledger tables

Revision ID: 1a7e3c5d9b20
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "1a7e3c5d9b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "sports_providers",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("kind", sa.String(length=64), nullable=False),
        sa.Column("base_url", sa.String(length=255), nullable=False),
        sa.Column("credential", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("daily_quota_used", sa.Integer(), server_default="0", nullable=False),
        sa.Column("daily_quota_limit", sa.Integer(), server_default="100", nullable=False),
        sa.Column("last_called_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(
        "ix_sports_providers_active_priority",
        "sports_providers",
        ["is_active", "priority"],
        unique=False,
    )

    op.create_table(
        "sports_cache",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("cache_key", sa.String(length=512), nullable=False),
        sa.Column("data_type", sa.String(length=32), nullable=False),
        sa.Column("params_json", json_type, nullable=False),
        sa.Column("payload_json", json_type, nullable=False),
        sa.Column("source_provider", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cache_key"),
    )
    op.create_index(
        "ix_sports_cache_expires_at",
        "sports_cache",
        ["expires_at"],
        unique=False,
    )

    op.create_table(
        "api_usage_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("provider_name", sa.String(length=64), nullable=False),
        sa.Column("success", sa.Boolean(), nullable=False),
        sa.Column("response_time_ms", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_api_usage_log_provider_created",
        "api_usage_log",
        ["provider_name", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_api_usage_log_provider_created", table_name="api_usage_log")
    op.drop_table("api_usage_log")
    op.drop_index("ix_sports_cache_expires_at", table_name="sports_cache")
    op.drop_table("sports_cache")
    op.drop_index("ix_sports_providers_active_priority", table_name="sports_providers")
    op.drop_table("sports_providers")
