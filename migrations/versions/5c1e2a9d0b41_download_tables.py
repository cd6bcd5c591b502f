"""download tables

Revision ID: 5c1e2a9d0b41
Revises:
Create Date: 2026-10-18 09:12:44.318204

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5c1e2a9d0b41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create catalog, counter, and log tables."""
    op.create_table(
        "download_versions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("version", sa.Text(), nullable=False),
        sa.Column("file_name", sa.Text(), nullable=False),
        sa.Column("architecture", sa.String(length=16), nullable=False),
        sa.Column("download_url", sa.Text(), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "architecture IN ('32-bit', '64-bit')",
            name="ck_download_versions_architecture",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "download_stats",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("total_downloads", sa.BigInteger(), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "download_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ip_hash", sa.String(length=64), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=False),
        sa.Column("downloaded_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_download_logs_downloaded_at", "download_logs", ["downloaded_at"], unique=False
    )


def downgrade() -> None:
    """Drop the download tables."""
    op.drop_index("ix_download_logs_downloaded_at", table_name="download_logs")
    op.drop_table("download_logs")
    op.drop_table("download_stats")
    op.drop_table("download_versions")
