"""Catalog of downloadable builds.

Rows are maintained by the admin tooling; this service only reads them.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from download_gate.db.session import Base
from download_gate.db.time import utcnow

ARCHITECTURES = ("32-bit", "64-bit")


class DownloadVersion(Base):
    """One downloadable file of a released version."""

    __tablename__ = "download_versions"
    __table_args__ = (
        CheckConstraint(
            "architecture IN ('32-bit', '64-bit')",
            name="ck_download_versions_architecture",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    version: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    architecture: Mapped[str] = mapped_column(String(16), nullable=False, default="64-bit")
    download_url: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
