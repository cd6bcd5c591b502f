"""Aggregate download counter."""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from download_gate.db.session import Base
from download_gate.db.time import utcnow


class DownloadStats(Base):
    """Public download total.

    Only the oldest row (by ``created_at``) is meaningful; it is created on
    the first recorded download.
    """

    __tablename__ = "download_stats"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    total_downloads: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
