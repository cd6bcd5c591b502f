"""Data access helpers for the download counter and log."""
from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from download_gate.db.time import utc_day, utcnow
from download_gate.models import DownloadLog, DownloadStats

__all__ = ["DownloadCounterRepository", "DownloadLogRepository"]


class DownloadCounterRepository:
    """SQL-backed download counter.

    The increment is a single ``UPDATE ... SET total = total + 1`` so
    concurrent requests cannot overwrite each other's increments.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _current(self) -> DownloadStats | None:
        stmt = select(DownloadStats).order_by(DownloadStats.created_at.asc()).limit(1)
        return self.session.execute(stmt).scalars().first()

    def _total_of(self, stats_id: str) -> int:
        stmt = select(DownloadStats.total_downloads).where(DownloadStats.id == stats_id)
        return int(self.session.execute(stmt).scalar_one() or 0)

    def _get_or_create(self) -> DownloadStats:
        stats = self._current()
        if stats is None:
            stats = DownloadStats(total_downloads=0)
            self.session.add(stats)
            self.session.flush()
        return stats

    def read(self) -> int:
        """Return the current total without creating the counter row."""
        stats = self._current()
        return self._total_of(stats.id) if stats is not None else 0

    def increment(self) -> int:
        """Add one download and return the new total."""
        stats = self._get_or_create()
        self.session.execute(
            update(DownloadStats)
            .where(DownloadStats.id == stats.id)
            .values(
                total_downloads=DownloadStats.total_downloads + 1,
                last_updated=utcnow(),
            )
        )
        total = self._total_of(stats.id)
        self.session.commit()
        return total


class DownloadLogRepository:
    """Append-only access to the anonymized download log."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, *, ip_hash: str, user_agent: str, downloaded_at: datetime) -> None:
        try:
            self.session.add(
                DownloadLog(ip_hash=ip_hash, user_agent=user_agent, downloaded_at=downloaded_at)
            )
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def daily_counts(self, days: int, *, today: date | None = None) -> list[tuple[date, int]]:
        """Return per-day download counts for the last ``days`` UTC days, oldest first."""
        end = today or utcnow().date()
        start = end - timedelta(days=days - 1)
        buckets: dict[date, int] = {start + timedelta(days=offset): 0 for offset in range(days)}

        since = datetime(start.year, start.month, start.day, tzinfo=UTC)
        day = utc_day(DownloadLog.downloaded_at)
        stmt = (
            select(day, func.count(DownloadLog.id))
            .where(DownloadLog.downloaded_at >= since)
            .group_by(day)
        )
        for bucket, count in self.session.execute(stmt):
            if isinstance(bucket, str):
                bucket = date.fromisoformat(bucket)
            if bucket in buckets:
                buckets[bucket] = int(count)
        return sorted(buckets.items())
