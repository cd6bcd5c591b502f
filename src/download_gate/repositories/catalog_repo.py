"""Data access helpers for the download catalog."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from download_gate.models import DownloadVersion

__all__ = ["CatalogRepository"]


class CatalogRepository:
    """Read-only view of the catalog rows maintained by the admin tooling."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_active(self) -> list[DownloadVersion]:
        """Return active rows ordered by ``sort_order`` then most recently updated."""
        stmt = (
            select(DownloadVersion)
            .where(DownloadVersion.is_active.is_(True))
            .order_by(DownloadVersion.sort_order.asc(), DownloadVersion.updated_at.desc())
        )
        return list(self.session.execute(stmt).scalars())
