"""Data access helpers over the download tables."""

from .catalog_repo import CatalogRepository
from .download_stats_repo import DownloadCounterRepository, DownloadLogRepository

__all__ = ["CatalogRepository", "DownloadCounterRepository", "DownloadLogRepository"]
