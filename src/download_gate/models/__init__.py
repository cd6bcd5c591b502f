"""SQLAlchemy models for the download gate."""

from .download_log import DownloadLog
from .download_stats import DownloadStats
from .download_version import ARCHITECTURES, DownloadVersion

__all__ = [
    "ARCHITECTURES",
    "DownloadLog",
    "DownloadStats",
    "DownloadVersion",
]
