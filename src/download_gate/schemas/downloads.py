"""Telemetry endpoint schemas."""
from __future__ import annotations

from pydantic import BaseModel, Field


class DownloadCountResponse(BaseModel):
    success: bool = True
    downloads: int = Field(..., ge=0)


class DailyDownloads(BaseModel):
    date: str = Field(..., description="UTC day, ISO formatted")
    count: int = Field(..., ge=0)


class DailyDownloadsResponse(BaseModel):
    success: bool = True
    total: int = Field(..., ge=0)
    days: list[DailyDownloads]
