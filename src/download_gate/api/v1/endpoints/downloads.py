"""Public download counter endpoints.

No authentication: the counter is intentionally public and the log only
ever sees a one-way hash of the caller address.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Request, Response
from sqlalchemy.orm import Session

from download_gate.api.v1.dependencies import StoreSessionsDep, TelemetryConfigDep, run_store_call
from download_gate.core.settings import GateConfig
from download_gate.repositories.download_stats_repo import (
    DownloadCounterRepository,
    DownloadLogRepository,
)
from download_gate.schemas.downloads import (
    DailyDownloads,
    DailyDownloadsResponse,
    DownloadCountResponse,
)
from download_gate.services.telemetry import TelemetryRecorder, client_ip_from_headers, daily_series

router = APIRouter(prefix="/downloads", tags=["downloads", "telemetry"])

MAX_DAILY_WINDOW = 366


def build_recorder(session: Session, config: GateConfig) -> TelemetryRecorder:
    return TelemetryRecorder(
        DownloadCounterRepository(session),
        DownloadLogRepository(session),
        ip_hash_salt=config.ip_hash_salt,
    )


@router.get("", response_model=DownloadCountResponse)
async def get_download_count(
    response: Response,
    config: TelemetryConfigDep,
    sessions: StoreSessionsDep,
) -> DownloadCountResponse:
    """Return the current download total without changing it."""
    total = await run_store_call(
        sessions,
        lambda session: build_recorder(session, config).current_total(),
        timeout=config.store_timeout_seconds,
        action="Download count read",
    )
    response.headers["Cache-Control"] = "no-store"
    return DownloadCountResponse(downloads=total)


@router.post("", response_model=DownloadCountResponse)
async def record_download(
    request: Request,
    response: Response,
    config: TelemetryConfigDep,
    sessions: StoreSessionsDep,
) -> DownloadCountResponse:
    """Count one download and log it anonymously.

    Returns:
        The total after this increment.
    """
    client_ip = client_ip_from_headers(request.headers)
    user_agent = request.headers.get("user-agent")
    total = await run_store_call(
        sessions,
        lambda session: build_recorder(session, config).record_download(client_ip, user_agent),
        timeout=config.store_timeout_seconds,
        action="Download increment",
    )
    response.headers["Cache-Control"] = "no-store"
    return DownloadCountResponse(downloads=total)


@router.get("/daily", response_model=DailyDownloadsResponse)
async def get_daily_downloads(
    response: Response,
    config: TelemetryConfigDep,
    sessions: StoreSessionsDep,
    days: Annotated[int, Query(ge=1, le=MAX_DAILY_WINDOW)] = 7,
) -> DailyDownloadsResponse:
    """Per-day download counts for the trailing window (anonymized)."""
    series = await run_store_call(
        sessions,
        lambda session: daily_series(DownloadLogRepository(session), days),
        timeout=config.store_timeout_seconds,
        action="Daily download aggregation",
    )
    response.headers["Cache-Control"] = "no-store"
    rows = [DailyDownloads.model_validate(item) for item in series]
    return DailyDownloadsResponse(total=sum(row.count for row in rows), days=rows)
