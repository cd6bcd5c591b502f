"""Shared FastAPI dependencies for v1 endpoints."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Annotated, Any, TypeVar

import httpx
from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from download_gate.core.errors import ConfigurationError, UpstreamError
from download_gate.core.settings import GateConfig, load_gate_config
from download_gate.db.commit_gate import CommitGate, StoreCallAbandoned
from download_gate.db.session import get_session_factory
from download_gate.services.captcha import HumanVerificationGateway
from download_gate.services.gate_token import GateTokenAuthority

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_gate_config() -> GateConfig:
    """Snapshot configuration for the current request."""
    return load_gate_config()


GateConfigDep = Annotated[GateConfig, Depends(get_gate_config)]


def require_catalog_config(config: GateConfigDep) -> GateConfig:
    """Fail fast, naming every absent key, before any gate logic runs."""
    missing = config.missing_for_catalog()
    if missing:
        raise ConfigurationError(missing=missing)
    return config


def require_telemetry_config(config: GateConfigDep) -> GateConfig:
    missing = config.missing_for_telemetry()
    if missing:
        raise ConfigurationError(missing=missing)
    return config


CatalogConfigDep = Annotated[GateConfig, Depends(require_catalog_config)]
TelemetryConfigDep = Annotated[GateConfig, Depends(require_telemetry_config)]
StoreSessionsDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]


def get_http_client(request: Request) -> httpx.AsyncClient | None:
    """Return the shared outbound client created at startup, if any."""
    return getattr(request.app.state, "http_client", None)


def get_verification_gateway(
    config: CatalogConfigDep,
    client: Annotated[httpx.AsyncClient | None, Depends(get_http_client)],
) -> HumanVerificationGateway:
    return HumanVerificationGateway.from_config(config, client=client)


def get_token_authority(config: CatalogConfigDep) -> GateTokenAuthority:
    if not config.gate_secret:
        raise ConfigurationError(missing=["DOWNLOAD_GATE_SECRET"])
    return GateTokenAuthority(config.gate_secret)


GatewayDep = Annotated[HumanVerificationGateway, Depends(get_verification_gateway)]
AuthorityDep = Annotated[GateTokenAuthority, Depends(get_token_authority)]


def _collect_abandoned(action: str) -> Callable[[asyncio.Future[Any]], None]:
    def _done(task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None and not isinstance(exc, StoreCallAbandoned):
            logger.warning("%s failed after its caller gave up: %s", action, exc)

    return _done


async def run_store_call(
    sessions: sessionmaker[Session],
    work: Callable[[Session], T],
    *,
    timeout: float,
    action: str,
) -> T:
    """Run ``work`` in a worker thread on its own session, with a deadline.

    If the deadline passes before anything was committed, the call is
    abandoned: a later commit attempt in the worker raises and the session
    rolls back, so a timed-out call leaves no writes behind. If a commit had
    already started, the real outcome is awaited and returned.

    Raises:
        UpstreamError: The call timed out or the database reported an error.
    """
    gate = CommitGate()

    def _call() -> T:
        with sessions() as session:
            gate.attach(session)
            return work(session)

    task = asyncio.ensure_future(run_in_threadpool(_call))
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done and gate.abandon():
            task.add_done_callback(_collect_abandoned(action))
            logger.warning("%s abandoned after %.1fs; no changes committed", action, timeout)
            raise UpstreamError(f"{action} timed out after {timeout:.1f}s")
        return await task
    except asyncio.CancelledError:
        # Client went away; same rule as a timeout.
        gate.abandon()
        task.add_done_callback(_collect_abandoned(action))
        raise
    except SQLAlchemyError as exc:
        raise UpstreamError(f"{action} failed: {exc}") from exc
