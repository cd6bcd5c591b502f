"""Tests for shared endpoint dependencies."""

from __future__ import annotations

import asyncio
import dataclasses
import threading
import time

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from download_gate.api.v1.dependencies import get_token_authority, run_store_call
from download_gate.core.errors import ConfigurationError, UpstreamError
from download_gate.core.settings import GateConfig
from download_gate.repositories import DownloadCounterRepository


def _closing_sessions(engine: Engine) -> tuple[sessionmaker[Session], threading.Event]:
    """Session factory that signals once a worker session has been closed."""
    closed = threading.Event()

    class SignallingSession(Session):
        def close(self) -> None:
            super().close()
            closed.set()

    factory = sessionmaker(bind=engine, class_=SignallingSession, expire_on_commit=False)
    return factory, closed


@pytest.mark.asyncio
async def test_store_call_returns_result(store_sessions: sessionmaker[Session]) -> None:
    assert await run_store_call(store_sessions, lambda session: 7, timeout=1.0, action="Read") == 7


@pytest.mark.asyncio
async def test_store_call_runs_on_its_own_session(
    store_sessions: sessionmaker[Session], db_session: Session
) -> None:
    seen: list[Session] = []
    await run_store_call(store_sessions, seen.append, timeout=1.0, action="Read")
    assert seen and seen[0] is not db_session


@pytest.mark.asyncio
async def test_store_call_timeout_is_upstream_error(store_sessions: sessionmaker[Session]) -> None:
    with pytest.raises(UpstreamError, match="timed out"):
        await run_store_call(
            store_sessions, lambda session: time.sleep(0.2), timeout=0.01, action="Slow read"
        )


@pytest.mark.asyncio
async def test_timed_out_write_is_never_committed(engine: Engine, db_session: Session) -> None:
    sessions, closed = _closing_sessions(engine)

    def slow_increment(session: Session) -> int:
        time.sleep(0.2)
        return DownloadCounterRepository(session).increment()

    with pytest.raises(UpstreamError, match="timed out"):
        await run_store_call(sessions, slow_increment, timeout=0.02, action="Download increment")

    assert await asyncio.to_thread(closed.wait, 5)
    await asyncio.sleep(0.05)
    assert DownloadCounterRepository(db_session).read() == 0


@pytest.mark.asyncio
async def test_write_committed_before_deadline_is_reported(engine: Engine) -> None:
    sessions, _ = _closing_sessions(engine)

    def commit_then_stall(session: Session) -> int:
        total = DownloadCounterRepository(session).increment()
        time.sleep(0.4)
        return total

    total = await run_store_call(sessions, commit_then_stall, timeout=0.15, action="Increment")
    assert total == 1


@pytest.mark.asyncio
async def test_database_error_is_upstream_error(store_sessions: sessionmaker[Session]) -> None:
    def _fail(session: Session) -> None:
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(UpstreamError) as excinfo:
        await run_store_call(store_sessions, _fail, timeout=1.0, action="Catalog fetch")
    assert excinfo.value.to_body() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_other_errors_propagate(store_sessions: sessionmaker[Session]) -> None:
    def _boom(session: Session) -> None:
        raise KeyError("bug")

    with pytest.raises(KeyError):
        await run_store_call(store_sessions, _boom, timeout=1.0, action="Read")


def test_token_authority_requires_secret(gate_config: GateConfig) -> None:
    assert get_token_authority(gate_config).verify("a.b") is False
    with pytest.raises(ConfigurationError) as excinfo:
        get_token_authority(dataclasses.replace(gate_config, gate_secret=None))
    assert excinfo.value.missing == ["DOWNLOAD_GATE_SECRET"]
