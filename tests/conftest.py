from __future__ import annotations

import dataclasses
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime
from itertools import count
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from download_gate.api.v1 import dependencies
from download_gate.core.settings import GateConfig
from download_gate.db.session import Base, get_session_factory
from download_gate.main import app as fastapi_app
from download_gate.models import DownloadVersion

TEST_DB_URL = "sqlite://"
TEST_GATE_SECRET = "test-gate-secret"
TEST_CAPTCHA_SECRET = "test-captcha-secret"

_CATALOG_ORDER_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Repositories commit, so wipe rows to give each test a clean database.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def gate_config() -> GateConfig:
    """Fully configured snapshot with the CAPTCHA bypass disabled."""
    return GateConfig(
        gate_secret=TEST_GATE_SECRET,
        database_url=TEST_DB_URL,
        recaptcha_secret=TEST_CAPTCHA_SECRET,
        bypass_enabled=False,
        recaptcha_verify_url="https://captcha.test/siteverify",
        captcha_timeout_seconds=2.0,
        store_timeout_seconds=5.0,
        ip_hash_salt="test-salt",
    )


@pytest.fixture()
def configure(app: FastAPI, gate_config: GateConfig) -> Iterator[Callable[..., GateConfig]]:
    """Install a configuration snapshot; call with overrides to change fields."""

    def _configure(**changes: Any) -> GateConfig:
        config = dataclasses.replace(gate_config, **changes)
        app.dependency_overrides[dependencies.get_gate_config] = lambda: config
        return config

    _configure()
    try:
        yield _configure
    finally:
        app.dependency_overrides.pop(dependencies.get_gate_config, None)


@pytest.fixture()
def store_sessions(engine: Engine) -> sessionmaker[Session]:
    """Factory the app opens its per-call sessions from."""
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def override_session_dependency(
    app: FastAPI, db_session: Session, store_sessions: sessionmaker[Session]
) -> Iterator[None]:
    app.dependency_overrides[get_session_factory] = lambda: store_sessions
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_session_factory, None)


class FakeCaptchaService:
    """Stands in for the CAPTCHA verification endpoint."""

    def __init__(self) -> None:
        self.calls: list[httpx.Request] = []
        self.body: Any = {"success": True}
        self.status_code = 200
        self.raise_error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if isinstance(self.body, str | bytes):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def captcha_service(app: FastAPI) -> Iterator[FakeCaptchaService]:
    """Route outbound CAPTCHA calls to an in-process fake."""
    service = FakeCaptchaService()
    app.dependency_overrides[dependencies.get_http_client] = service.client
    try:
        yield service
    finally:
        app.dependency_overrides.pop(dependencies.get_http_client, None)


@pytest.fixture()
def client(
    app: FastAPI,
    configure: Callable[..., GateConfig],
    captcha_service: FakeCaptchaService,
) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_catalog_entry(db_session: Session) -> Callable[..., DownloadVersion]:
    """Factory persisting catalog rows."""

    def _make(**fields: Any) -> DownloadVersion:
        n = next(_CATALOG_ORDER_COUNTER)
        values: dict[str, Any] = {
            "version": "1.0.0",
            "file_name": f"App-v1.0.0-{n}.zip",
            "architecture": "64-bit",
            "download_url": f"https://cdn.example.test/App-{n}.zip",
            "sort_order": 1,
            "is_active": True,
            "updated_at": datetime(2026, 1, 1, tzinfo=UTC),
        }
        values.update(fields)
        entry = DownloadVersion(**values)
        db_session.add(entry)
        db_session.commit()
        return entry

    return _make


class FakeClock:
    """Settable clock for time-dependent token checks."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock(1_760_000_000.0)
