"""Tests for settings parsing and configuration snapshots."""

from __future__ import annotations

import pytest

from download_gate.core.settings import GateConfig, Settings, is_env_true, load_gate_config


def _settings(**env: object) -> Settings:
    return Settings(_env_file=None, **env)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("true", True),
        ("TRUE", True),
        ('"true"', True),
        ("  Yes ", True),
        ("1", True),
        (True, True),
        ("false", False),
        ("0", False),
        ("", False),
        ("on", False),
        (None, False),
    ],
)
def test_is_env_true(raw: object, expected: bool) -> None:
    assert is_env_true(raw) is expected


def test_bypass_flag_accepts_quoted_values() -> None:
    assert _settings(ALLOW_RECAPTCHA_BYPASS='"YES"').allow_recaptcha_bypass is True
    assert _settings(ALLOW_RECAPTCHA_BYPASS="nope").allow_recaptcha_bypass is False


def test_blank_secrets_are_missing() -> None:
    current = _settings(DOWNLOAD_GATE_SECRET="   ", DATABASE_URL="", DOWNLOAD_IP_HASH_SALT="")
    assert current.download_gate_secret is None
    assert current.database_url is None
    assert current.ip_hash_salt is None


def test_test_database_override() -> None:
    current = _settings(
        DATABASE_URL="sqlite:///prod.db",
        TEST_DATABASE_URL="sqlite:///test.db",
        USE_TEST_DATABASE=True,
    )
    assert current.effective_database_url == "sqlite:///test.db"


def test_load_gate_config_snapshot() -> None:
    config = load_gate_config(
        _settings(
            DOWNLOAD_GATE_SECRET="s3cret",
            DATABASE_URL="sqlite://",
            RECAPTCHA_SECRET_KEY="captcha",
            ALLOW_RECAPTCHA_BYPASS="false",
            STORE_TIMEOUT_SECONDS="2.5",
        )
    )
    assert config.gate_secret == "s3cret"
    assert config.recaptcha_secret == "captcha"
    assert config.bypass_enabled is False
    assert config.store_timeout_seconds == 2.5
    assert config.missing_for_catalog() == []
    assert config.missing_for_telemetry() == []


def test_missing_keys_are_named() -> None:
    config = GateConfig(
        gate_secret=None, database_url=None, recaptcha_secret=None, bypass_enabled=False
    )
    assert config.missing_for_catalog() == ["DOWNLOAD_GATE_SECRET", "DATABASE_URL"]
    assert config.missing_for_telemetry() == ["DATABASE_URL"]
