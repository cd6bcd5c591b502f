"""Application settings and configuration.

This module defines all configuration options for the Download Gate service.
Settings are loaded from environment variables (or a ``.env`` file). Secrets
have no defaults: an absent secret is reported by name at request time rather
than silently replaced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"
_TRUTHY = frozenset({"true", "1", "yes"})


def is_env_true(value: Any) -> bool:
    """Interpret an environment flag, tolerating surrounding quotes and case."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    normalized = str(value).strip().strip('"').lower()
    return normalized in _TRUTHY


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Download Gate", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Data store
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    store_timeout_seconds: float = Field(default=10.0, alias="STORE_TIMEOUT_SECONDS")

    # Gate token signing
    download_gate_secret: str | None = Field(default=None, alias="DOWNLOAD_GATE_SECRET")

    # Human verification (reCAPTCHA)
    recaptcha_secret_key: str | None = Field(default=None, alias="RECAPTCHA_SECRET_KEY")
    allow_recaptcha_bypass: bool = Field(default=False, alias="ALLOW_RECAPTCHA_BYPASS")
    recaptcha_verify_url: str = Field(
        default=DEFAULT_RECAPTCHA_VERIFY_URL,
        alias="RECAPTCHA_VERIFY_URL",
    )
    captcha_timeout_seconds: float = Field(default=10.0, alias="CAPTCHA_TIMEOUT_SECONDS")

    # Telemetry anonymization
    ip_hash_salt: str | None = Field(default=None, alias="DOWNLOAD_IP_HASH_SALT")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("allow_recaptcha_bypass", mode="before")
    @classmethod
    def _parse_bypass_flag(cls, value: Any) -> bool:
        return is_env_true(value)

    @field_validator(
        "database_url",
        "download_gate_secret",
        "recaptcha_secret_key",
        "ip_hash_salt",
        mode="before",
    )
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def effective_database_url(self) -> str | None:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


@dataclass(frozen=True)
class GateConfig:
    """Immutable per-request snapshot of the configuration handlers consume."""

    gate_secret: str | None
    database_url: str | None
    recaptcha_secret: str | None
    bypass_enabled: bool
    recaptcha_verify_url: str = DEFAULT_RECAPTCHA_VERIFY_URL
    captcha_timeout_seconds: float = 10.0
    store_timeout_seconds: float = 10.0
    ip_hash_salt: str | None = None

    def missing_for_catalog(self) -> list[str]:
        """Return the names of absent keys the gate endpoint cannot run without."""
        missing: list[str] = []
        if not self.gate_secret:
            missing.append("DOWNLOAD_GATE_SECRET")
        if not self.database_url:
            missing.append("DATABASE_URL")
        return missing

    def missing_for_telemetry(self) -> list[str]:
        """Return the names of absent keys the telemetry endpoint cannot run without."""
        return [] if self.database_url else ["DATABASE_URL"]


def load_gate_config(source: Settings | None = None) -> GateConfig:
    """Build a configuration snapshot from settings."""
    current = source or settings
    return GateConfig(
        gate_secret=current.download_gate_secret,
        database_url=current.effective_database_url,
        recaptcha_secret=current.recaptcha_secret_key,
        bypass_enabled=current.allow_recaptcha_bypass,
        recaptcha_verify_url=current.recaptcha_verify_url,
        captcha_timeout_seconds=float(current.captcha_timeout_seconds),
        store_timeout_seconds=float(current.store_timeout_seconds),
        ip_hash_salt=current.ip_hash_salt,
    )


settings = Settings()
