"""System and transparency endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from download_gate.api.v1.dependencies import GateConfigDep
from download_gate.core.settings import settings
from download_gate.services.gate_token import GATE_TOKEN_PURPOSE, GATE_TOKEN_TTL_SECONDS

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config(config: GateConfigDep) -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Reports whether each required key is set, never its value.
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "gate": {
            "token_ttl_seconds": GATE_TOKEN_TTL_SECONDS,
            "purpose": GATE_TOKEN_PURPOSE,
            "captcha_bypass_enabled": config.bypass_enabled,
        },
        "configured": {
            "DOWNLOAD_GATE_SECRET": bool(config.gate_secret),
            "DATABASE_URL": bool(config.database_url),
            "RECAPTCHA_SECRET_KEY": bool(config.recaptcha_secret),
        },
    }
