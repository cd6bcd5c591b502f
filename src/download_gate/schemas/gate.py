"""Gate endpoint schemas."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from download_gate.schemas.catalog import CatalogBatch, CatalogEntry


class GateIssueRequest(BaseModel):
    """Body posted to obtain a gate token."""

    captcha_token: str | None = Field(None, alias="captchaToken")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GateIssueResponse(BaseModel):
    """Freshly issued gate token."""

    success: bool = True
    bypass: bool | None = Field(None, description="Present and true when CAPTCHA was bypassed")
    gate_token: str = Field(..., serialization_alias="gateToken")


class CatalogResponse(BaseModel):
    """Active catalog rows released to a valid gate token."""

    success: bool = True
    data: list[CatalogEntry]
    batches: list[CatalogBatch] | None = None
