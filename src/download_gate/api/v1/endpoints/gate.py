"""Gate endpoints: trade a CAPTCHA proof for a gate token, then a token for the catalog."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Query, Request, Response
from pydantic import ValidationError
from sqlalchemy.orm import Session

from download_gate.api.v1.dependencies import (
    AuthorityDep,
    CatalogConfigDep,
    GatewayDep,
    StoreSessionsDep,
    run_store_call,
)
from download_gate.core.errors import AuthFailure
from download_gate.repositories.catalog_repo import CatalogRepository
from download_gate.schemas.catalog import CatalogEntry
from download_gate.schemas.gate import CatalogResponse, GateIssueRequest, GateIssueResponse
from download_gate.services.catalog import group_by_version
from download_gate.services.credentials import CredentialSource, extract_gate_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gate", tags=["gate"])

MISSING_TOKEN_MESSAGE = "Missing gate token"
INVALID_TOKEN_MESSAGE = "Invalid or expired gate token"
CAPTCHA_FAILED_MESSAGE = "reCAPTCHA verification failed"


async def _read_issue_request(request: Request) -> GateIssueRequest:
    """Parse the issue body leniently: anything unusable means "no proof token"."""
    try:
        raw = await request.json()
    except ValueError:
        return GateIssueRequest()
    if not isinstance(raw, dict):
        return GateIssueRequest()
    try:
        return GateIssueRequest.model_validate(raw)
    except ValidationError:
        return GateIssueRequest()



def _load_catalog(session: Session) -> list[CatalogEntry]:
    return [CatalogEntry.model_validate(row) for row in CatalogRepository(session).list_active()]

@router.post("", response_model=GateIssueResponse, response_model_exclude_none=True)
async def issue_gate_token(
    request: Request,
    response: Response,
    config: CatalogConfigDep,
    gateway: GatewayDep,
    authority: AuthorityDep,
) -> GateIssueResponse:
    """Verify the caller is human and issue a short-lived gate token.

    Args:
        request: Incoming request; the JSON body may carry ``captchaToken``.
        response: Outgoing response, used to disable caching.
        config: Validated configuration snapshot.
        gateway: Human verification gateway.
        authority: Gate token authority.

    Returns:
        The signed gate token, flagged with ``bypass`` when verification was skipped.
    """
    body = await _read_issue_request(request)
    proof_token = (body.captcha_token or "").strip()

    if not await gateway.verify_human(proof_token):
        raise AuthFailure(CAPTCHA_FAILED_MESSAGE)

    gate_token = authority.issue()
    response.headers["Cache-Control"] = "no-store"
    if config.bypass_enabled:
        logger.info("Issued gate token with verification bypass")
        return GateIssueResponse(bypass=True, gate_token=gate_token)
    logger.info("Issued gate token after human verification")
    return GateIssueResponse(gate_token=gate_token)


@router.get("", response_model=CatalogResponse, response_model_exclude_none=True)
async def redeem_gate_token(
    request: Request,
    response: Response,
    config: CatalogConfigDep,
    authority: AuthorityDep,
    sessions: StoreSessionsDep,
    grouped: Annotated[bool, Query(description="Also return rows grouped by version")] = False,
) -> CatalogResponse:
    """Release the active download catalog to the holder of a valid gate token.

    The token is taken from the ``X-Download-Gate`` header, the ``gate`` query
    parameter, or a gate-shaped ``Authorization: Bearer`` value, in that order.
    """
    source = CredentialSource(headers=request.headers, query=request.query_params)
    gate_token = extract_gate_token(source)
    if not gate_token:
        raise AuthFailure(MISSING_TOKEN_MESSAGE)
    if not authority.verify(gate_token):
        raise AuthFailure(INVALID_TOKEN_MESSAGE)

    data = await run_store_call(
        sessions,
        _load_catalog,
        timeout=config.store_timeout_seconds,
        action="Catalog fetch",
    )
    response.headers["Cache-Control"] = "no-store"
    return CatalogResponse(data=data, batches=group_by_version(data) if grouped else None)
