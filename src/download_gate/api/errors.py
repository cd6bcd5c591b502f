"""Mapping of exceptions onto JSON error responses.

Every response, including errors raised by the framework itself, carries the
same permissive CORS headers and an ``{"error": ...}`` body. Unexpected
exceptions are logged in full and answered with a generic 500.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import cast

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from download_gate.core.errors import (
    INTERNAL_ERROR_MESSAGE,
    ConfigurationError,
    GateServiceError,
    InternalError,
    UpstreamError,
)
from download_gate.services.credentials import GATE_HEADER

logger = logging.getLogger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": (
        f"Content-Type, Authorization, X-Client-Info, Apikey, {GATE_HEADER}"
    ),
}

_HTTP_ERROR_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def error_response(status_code: int, body: dict[str, object]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=dict(CORS_HEADERS))


async def handle_gate_service_error(request: Request, exc: Exception) -> JSONResponse:
    error = cast(GateServiceError, exc)
    if isinstance(error, ConfigurationError):
        logger.error("%s %s: %s %s", request.method, request.url.path, error, error.missing)
    elif isinstance(error, UpstreamError | InternalError):
        logger.error("%s %s failed: %s", request.method, request.url.path, error)
    else:
        logger.info(
            "%s %s rejected (%d): %s",
            request.method,
            request.url.path,
            error.status_code,
            error.public_message,
        )
    return error_response(error.status_code, error.to_body())


async def handle_http_exception(request: Request, exc: Exception) -> JSONResponse:
    http_error = cast(StarletteHTTPException, exc)
    message = _HTTP_ERROR_MESSAGES.get(http_error.status_code, str(http_error.detail))
    response = error_response(http_error.status_code, {"error": message})
    if http_error.headers:
        response.headers.update(http_error.headers)
    return response


async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, {"error": "Invalid request"})


async def cors_and_fault_barrier(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Answer preflights, stamp CORS headers, and contain unexpected faults."""
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=dict(CORS_HEADERS))
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"error": INTERNAL_ERROR_MESSAGE},
        )
    response.headers.update(CORS_HEADERS)
    return response


def install_error_handling(app: FastAPI) -> None:
    """Register exception handlers and the CORS middleware on ``app``."""
    app.add_exception_handler(GateServiceError, handle_gate_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.middleware("http")(cors_and_fault_barrier)
