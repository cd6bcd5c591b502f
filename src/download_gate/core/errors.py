"""Exception hierarchy mapped onto HTTP responses by the API layer.

Every failure a request can hit falls into one of five kinds. Handlers raise
these instead of building responses by hand so the status code, the public
message, and the logging policy stay in one place (``download_gate.api.errors``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

__all__ = [
    "GateServiceError",
    "ClientInputError",
    "AuthFailure",
    "ConfigurationError",
    "UpstreamError",
    "InternalError",
]

INTERNAL_ERROR_MESSAGE = "Internal server error"


class GateServiceError(RuntimeError):
    """Base exception for failures surfaced to HTTP callers."""

    status_code: int = 500
    public_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        super().__init__(message or self.public_message)
        if message is not None:
            self.public_message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        """Return the JSON body sent to the caller."""
        return {"error": self.public_message}


class ClientInputError(GateServiceError):
    """Raised when a request is missing mandatory input or is malformed."""

    status_code = 400
    public_message = "Bad request"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.extra = dict(extra or {})

    def to_body(self) -> dict[str, Any]:
        return {"error": self.public_message, **self.extra}


class AuthFailure(GateServiceError):
    """Raised when human verification fails or a gate token is rejected."""

    status_code = 401
    public_message = "Unauthorized"


class ConfigurationError(GateServiceError):
    """Raised when required server configuration is absent."""

    status_code = 500
    public_message = "Server misconfigured"

    def __init__(self, message: str | None = None, *, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.public_message}
        if self.missing:
            body["missing"] = self.missing
        return body


class UpstreamError(GateServiceError):
    """Raised when the verification service or the data store fails.

    The message is kept for server logs only; callers see a generic body.
    """

    status_code = 500

    def to_body(self) -> dict[str, Any]:
        return {"error": INTERNAL_ERROR_MESSAGE}


class InternalError(GateServiceError):
    """Raised for unexpected faults; the caller sees a generic body."""

    status_code = 500

    def to_body(self) -> dict[str, Any]:
        return {"error": INTERNAL_ERROR_MESSAGE}
