"""Gate token issuance and verification.

A gate token is ``<payload>.<signature>`` where ``payload`` is the base64url
encoding of a compact JSON object and ``signature`` is the base64url
HMAC-SHA256 of the encoded payload. Verification is a pure function of the
token, the secret, and the current time: no token state is kept server-side,
so a token stays redeemable (any number of times) until it expires.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

from download_gate.core import codec
from download_gate.core.security import sign, signatures_match

logger = logging.getLogger(__name__)

GATE_TOKEN_TTL_SECONDS: Final[int] = 10 * 60
GATE_TOKEN_PURPOSE: Final[str] = "download-catalog"
TOKEN_SEPARATOR: Final[str] = "."

Clock = Callable[[], float]


@dataclass(frozen=True)
class GateTokenPayload:
    """Claims carried inside a gate token."""

    issued_at: int
    expires_at: int
    nonce: str
    purpose: str = GATE_TOKEN_PURPOSE

    @classmethod
    def fresh(cls, now: int, ttl_seconds: int = GATE_TOKEN_TTL_SECONDS) -> GateTokenPayload:
        """Build a payload issued at ``now`` with a new random nonce."""
        return cls(
            issued_at=now,
            expires_at=now + ttl_seconds,
            nonce=str(uuid.uuid4()),
        )

    def to_claims(self) -> dict[str, Any]:
        return {
            "iat": self.issued_at,
            "exp": self.expires_at,
            "nonce": self.nonce,
            "purpose": self.purpose,
        }

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> GateTokenPayload:
        """Parse wire claims.

        Raises:
            ValueError: If a claim is missing or has the wrong type.
        """
        exp = claims.get("exp")
        iat = claims.get("iat", 0)
        purpose = claims.get("purpose")
        nonce = claims.get("nonce", "")
        # bool is an int subclass; reject it explicitly.
        if not isinstance(exp, int) or isinstance(exp, bool) or exp <= 0:
            raise ValueError("Gate token expiry must be a positive integer")
        if not isinstance(iat, int) or isinstance(iat, bool):
            raise ValueError("Gate token issue time must be an integer")
        if not isinstance(purpose, str):
            raise ValueError("Gate token purpose must be a string")
        return cls(issued_at=iat, expires_at=exp, nonce=str(nonce), purpose=purpose)


def encode_payload(payload: GateTokenPayload) -> str:
    """Return the canonical encoded form of ``payload``."""
    serialized = json.dumps(payload.to_claims(), separators=(",", ":"))
    return codec.encode(serialized.encode("utf-8"))


def decode_payload(payload_encoded: str) -> GateTokenPayload:
    """Decode and parse the payload half of a token.

    Raises:
        ValueError: If the text is not base64url JSON of the expected shape.
    """
    raw = codec.decode(payload_encoded)
    claims = json.loads(raw.decode("utf-8"))
    if not isinstance(claims, dict):
        raise ValueError("Gate token payload must be a JSON object")
    return GateTokenPayload.from_claims(claims)


def is_gate_token_format(value: str | None) -> bool:
    """Return True when ``value`` contains exactly one separator.

    This only tells a gate token apart from other bearer credentials; it
    says nothing about validity.
    """
    if not value:
        return False
    return value.count(TOKEN_SEPARATOR) == 1


class GateTokenAuthority:
    """Issues and verifies gate tokens under a single signing secret."""

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int = GATE_TOKEN_TTL_SECONDS,
        clock: Clock = time.time,
    ) -> None:
        if not secret:
            raise ValueError("Gate token secret must be provided")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def _now(self) -> int:
        return int(self._clock())

    def issue(self) -> str:
        """Return a newly signed token valid for ``ttl_seconds`` from now."""
        payload = GateTokenPayload.fresh(self._now(), self.ttl_seconds)
        return self.sign_payload(payload)

    def sign_payload(self, payload: GateTokenPayload) -> str:
        """Encode and sign an explicit payload."""
        payload_encoded = encode_payload(payload)
        return f"{payload_encoded}{TOKEN_SEPARATOR}{sign(payload_encoded, self._secret)}"

    def verify(self, token: str) -> bool:
        """Return True if ``token`` is authentic, unexpired, and for this purpose.

        Never raises: malformed or hostile input yields False.
        """
        parts = token.split(TOKEN_SEPARATOR) if isinstance(token, str) else []
        if len(parts) != 2:
            return False
        payload_encoded, signature_encoded = parts
        if not payload_encoded or not signature_encoded:
            return False

        expected = sign(payload_encoded, self._secret)
        if not signatures_match(expected, signature_encoded):
            return False

        try:
            payload = decode_payload(payload_encoded)
        except (ValueError, UnicodeDecodeError):
            # Signed by us but unparseable: only possible with a leaked secret.
            logger.warning("Rejected signed gate token with malformed payload")
            return False

        if payload.purpose != GATE_TOKEN_PURPOSE:
            return False
        # No not-before check: a future ``iat`` is accepted while unexpired.
        return payload.expires_at >= self._now()


def issue_gate_token(
    secret: str,
    *,
    ttl_seconds: int = GATE_TOKEN_TTL_SECONDS,
    now: float | None = None,
) -> str:
    """Issue a token with ``secret``, optionally at a fixed time."""
    clock: Clock = time.time if now is None else (lambda: now)
    return GateTokenAuthority(secret, ttl_seconds=ttl_seconds, clock=clock).issue()


def verify_gate_token(token: str, secret: str, *, now: float | None = None) -> bool:
    """Verify ``token`` against ``secret``, optionally at a fixed time."""
    if not secret:
        return False
    clock: Clock = time.time if now is None else (lambda: now)
    return GateTokenAuthority(secret, clock=clock).verify(token)
