"""HMAC signing and one-way hashing primitives."""
from __future__ import annotations

import hashlib
import hmac

from download_gate.core import codec


def sign(payload_text: str, secret: str) -> str:
    """Return the base64url HMAC-SHA256 signature of ``payload_text``.

    Args:
        payload_text: Canonical encoded payload exactly as it appears on the wire.
        secret: Operator-provisioned signing secret.

    Returns:
        Unpadded base64url digest. Identical inputs always yield identical output.
    """
    digest = hmac.new(secret.encode("utf-8"), payload_text.encode("utf-8"), hashlib.sha256).digest()
    return codec.encode(digest)


def signatures_match(expected: str, supplied: str) -> bool:
    """Compare two encoded signatures in constant time."""
    return hmac.compare_digest(
        expected.encode("utf-8"),
        supplied.encode("utf-8", errors="replace"),
    )


def hash_client_ip(ip: str, salt: str | None = None) -> str:
    """Return the hex digest used to anonymize a client address.

    With a salt the digest is HMAC-SHA256 keyed by the salt, otherwise plain
    SHA-256. Either way the result is deterministic for a given input.
    """
    data = ip.encode("utf-8")
    if salt:
        return hmac.new(salt.encode("utf-8"), data, hashlib.sha256).hexdigest()
    return hashlib.sha256(data).hexdigest()
