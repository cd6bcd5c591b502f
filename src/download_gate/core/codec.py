"""URL-safe base64 helpers used by the gate token wire format."""

from __future__ import annotations

import base64
import binascii


class DecodeError(ValueError):
    """Raised when text is not valid unpadded base64url."""


def encode(data: bytes) -> str:
    """Return URL-safe base64 text for ``data`` with padding stripped."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """Decode unpadded base64url text back into bytes.

    Raises:
        DecodeError: If ``text`` contains characters outside the alphabet or
            has a length no padding can repair.
    """
    padding = "=" * (-len(text) % 4)
    try:
        return base64.b64decode((text + padding).encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as err:
        raise DecodeError(f"Invalid base64url encoding: {err}") from err
