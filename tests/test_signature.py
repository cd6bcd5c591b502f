"""Tests for HMAC signing and IP hashing."""

import hashlib
import hmac

from download_gate.core import codec
from download_gate.core.security import hash_client_ip, sign, signatures_match


def test_sign_matches_reference_hmac() -> None:
    expected = hmac.new(b"secret", b"payload", hashlib.sha256).digest()
    assert codec.decode(sign("payload", "secret")) == expected


def test_sign_is_deterministic_and_key_dependent() -> None:
    assert sign("payload", "secret") == sign("payload", "secret")
    assert sign("payload", "secret") != sign("payload", "other-secret")
    assert sign("payload", "secret") != sign("payload2", "secret")


def test_signatures_match() -> None:
    signature = sign("payload", "secret")
    assert signatures_match(signature, signature) is True
    assert signatures_match(signature, signature[:-1]) is False
    assert signatures_match(signature, "ünïcode") is False


def test_hash_client_ip_is_deterministic_hex() -> None:
    digest = hash_client_ip("203.0.113.7")
    assert digest == hash_client_ip("203.0.113.7")
    assert digest == hashlib.sha256(b"203.0.113.7").hexdigest()
    assert len(digest) == 64
    assert "203.0.113.7" not in digest


def test_hash_client_ip_with_salt_is_keyed() -> None:
    salted = hash_client_ip("203.0.113.7", "pepper")
    assert salted == hash_client_ip("203.0.113.7", "pepper")
    assert salted != hash_client_ip("203.0.113.7")
    assert salted != hash_client_ip("203.0.113.7", "other")
