"""Locate a gate token in an incoming request.

Each extractor looks in one transport location and returns a candidate or
None. They are tried in priority order; the first candidate wins.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from download_gate.services.gate_token import is_gate_token_format

GATE_HEADER = "X-Download-Gate"
GATE_QUERY_PARAM = "gate"
_BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class CredentialSource:
    """The parts of a request a gate token may travel in."""

    headers: Mapping[str, str]
    query: Mapping[str, str]


TokenExtractor = Callable[[CredentialSource], str | None]


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def from_gate_header(source: CredentialSource) -> str | None:
    return _clean(source.headers.get(GATE_HEADER))


def from_query(source: CredentialSource) -> str | None:
    return _clean(source.query.get(GATE_QUERY_PARAM))


def from_bearer(source: CredentialSource) -> str | None:
    """Accept an ``Authorization: Bearer`` value only if it looks like a gate token.

    The same header commonly carries unrelated API keys, so anything without
    exactly one separator is ignored.
    """
    auth = source.headers.get("Authorization") or ""
    if not auth.startswith(_BEARER_PREFIX):
        return None
    candidate = _clean(auth[len(_BEARER_PREFIX):])
    if candidate and is_gate_token_format(candidate):
        return candidate
    return None


DEFAULT_EXTRACTORS: tuple[TokenExtractor, ...] = (from_gate_header, from_query, from_bearer)


def extract_gate_token(
    source: CredentialSource,
    extractors: Sequence[TokenExtractor] = DEFAULT_EXTRACTORS,
) -> str | None:
    """Return the first candidate token found, or None."""
    for extractor in extractors:
        candidate = extractor(source)
        if candidate:
            return candidate
    return None
