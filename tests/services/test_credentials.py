"""Tests for gate token extraction order."""

from starlette.datastructures import Headers

from download_gate.services.credentials import (
    CredentialSource,
    extract_gate_token,
    from_bearer,
    from_gate_header,
    from_query,
)

GATE_TOKEN = "cGF5bG9hZA.c2ln"


def _source(headers: dict[str, str] | None = None, query: dict[str, str] | None = None):
    return CredentialSource(headers=Headers(headers or {}), query=query or {})


def test_header_wins_over_query_and_bearer() -> None:
    source = _source(
        {"X-Download-Gate": "header.token", "Authorization": "Bearer bearer.token"},
        {"gate": "query.token"},
    )
    assert extract_gate_token(source) == "header.token"


def test_query_wins_over_bearer() -> None:
    source = _source({"Authorization": "Bearer bearer.token"}, {"gate": "query.token"})
    assert extract_gate_token(source) == "query.token"


def test_bearer_used_only_when_gate_shaped() -> None:
    assert extract_gate_token(_source({"Authorization": f"Bearer {GATE_TOKEN}"})) == GATE_TOKEN
    # A JWT-like API key has two separators and must be ignored.
    assert extract_gate_token(_source({"Authorization": "Bearer aaa.bbb.ccc"})) is None
    assert extract_gate_token(_source({"Authorization": "Bearer plainkey"})) is None
    assert extract_gate_token(_source({"Authorization": f"Basic {GATE_TOKEN}"})) is None


def test_blank_values_fall_through() -> None:
    source = _source({"X-Download-Gate": "   "}, {"gate": "  query.token  "})
    assert extract_gate_token(source) == "query.token"


def test_header_lookup_is_case_insensitive() -> None:
    assert from_gate_header(_source({"x-download-gate": GATE_TOKEN})) == GATE_TOKEN


def test_each_extractor_reports_no_candidate() -> None:
    empty = _source()
    assert from_gate_header(empty) is None
    assert from_query(empty) is None
    assert from_bearer(empty) is None
    assert extract_gate_token(empty) is None


def test_custom_extractor_order() -> None:
    source = _source({"X-Download-Gate": "header.token"}, {"gate": "query.token"})
    assert extract_gate_token(source, extractors=(from_query, from_gate_header)) == "query.token"
