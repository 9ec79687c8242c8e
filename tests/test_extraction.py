# ruff: noqa: I001
from __future__ import annotations

import json
from typing import Any

import pytest

import statement_csv.extraction as extraction_mod
from statement_csv.extraction import extract_transactions, parse_transactions
from statement_csv.models import ExtractionStatus, Transaction, normalize_description
from tests.helpers.openai_stub import OpenAIStub, tx


def _install_stub(monkeypatch: pytest.MonkeyPatch, respond) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(extraction_mod, "OpenAI", lambda: OpenAIStub(respond, calls))
    return calls


def test_normalize_description_collapses_breaks_and_runs():
    assert normalize_description("Line1\nLine2   Line3") == "Line1 Line2 Line3"
    assert normalize_description("  a\r\n\tb  ") == "a b"


def test_empty_text_skips_service_call(monkeypatch: pytest.MonkeyPatch):
    calls = _install_stub(monkeypatch, lambda _text: pytest.fail("service must not be called"))

    result = extract_transactions("  \n\t ")

    assert result.status is ExtractionStatus.EMPTY_TEXT
    assert result.ok and not result.failed
    assert result.transactions == ()
    assert calls == []


def test_successful_extraction_normalizes_descriptions(monkeypatch: pytest.MonkeyPatch):
    calls = _install_stub(
        monkeypatch,
        lambda _text: [
            tx("2024-01-05", "REWE Markt\nGmbH   Berlin\n Ref 123", -23.45),
            tx("2024-01-06", "Gehalt", 2500),
        ],
    )

    result = extract_transactions("statement text", model="gpt-test")

    assert result.status is ExtractionStatus.OK
    assert result.transactions == (
        Transaction("2024-01-05", "REWE Markt GmbH Berlin Ref 123", -23.45, "EUR"),
        Transaction("2024-01-06", "Gehalt", 2500.0, "EUR"),
    )
    # Exactly one request carrying the full text, deterministic settings and strict schema
    assert len(calls) == 1
    call = calls[0]
    assert call["input"] == "statement text"
    assert call["model"] == "gpt-test"
    assert call["temperature"] == 0.0
    fmt = call["text"]["format"]
    assert fmt["type"] == "json_schema" and fmt["strict"] is True
    assert fmt["schema"]["required"] == ["transactions"]
    assert "EVERY detail" in call["instructions"]


def test_zero_transactions_is_success_not_failure(monkeypatch: pytest.MonkeyPatch):
    _install_stub(monkeypatch, lambda _text: [])

    result = extract_transactions("statement without movements")

    assert result.status is ExtractionStatus.OK
    assert result.transactions == ()


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        json.dumps(["a", "list"]),
        json.dumps({"transactions": "oops"}),
        "",
    ],
)
def test_malformed_responses_become_failed_results(monkeypatch: pytest.MonkeyPatch, raw: str):
    _install_stub(monkeypatch, lambda _text: raw)

    result = extract_transactions("some text")

    assert result.failed
    assert result.transactions == ()
    assert result.error


def test_service_exception_becomes_failed_result(monkeypatch: pytest.MonkeyPatch):
    class _Boom(Exception):
        status_code = 500

    def _raise(_text: str):
        raise _Boom("upstream unavailable")

    _install_stub(monkeypatch, _raise)

    result = extract_transactions("some text")

    assert result.status is ExtractionStatus.FAILED
    assert "upstream unavailable" in (result.error or "")


def test_explicit_client_is_used_instead_of_creating_one(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(
        extraction_mod, "OpenAI", lambda: pytest.fail("client must not be created")
    )
    calls: list[dict[str, Any]] = []
    client = OpenAIStub(lambda _text: [tx("2024-02-01", "Fee", -1)], calls)

    result = extract_transactions("text", client=client)

    assert [t.description for t in result.transactions] == ["Fee"]
    assert len(calls) == 1


def test_parse_transactions_drops_invalid_candidates():
    body = {
        "transactions": [
            tx("2024-01-01", "ok", -1.0),
            {"date": "2024-01-02", "description": "no amount", "currency": "EUR"},
            {"date": "2024-01-03", "description": "bad amount", "amount": "n/a"},
            "not an object",
            {"date": None, "description": None, "amount": "12.50", "currency": None},
        ]
    }

    parsed = parse_transactions(body)

    assert parsed == [
        Transaction("2024-01-01", "ok", -1.0, "EUR"),
        Transaction("", "", 12.5, ""),
    ]


def test_parse_transactions_missing_key_means_none_found():
    assert parse_transactions({}) == []


def test_parse_transactions_drops_non_finite_amounts():
    # json.loads accepts the bare NaN/Infinity tokens some models emit
    body = json.loads(
        '{"transactions": ['
        '{"date": "2024-01-01", "description": "nan", "amount": NaN, "currency": "EUR"},'
        '{"date": "2024-01-02", "description": "inf", "amount": Infinity, "currency": "EUR"},'
        '{"date": "2024-01-03", "description": "-inf", "amount": -Infinity, "currency": "EUR"},'
        '{"date": "2024-01-04", "description": "text nan", "amount": "nan", "currency": "EUR"},'
        '{"date": "2024-01-05", "description": "kept", "amount": 3, "currency": "EUR"}'
        "]}"
    )

    parsed = parse_transactions(body)

    assert parsed == [Transaction("2024-01-05", "kept", 3.0, "EUR")]
