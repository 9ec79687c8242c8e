from __future__ import annotations

from pathlib import Path

import pytest

from statement_csv.csv_store import (
    CSV_HEADERS,
    format_amount,
    load_transactions,
    write_transactions,
)
from statement_csv.errors import CsvSchemaError
from statement_csv.models import Transaction


def test_write_then_load_preserves_records(tmp_path: Path):
    path = tmp_path / "DKB.csv"
    records = [
        Transaction("2024-01-01", 'Miete, Januar "Wohnung"', -900.0, "EUR"),
        Transaction("2024-01-02", "Gehalt", 2500.25, "EUR"),
    ]

    assert write_transactions(path, records) == 2

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(CSV_HEADERS)
    assert lines[1] == '2024-01-01,"Miete, Januar ""Wohnung""",-900,EUR'
    assert lines[2] == "2024-01-02,Gehalt,2500.25,EUR"
    assert load_transactions(path) == records


def test_write_replaces_previous_content(tmp_path: Path):
    path = tmp_path / "N26.csv"
    write_transactions(path, [Transaction("2024-01-01", "a", 1.0, "EUR")] * 3)

    write_transactions(path, [Transaction("2024-02-01", "b", 2.0, "EUR")])

    assert load_transactions(path) == [Transaction("2024-02-01", "b", 2.0, "EUR")]
    assert not (tmp_path / "N26.csv.tmp").exists()


def test_load_missing_or_empty_file_returns_no_records(tmp_path: Path):
    assert load_transactions(tmp_path / "absent.csv") == []
    empty = tmp_path / "empty.csv"
    empty.write_text("")
    assert load_transactions(empty) == []


@pytest.mark.parametrize(
    "content",
    [
        "Datum,Text,Betrag,Waehrung\n2024-01-01,x,1,EUR\n",
        "Date,Description,Amount\n2024-01-01,x,1\n",
        "Date,Description,Amount,Currency\n2024-01-01,x,abc,EUR\n",
        "Date,Description,Amount,Currency\n2024-01-01,x,1,EUR,extra\n",
        "Date,Description,Amount,Currency\n2024-01-01,x\n",
    ],
)
def test_load_rejects_foreign_or_malformed_files(tmp_path: Path, content: str):
    path = tmp_path / "group.csv"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(CsvSchemaError):
        load_transactions(path)


def test_load_rejects_non_utf8(tmp_path: Path):
    path = tmp_path / "group.csv"
    path.write_bytes(b"Date,Description,Amount,Currency\n2024-01-01,\xff\xfe,1,EUR\n")

    with pytest.raises(CsvSchemaError):
        load_transactions(path)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(12.0, "12"), (-0.5, "-0.5"), (1234.56, "1234.56"), (0.1 + 0.2, "0.30000000000000004")],
)
def test_format_amount(amount: float, expected: str):
    assert format_amount(amount) == expected
