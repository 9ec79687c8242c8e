"""Read and write per-group transaction CSV files.

Header (exact, in order): ``Date, Description, Amount, Currency``.

Files are always rewritten in full; there is no append mode. A file whose
header does not match, or whose ``Amount`` cells are not numeric, raises
:class:`~statement_csv.errors.CsvSchemaError` so callers never overwrite data
they could not read.
"""

from __future__ import annotations

import csv
import math
import os
from collections.abc import Iterable, Iterator, Mapping
from os import PathLike
from pathlib import Path

from .errors import CsvSchemaError
from .models import Transaction

CSV_HEADERS: tuple[str, ...] = ("Date", "Description", "Amount", "Currency")


def format_amount(amount: float) -> str:
    """Render an amount without a trailing ``.0`` for integral values."""

    if math.isfinite(amount) and amount.is_integer():
        return str(int(amount))
    return repr(amount)


def _parse_amount(raw: str | None, *, line: int, path: Path) -> float:
    try:
        value = float((raw or "").strip())
    except ValueError as e:
        raise CsvSchemaError(f"{path}: line {line}: Amount is not a number: {raw!r}") from e
    if not math.isfinite(value):
        raise CsvSchemaError(f"{path}: line {line}: Amount is not finite: {raw!r}")
    return value


def _to_transactions(reader: csv.DictReader, path: Path) -> Iterator[Transaction]:
    for row in reader:
        if None in row:
            raise CsvSchemaError(f"{path}: line {reader.line_num}: too many columns")
        yield Transaction(
            date=row.get("Date") or "",
            description=row.get("Description") or "",
            amount=_parse_amount(row.get("Amount"), line=reader.line_num, path=path),
            currency=row.get("Currency") or "",
        )


def load_transactions(csv_path: str | PathLike[str]) -> list[Transaction]:
    """Return the records stored in ``csv_path`` (empty list if it is absent).

    Raises :class:`CsvSchemaError` when the file cannot be decoded, has no
    header, has a header other than :data:`CSV_HEADERS`, or contains rows that
    do not fit the schema.
    """

    p = Path(csv_path)
    if not p.exists():
        return []

    try:
        with p.open(encoding="utf-8", newline="") as f:
            reader = csv.DictReader(f)
            headers = reader.fieldnames
            if headers is None:
                # Zero-byte file: nothing persisted yet.
                return []
            if tuple(h.strip() for h in headers) != CSV_HEADERS:
                raise CsvSchemaError(
                    f"{p}: unexpected CSV header {list(headers)!r}; "
                    f"expected {list(CSV_HEADERS)!r}"
                )
            reader.fieldnames = list(CSV_HEADERS)
            return list(_to_transactions(reader, p))
    except UnicodeDecodeError as e:
        raise CsvSchemaError(f"{p}: not a UTF-8 text file: {e}") from e
    except CsvSchemaError:
        raise
    except csv.Error as e:
        raise CsvSchemaError(f"{p}: failed to parse CSV: {e}") from e


def _to_row(tx: Transaction) -> Mapping[str, str]:
    return {
        "Date": tx.date,
        "Description": tx.description,
        "Amount": format_amount(tx.amount),
        "Currency": tx.currency,
    }


def write_transactions(
    csv_path: str | PathLike[str],
    transactions: Iterable[Transaction],
) -> int:
    """Replace ``csv_path`` with ``transactions``; return the row count.

    Writes go to a ``.tmp`` sibling first and are moved into place with
    ``os.replace``.
    """

    p = Path(csv_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + ".tmp")
    count = 0
    with tmp.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=list(CSV_HEADERS))
        writer.writeheader()
        for tx in transactions:
            writer.writerow(_to_row(tx))
            count += 1
    os.replace(tmp, p)
    return count


__all__ = ["CSV_HEADERS", "format_amount", "load_transactions", "write_transactions"]
