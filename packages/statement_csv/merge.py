"""Merge, de-duplicate and order a group's transactions.

The output of :func:`merge_transactions` is the complete replacement content
of the group's CSV file.
"""

from __future__ import annotations

from collections.abc import Iterable

from .models import DedupKey, Transaction


def dedupe(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Drop exact duplicates on ``(date, description, amount, currency)``.

    The first occurrence of each key is kept, in input order.
    """

    seen: set[DedupKey] = set()
    out: list[Transaction] = []
    for tx in transactions:
        key = tx.dedup_key()
        if key in seen:
            continue
        seen.add(key)
        out.append(tx)
    return out


def sort_by_date(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable sort on the raw ``date`` string; a missing date sorts first."""

    return sorted(transactions, key=lambda tx: tx.date or "")


def merge_transactions(
    existing: Iterable[Transaction],
    new: Iterable[Transaction],
) -> list[Transaction]:
    """Combine persisted and freshly extracted records for one group.

    ``existing`` comes first so that a persisted record wins over an
    identical new one.
    """

    return sort_by_date(dedupe([*existing, *new]))


__all__ = ["dedupe", "merge_transactions", "sort_by_date"]
