"""Data models for ``statement_csv``.

The domain record (:class:`Transaction`) is a frozen dataclass; values coming
back from the model are validated through :class:`LlmTransaction` (Pydantic)
before they are turned into domain records. Run-scoped bookkeeping
(:class:`RunContext`) is a plain mutable dataclass created once per batch run.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Core record
# ---------------------------------------------------------------------------

_WS_RE = re.compile(r"\s+")


def normalize_description(value: str) -> str:
    """Collapse line breaks and whitespace runs to one space, then trim."""

    return _WS_RE.sub(" ", value.replace("\r", " ").replace("\n", " ")).strip()


type DedupKey = tuple[str, str, float, str]


@dataclass(frozen=True, slots=True)
class Transaction:
    """One extracted statement line item.

    Attributes
    ----------
    date:
        ISO-8601 date string as reported by the statement (``""`` when
        missing). Ordering uses raw string comparison.
    description:
        Single-line, whitespace-normalized free text.
    amount:
        Signed amount as a float.
    currency:
        ISO 4217 currency code.
    """

    date: str
    description: str
    amount: float
    currency: str

    def dedup_key(self) -> DedupKey:
        return (self.date, self.description, self.amount, self.currency)


type Transactions = Iterable[Transaction]


class LlmTransaction(BaseModel):
    """Validated shape of a single transaction candidate from the model.

    Lax mode so numeric strings (``"-12.50"``) are accepted for ``amount``.
    Missing text fields default to ``""``; a missing, non-numeric or
    non-finite (``NaN``, ``Infinity``) amount fails validation and the
    candidate is dropped by the caller.
    """

    model_config = ConfigDict(extra="ignore")

    date: str = ""
    description: str = ""
    amount: float = Field(allow_inf_nan=False)
    currency: str = ""

    @field_validator("date", "description", "currency", mode="before")
    @classmethod
    def _none_to_empty(cls, v: object) -> object:
        return "" if v is None else v

    @field_validator("date", "currency")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("description")
    @classmethod
    def _normalize_description(cls, v: str) -> str:
        return normalize_description(v)

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=self.date,
            description=self.description,
            amount=float(self.amount),
            currency=self.currency,
        )


# ---------------------------------------------------------------------------
# Extraction outcome
# ---------------------------------------------------------------------------


class ExtractionStatus(StrEnum):
    OK = "ok"
    EMPTY_TEXT = "empty_text"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of extracting transactions from one document's text.

    A failed extraction is distinct from a successful one that found nothing:
    ``status`` is ``FAILED`` and ``error`` carries a short message, while
    ``transactions`` is always empty.
    """

    status: ExtractionStatus
    transactions: tuple[Transaction, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not ExtractionStatus.FAILED

    @property
    def failed(self) -> bool:
        return self.status is ExtractionStatus.FAILED

    @classmethod
    def success(cls, transactions: Iterable[Transaction]) -> ExtractionResult:
        return cls(status=ExtractionStatus.OK, transactions=tuple(transactions))

    @classmethod
    def empty_text(cls) -> ExtractionResult:
        return cls(status=ExtractionStatus.EMPTY_TEXT)

    @classmethod
    def failure(cls, error: str) -> ExtractionResult:
        return cls(status=ExtractionStatus.FAILED, error=error)


# ---------------------------------------------------------------------------
# Run bookkeeping
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class GroupStats:
    total: int
    processed: int = 0

    @property
    def percent(self) -> float:
        return (self.processed / self.total * 100.0) if self.total else 100.0


@dataclass(frozen=True, slots=True)
class GroupFailure:
    group: str
    reason: str


@dataclass(slots=True)
class RunContext:
    """Mutable counters for a single batch run.

    Created by the driver and threaded through the loop; never module-level.
    """

    total_files: int
    group_stats: dict[str, GroupStats] = field(default_factory=dict)
    processed: int = 0
    errors: list[Path] = field(default_factory=list)
    group_failures: list[GroupFailure] = field(default_factory=list)
    written: dict[str, int] = field(default_factory=dict)

    def mark_processed(self, group: str) -> None:
        self.processed += 1
        self.group_stats[group].processed += 1

    def record_error(self, path: Path) -> None:
        self.errors.append(path)


@dataclass(frozen=True, slots=True)
class RunReport:
    """Final summary of a batch run."""

    total_files: int
    processed: int
    group_stats: dict[str, GroupStats]
    errors: tuple[Path, ...]
    group_failures: tuple[GroupFailure, ...]
    written: dict[str, int]

    @classmethod
    def from_context(cls, ctx: RunContext) -> RunReport:
        return cls(
            total_files=ctx.total_files,
            processed=ctx.processed,
            group_stats=dict(ctx.group_stats),
            errors=tuple(ctx.errors),
            group_failures=tuple(ctx.group_failures),
            written=dict(ctx.written),
        )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors or self.group_failures)
