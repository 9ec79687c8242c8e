"""End-to-end conversion: PDFs -> text -> transactions -> per-group CSV.

Processing is strictly sequential: groups in discovery order, files within a
group in discovery order. A group's CSV is written only after all of its
files have been processed, and only when at least one new record was
extracted. The existing file is merged (see :mod:`statement_csv.merge`) and
rewritten in full.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from os import PathLike
from pathlib import Path

from openai import OpenAI

from .. import csv_store, pdf_text
from ..config import Settings
from ..errors import CsvSchemaError
from ..extraction import create_client, extract_transactions
from ..grouping import discover_pdf_files, group_files
from ..logging_setup import get_logger
from ..merge import merge_transactions
from ..models import (
    ExtractionResult,
    GroupFailure,
    GroupStats,
    RunContext,
    RunReport,
    Transaction,
)
from ..progress import ProgressReporter

type TextExtractor = Callable[[Path], str]
type TransactionExtractor = Callable[[str, str], ExtractionResult]

_logger = get_logger("statement_csv.workflows.convert_flow")


def openai_extractor(settings: Settings) -> TransactionExtractor:
    """Return an extractor bound to ``settings`` sharing one OpenAI client.

    The client is created on first use so runs that never reach the service
    (no PDFs, only empty documents) do not need credentials.
    """

    client: OpenAI | None = None

    def _extract(text: str, source: str) -> ExtractionResult:
        nonlocal client
        if client is None and text.strip():
            client = create_client()
        return extract_transactions(
            text,
            client=client,
            model=settings.model,
            temperature=settings.temperature,
            source=source,
        )

    return _extract


def _flush_group(
    group: str,
    new_transactions: list[Transaction],
    *,
    settings: Settings,
    ctx: RunContext,
) -> None:
    out_path = settings.output_path(group)
    try:
        existing = csv_store.load_transactions(out_path)
    except (CsvSchemaError, OSError) as e:
        _logger.error("group:load_failed group=%s path=%s error=%s", group, out_path, e)
        ctx.group_failures.append(GroupFailure(group=group, reason=str(e)))
        return

    merged = merge_transactions(existing, new_transactions)
    try:
        count = csv_store.write_transactions(out_path, merged)
    except OSError as e:
        _logger.error("group:write_failed group=%s path=%s error=%s", group, out_path, e)
        ctx.group_failures.append(GroupFailure(group=group, reason=str(e)))
        return

    ctx.written[group] = count
    _logger.info(
        "group:written group=%s existing=%d new=%d rows=%d path=%s",
        group,
        len(existing),
        len(new_transactions),
        count,
        out_path,
    )


def convert_statements(
    settings: Settings,
    *,
    text_extractor: TextExtractor | None = None,
    extractor: TransactionExtractor | None = None,
    reporter: ProgressReporter | None = None,
) -> RunReport:
    """Convert every PDF under ``settings.data_dir`` into per-group CSV files.

    Parameters
    ----------
    settings:
        Run configuration (scan root, output directory, default group, model).
    text_extractor:
        Callable returning a document's text; defaults to
        :func:`statement_csv.pdf_text.extract_text` (pdfplumber).
    extractor:
        Callable ``(text, source) -> ExtractionResult``; defaults to
        :func:`openai_extractor`.
    reporter:
        Progress sink; defaults to a :class:`ProgressReporter` on stdout.

    Returns
    -------
    RunReport
        Counters, failed files, failed groups and rows written per group.

    Raises
    ------
    ScanRootNotFoundError
        When ``settings.data_dir`` does not exist. Nothing is written.
    """

    reporter = reporter if reporter is not None else ProgressReporter()
    text_extractor = text_extractor if text_extractor is not None else pdf_text.extract_text
    extractor = extractor if extractor is not None else openai_extractor(settings)

    reporter.message(f"Scanning for PDF files in: {os.fspath(settings.data_dir)}")
    files = discover_pdf_files(settings.data_dir)
    reporter.message(f"Found {len(files)} PDF files.")

    by_group = group_files(files, settings.data_dir, default=settings.default_output)
    ctx = RunContext(
        total_files=len(files),
        group_stats={name: GroupStats(total=len(paths)) for name, paths in by_group.items()},
    )
    _logger.info("run:start files=%d groups=%d", ctx.total_files, len(by_group))
    if not files:
        return RunReport.from_context(ctx)

    reporter.start()
    for group, paths in by_group.items():
        new_transactions: list[Transaction] = []
        for path in paths:
            try:
                text = text_extractor(path)
                result = extractor(text, os.fspath(path))
                if result.failed:
                    ctx.record_error(path)
                else:
                    new_transactions.extend(result.transactions)
            except Exception as e:  # noqa: BLE001 - one bad file must not abort the batch
                _logger.error(
                    "file:failed path=%s error=%s: %s", path, e.__class__.__name__, e
                )
                ctx.record_error(path)
            finally:
                ctx.mark_processed(group)
                reporter.update(ctx)

        if new_transactions:
            _flush_group(group, new_transactions, settings=settings, ctx=ctx)
        else:
            _logger.info("group:skipped group=%s reason=no_new_transactions", group)
    reporter.finish()

    _logger.info(
        "run:done processed=%d errors=%d group_failures=%d",
        ctx.processed,
        len(ctx.errors),
        len(ctx.group_failures),
    )
    return RunReport.from_context(ctx)


def tidy_csv(csv_path: str | PathLike[str]) -> int:
    """Deduplicate and date-sort an existing group CSV in place.

    Equivalent to a merge with no new records. Returns the row count written.
    Raises :class:`FileNotFoundError` when the file is absent and
    :class:`CsvSchemaError` for unreadable files.
    """

    if not Path(csv_path).is_file():
        raise FileNotFoundError(f"File not found: {os.fspath(csv_path)}")
    existing = csv_store.load_transactions(csv_path)
    merged = merge_transactions(existing, [])
    count = csv_store.write_transactions(csv_path, merged)
    _logger.info(
        "tidy:done path=%s rows_before=%d rows_after=%d", csv_path, len(existing), count
    )
    return count


__all__ = ["convert_statements", "openai_extractor", "tidy_csv"]
