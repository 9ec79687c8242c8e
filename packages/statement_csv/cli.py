# ruff: noqa: I001
"""CLI for the ``statement_csv`` package.

Command handlers (``cmd_convert``, ``cmd_tidy``) return process exit codes and
can be called directly; the Typer app wraps them. Environment variables
(notably ``OPENAI_API_KEY``) are loaded from a local ``.env`` using
``python-dotenv`` before any command runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from dotenv import load_dotenv

from .logging_setup import configure_logging, get_logger

if TYPE_CHECKING:
    from .models import RunReport
    from .progress import ProgressReporter

_logger = get_logger("statement_csv.cli")


# ---- Command handlers ---------------------------------------------------------


def _print_summary(report: RunReport) -> None:
    print("\n\nProcessing complete.")
    if report.errors:
        print("Errors in following files:")
        for path in report.errors:
            print(f"  {path}")
    if report.group_failures:
        print("Groups not written:")
        for failure in report.group_failures:
            print(f"  {failure.group}: {failure.reason}")


def cmd_convert(
    *,
    data_dir: Path | None = None,
    output_dir: Path | None = None,
    default_output: str | None = None,
    model: str | None = None,
    reporter: ProgressReporter | None = None,
) -> int:
    """Convert all PDFs under the scan root into per-group CSV files.

    Returns ``0`` when the run completes (also with per-file errors, which are
    listed in the summary) and ``1`` on configuration errors, a missing scan
    root or an unexpected failure.
    """

    import os
    import sys

    from .config import Settings
    from .errors import ConfigError, ScanRootNotFoundError
    from .workflows.convert_flow import convert_statements

    try:
        settings = Settings.from_env(
            data_dir=data_dir,
            output_dir=output_dir,
            default_output=default_output,
            model=model,
        )
    except ConfigError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    if not os.getenv("OPENAI_API_KEY"):
        print("Error: OPENAI_API_KEY is not set in the environment.", file=sys.stderr)
        return 1

    try:
        report = convert_statements(settings, reporter=reporter)
    except ScanRootNotFoundError as e:
        _logger.error("run:aborted reason=missing_scan_root path=%s", settings.data_dir)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        _logger.exception("run:aborted reason=unexpected_error")
        print(f"Error: conversion failed: {e}", file=sys.stderr)
        return 1

    if report.total_files == 0:
        print("No PDF files found; nothing to do.")
        return 0

    _print_summary(report)
    return 0


def cmd_tidy(csv_path: str) -> int:
    """Deduplicate and date-sort an existing group CSV in place."""

    import sys

    from .errors import CsvSchemaError
    from .workflows.convert_flow import tidy_csv

    try:
        count = tidy_csv(csv_path)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return 1
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
        return 1
    except CsvSchemaError as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return 1

    print(f"{csv_path}: {count} transactions")
    return 0


# ---- Typer-based console interface -------------------------------------------


_LOG_LEVEL_HELP = "Log level (env STATEMENT_CSV_LOG_LEVEL, default INFO)."


def _configure_command_logging(ctx: typer.Context, log_level: str | None) -> None:
    global_level = (ctx.obj or {}).get("log_level")
    configure_logging(log_level or global_level)


app = typer.Typer(
    add_completion=False,
    help=(
        "Extract transactions from PDF bank statements with OpenAI and merge them "
        "into one CSV per account directory. Loads OPENAI_API_KEY from a local .env."
    ),
)


@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    *,
    data_dir: Path | None = typer.Option(
        None, help="Directory scanned for PDFs (env STATEMENT_CSV_DATA_DIR, default ./data)."
    ),
    output_dir: Path | None = typer.Option(
        None, help="Directory for the CSV files (env STATEMENT_CSV_OUTPUT_DIR, default CWD)."
    ),
    default_output: str | None = typer.Option(
        None,
        help="CSV name for PDFs directly in the data dir (env STATEMENT_CSV_DEFAULT_OUTPUT).",
    ),
    model: str | None = typer.Option(
        None, help="OpenAI model name (env STATEMENT_CSV_MODEL, default gpt-4o-mini)."
    ),
    log_level: str | None = typer.Option(None, help=_LOG_LEVEL_HELP),
) -> None:
    """Scan PDFs, extract transactions and write merged per-group CSV files."""

    _configure_command_logging(ctx, log_level)
    raise typer.Exit(
        cmd_convert(
            data_dir=data_dir,
            output_dir=output_dir,
            default_output=default_output,
            model=model,
        )
    )


@app.command("tidy")
def tidy_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, typer.Argument(help="Group CSV file to deduplicate and sort")],
    *,
    log_level: str | None = typer.Option(None, help=_LOG_LEVEL_HELP),
) -> None:
    """Deduplicate and date-sort an existing group CSV in place."""

    _configure_command_logging(ctx, log_level)
    raise typer.Exit(cmd_tidy(str(csv_path)))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    log_level: str | None = typer.Option(None, help=_LOG_LEVEL_HELP),
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables) and runs ``convert`` with default settings when no
    subcommand is given. ``--log-level`` here applies to every subcommand;
    a subcommand's own ``--log-level`` takes precedence.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    ctx.obj = {"log_level": log_level}

    if ctx.invoked_subcommand is None:
        configure_logging(log_level)
        raise typer.Exit(cmd_convert())


if __name__ == "__main__":  # pragma: no cover
    app()
