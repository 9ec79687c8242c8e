"""Exception types raised by ``statement_csv``."""

from __future__ import annotations

import csv


class StatementCsvError(Exception):
    """Base class for errors raised by this package."""


class ConfigError(StatementCsvError, ValueError):
    """Invalid configuration value (env var or CLI option)."""


class ScanRootNotFoundError(StatementCsvError, FileNotFoundError):
    """The directory to scan for PDF statements is missing or not a directory."""


class CsvSchemaError(StatementCsvError, csv.Error):
    """An existing group CSV could not be read or has an unexpected header."""


class ExtractionError(StatementCsvError, ValueError):
    """The extraction service returned a response that could not be used."""


__all__ = [
    "ConfigError",
    "CsvSchemaError",
    "ExtractionError",
    "ScanRootNotFoundError",
    "StatementCsvError",
]
