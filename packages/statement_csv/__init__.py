"""Public interface for the ``statement_csv`` package.

Symbol re-exports only; no runtime logic and no side effects at import time.
"""

from .config import Settings
from .errors import (
    ConfigError,
    CsvSchemaError,
    ExtractionError,
    ScanRootNotFoundError,
    StatementCsvError,
)
from .grouping import discover_pdf_files, group_files, group_name
from .merge import merge_transactions
from .models import (
    ExtractionResult,
    ExtractionStatus,
    RunReport,
    Transaction,
    normalize_description,
)
from .workflows import convert_statements, tidy_csv

__all__ = [
    # Workflows
    "convert_statements",
    "tidy_csv",
    # Core
    "discover_pdf_files",
    "group_files",
    "group_name",
    "merge_transactions",
    "normalize_description",
    # Models / config
    "ExtractionResult",
    "ExtractionStatus",
    "RunReport",
    "Settings",
    "Transaction",
    # Errors
    "ConfigError",
    "CsvSchemaError",
    "ExtractionError",
    "ScanRootNotFoundError",
    "StatementCsvError",
]
