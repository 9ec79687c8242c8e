"""Logging for ``statement_csv``.

Everything in the package logs under the ``"statement_csv"`` logger, which
stays silent (a lone ``NullHandler``) until :func:`configure_logging` is
called. The CLI calls it once per process, after option parsing, with the
level from ``--log-level`` or ``STATEMENT_CSV_LOG_LEVEL``.

Records go to stderr so that they never mix into the summary on stdout. The
PDF and HTTP libraries log through the root logger; their thresholds are
raised here so per-page pdfminer warnings and per-request httpx lines do not
break the in-place progress display.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "statement_csv"
_LEVEL_ENV_VAR = "STATEMENT_CSV_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Minimum levels for third-party loggers that are noisy during a batch run
_LIBRARY_LEVELS: dict[str, int] = {
    "pdfminer": logging.ERROR,
    "httpx": logging.WARNING,
}

_CONFIGURED = False


def _level_from_name(value: str) -> int | None:
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    numeric = getattr(logging, value, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    """Resolve ``level``, then the env var, then ``INFO``; bad names fall through."""

    if isinstance(level, int):
        return level
    for candidate in (level, os.getenv(_LEVEL_ENV_VAR)):
        if candidate:
            parsed = _level_from_name(candidate)
            if parsed is not None:
                return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Attach the package's stream handler; later calls are no-ops.

    ``level`` may be an int, a level name or a numeric string. ``fmt``
    replaces the default ``"<time> <logger> <LEVEL> <message>"`` layout.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    for name, floor in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(floor)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``; silent until :func:`configure_logging`."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
