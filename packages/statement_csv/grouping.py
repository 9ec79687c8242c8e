"""PDF discovery and group routing.

A PDF's group is decided by the first path segment below the scan root:

- ``data/DKB/jan.pdf``      -> ``DKB.csv``
- ``data/DKB/2023/q1.pdf``  -> ``DKB.csv``
- ``data/statement.pdf``    -> the default group (``kontoauszuege.csv``)
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from os import PathLike
from pathlib import Path

from .config import CSV_SUFFIX, DEFAULT_OUTPUT
from .errors import ScanRootNotFoundError
from .logging_setup import get_logger

PDF_SUFFIX = ".pdf"

_logger = get_logger("statement_csv.grouping")


def group_name(
    file_path: str | PathLike[str],
    root: str | PathLike[str],
    *,
    default: str = DEFAULT_OUTPUT,
) -> str:
    """Return the destination CSV name for ``file_path`` under ``root``."""

    parts = Path(os.path.relpath(file_path, root)).parts
    if len(parts) > 1:
        return f"{parts[0]}{CSV_SUFFIX}"
    return default


def discover_pdf_files(root: str | PathLike[str]) -> list[Path]:
    """Return every ``*.pdf`` (case-insensitive) below ``root``, recursively.

    Entries of each directory are visited in name order so runs are
    reproducible across filesystems. Symlinked directories are followed, but
    every real directory is scanned at most once, so link cycles terminate.
    Subdirectories that cannot be listed are skipped with a warning; only a
    missing or non-directory ``root`` is an error.
    """

    base = Path(root)
    if not base.exists():
        raise ScanRootNotFoundError(f"Directory {os.fspath(base)} does not exist.")
    if not base.is_dir():
        raise ScanRootNotFoundError(f"Path {os.fspath(base)} is not a directory.")

    results: list[Path] = []
    _walk(base, results, visited={base.resolve()})
    return results


def _walk(directory: Path, results: list[Path], *, visited: set[Path]) -> None:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            real = entry.resolve()
            if real in visited:
                _logger.warning("discover:skip_dir path=%s reason=already_visited", entry)
                continue
            visited.add(real)
            try:
                _walk(entry, results, visited=visited)
            except OSError as e:
                _logger.warning("discover:skip_dir path=%s reason=%s", entry, type(e).__name__)
        elif entry.name.lower().endswith(PDF_SUFFIX):
            results.append(entry)


def group_files(
    files: Iterable[Path],
    root: str | PathLike[str],
    *,
    default: str = DEFAULT_OUTPUT,
) -> dict[str, list[Path]]:
    """Partition ``files`` by group, preserving first-seen group and file order."""

    by_group: dict[str, list[Path]] = {}
    for f in files:
        by_group.setdefault(group_name(f, root, default=default), []).append(f)
    return by_group


__all__ = ["discover_pdf_files", "group_files", "group_name"]
