"""Pytest configuration for test isolation.

Settings are read from ``STATEMENT_CSV_*`` environment variables and the CLI
loads a ``.env`` from the working directory. To keep tests hermetic, every
test runs with those variables cleared, a dummy ``OPENAI_API_KEY`` and the
working directory set to its own temporary directory.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("STATEMENT_CSV_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    workdir = tmp_path / "cwd"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)