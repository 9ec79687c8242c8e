"""Runtime settings for a conversion run.

Values come from environment variables (a local ``.env`` is loaded by the CLI
via ``python-dotenv`` before this module reads them) and may be overridden by
explicit keyword arguments, which is how CLI options are threaded through.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from .errors import ConfigError

DEFAULT_DATA_DIR = "./data"
DEFAULT_OUTPUT = "kontoauszuege.csv"
DEFAULT_MODEL = "gpt-4o-mini"
CSV_SUFFIX = ".csv"

_ENV_PREFIX = "STATEMENT_CSV_"


@dataclass(frozen=True, slots=True)
class Settings:
    """Immutable configuration for one run.

    Attributes
    ----------
    data_dir:
        Root directory scanned recursively for PDF statements.
    output_dir:
        Directory receiving ``<group>.csv`` files (CWD by default).
    default_output:
        Group file name for PDFs placed directly in ``data_dir``.
    model:
        Model name used for the extraction call.
    temperature:
        Sampling temperature; fixed at ``0`` to minimize response variance.
    """

    data_dir: Path = Path(DEFAULT_DATA_DIR)
    output_dir: Path = Path(".")
    default_output: str = DEFAULT_OUTPUT
    model: str = DEFAULT_MODEL
    temperature: float = 0.0

    def __post_init__(self) -> None:
        name = self.default_output
        if not name.endswith(CSV_SUFFIX) or name == CSV_SUFFIX:
            raise ConfigError(f"default output must be a '<name>.csv' file name, got {name!r}")
        if Path(name).name != name:
            raise ConfigError(f"default output must not contain a directory part, got {name!r}")
        if not self.model.strip():
            raise ConfigError("model name must be non-empty")

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        data_dir: str | os.PathLike[str] | None = None,
        output_dir: str | os.PathLike[str] | None = None,
        default_output: str | None = None,
        model: str | None = None,
    ) -> Settings:
        """Build settings from ``STATEMENT_CSV_*`` variables plus overrides.

        Explicit keyword arguments win over the environment; blank env values
        are ignored.
        """

        source = os.environ if env is None else env

        def _env(key: str) -> str | None:
            val = source.get(_ENV_PREFIX + key)
            return val.strip() if val and val.strip() else None

        base = cls()
        return replace(
            base,
            data_dir=Path(data_dir or _env("DATA_DIR") or base.data_dir),
            output_dir=Path(output_dir or _env("OUTPUT_DIR") or base.output_dir),
            default_output=default_output or _env("DEFAULT_OUTPUT") or base.default_output,
            model=model or _env("MODEL") or base.model,
        )

    def output_path(self, group: str) -> Path:
        return self.output_dir / group


__all__ = ["DEFAULT_OUTPUT", "Settings"]
