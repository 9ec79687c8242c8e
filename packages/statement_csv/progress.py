"""Terminal progress output for a conversion run.

Two lines are rendered after every processed file:

    Total: [40.0%] 2/5 | Elapsed: 0:12 | Remaining: 0:18
    Groups: DKB: 2/3 (67%) | N26: 0/2 (0%) | Errors: 0

On a TTY both lines are redrawn in place. On other streams (pipes, log files)
a single combined line is written roughly every tenth of the run and after
the last file.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Callable
from typing import IO

from .config import CSV_SUFFIX
from .models import RunContext

_CURSOR_UP = "\x1b[1A"
_CLEAR_LINE = "\x1b[2K\r"


def format_elapsed(seconds: float) -> str:
    """Format ``seconds`` as ``m:ss`` (minutes are not wrapped into hours)."""

    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def _strip_csv(name: str) -> str:
    return name[: -len(CSV_SUFFIX)] if name.endswith(CSV_SUFFIX) else name


class ProgressReporter:
    """Render run progress to ``stream``.

    Parameters
    ----------
    stream:
        Output stream (defaults to ``sys.stdout``).
    is_tty:
        Force TTY/non-TTY rendering; detected from ``stream`` when ``None``.
    clock:
        Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        stream: IO[str] | None = None,
        *,
        is_tty: bool | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._stream = stream if stream is not None else sys.stdout
        if is_tty is None:
            isatty = getattr(self._stream, "isatty", None)
            is_tty = bool(isatty()) if callable(isatty) else False
        self._is_tty = is_tty
        self._clock = clock
        self._started: float | None = None
        self._drawn = False

    def start(self) -> None:
        self._started = self._clock()
        self._drawn = False

    def message(self, text: str) -> None:
        self._stream.write(text + "\n")
        self._stream.flush()

    def total_line(self, ctx: RunContext) -> str:
        now = self._clock()
        elapsed = now - (self._started if self._started is not None else now)
        done = ctx.processed
        total = ctx.total_files
        avg = elapsed / done if done else 0.0
        remaining = avg * (total - done)
        percent = (done / total * 100.0) if total else 100.0
        return (
            f"Total: [{percent:.1f}%] {done}/{total} | "
            f"Elapsed: {format_elapsed(elapsed)} | Remaining: {format_elapsed(remaining)}"
        )

    def groups_line(self, ctx: RunContext) -> str:
        parts = [
            f"{_strip_csv(name)}: {stats.processed}/{stats.total} ({stats.percent:.0f}%)"
            for name, stats in ctx.group_stats.items()
        ]
        return f"Groups: {' | '.join(parts)} | Errors: {len(ctx.errors)}"

    def update(self, ctx: RunContext) -> None:
        """Render progress after a file has been processed."""

        if self._started is None:
            self.start()

        total_line = self.total_line(ctx)
        groups_line = self.groups_line(ctx)
        if self._is_tty:
            out = ""
            if self._drawn:
                out += _CURSOR_UP
            out += _CLEAR_LINE + total_line + "\n" + _CLEAR_LINE + groups_line
            self._stream.write(out)
            self._drawn = True
        else:
            step = max(1, ctx.total_files // 10)
            if ctx.processed % step == 0 or ctx.processed == ctx.total_files:
                self._stream.write(f"{total_line} | {groups_line}\n")
        self._stream.flush()

    def finish(self) -> None:
        """Move below the in-place progress block."""

        if self._is_tty and self._drawn:
            self._stream.write("\n")
            self._stream.flush()
        self._drawn = False


__all__ = ["ProgressReporter", "format_elapsed"]
