"""Operator-facing output: an interactive stream or an append-only log file.

Every line is either bare device output or a status line prefixed with a
bracketed timestamp, e.g. ``[03/07/2026 9:05:02] Configuring 10.0.0.1``.
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, TextIO

from fleetcmd.utils.logging import get_logger

log = get_logger(__name__)

FAILURE_HINT = "Verify the username and password and that the device is reachable."


def format_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"[{now:%m/%d/%Y} {now.hour}:{now:%M:%S}]"


class Reporter:
    """Writes to *log_path* when given, otherwise to *stream*.

    When the log file already exists, *confirm* is asked once whether to
    overwrite it. Only an affirmative answer replaces the file; otherwise
    new lines are appended after the existing content.
    """

    def __init__(
        self,
        log_path: str | Path | None = None,
        *,
        stream: TextIO | None = None,
        timestamp: Callable[[], str] = format_timestamp,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._log_path = Path(log_path) if log_path else None
        self._stream = stream
        self._timestamp = timestamp
        self._confirm = confirm
        self._opened = False

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def open(self) -> None:
        """Run the overwrite gate; later calls are no-ops."""
        if self._opened:
            return
        self._opened = True
        if self._log_path is None:
            return
        if self._log_path.exists():
            question = f"Log file {self._log_path} already exists. Overwrite it?"
            if self._confirm is not None and self._confirm(question):
                self._log_path.unlink()
                self._log_path.touch()
                log.info("reporter.log_overwritten", path=str(self._log_path))
            else:
                log.info("reporter.log_appending", path=str(self._log_path))
        else:
            self._log_path.touch()
            log.info("reporter.log_created", path=str(self._log_path))

    # ── line emitters ─────────────────────────────────────────────────

    def status(self, message: str) -> None:
        self._write(f"{self._timestamp()} {message}")

    def content(self, text: str) -> None:
        self._write(text)

    def failure(self, device: str) -> None:
        """Standard two-line message for a device that could not be processed."""
        self.status(f"ERROR: Unable to connect to {device}.")
        self.status(FAILURE_HINT)

    def _write(self, line: str) -> None:
        self.open()
        if self._log_path is not None:
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
            return
        stream = self._stream or sys.stdout
        stream.write(line + "\n")
        stream.flush()
