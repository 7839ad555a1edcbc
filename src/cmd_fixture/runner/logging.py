"""Progress output and structured per-step logging."""

from __future__ import annotations

import json
import time
from typing import Any, Protocol

import click

from cmd_fixture.constants import DEFAULT_LOG_TAIL
from cmd_fixture.core.run import Run


class ProgressObserver(Protocol):
    def notify(self, message: str) -> None: ...


class NullObserver:
    """Discards progress messages."""

    def notify(self, message: str) -> None:
        pass


class ConsoleObserver:
    """Echo progress messages to stderr."""

    def notify(self, message: str) -> None:
        click.echo(message, err=True)


class CollectingObserver:
    """Keep progress messages in memory."""

    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


def preview(text: str, length: int) -> str:
    """Quote *text* for a progress message, cut to *length* characters."""
    if len(text) <= length:
        return f'"{text}"'
    return f'"{text[:length]}"...'


class StepLogger:
    """Append-only structured log for a run."""

    def __init__(self, run: Run, echo: bool = True):
        self.run = run
        self.echo = echo
        self._log_path = run.log_path()
        self._fh = None

    def open(self) -> None:
        self._log_path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self._log_path, "a", encoding="utf-8")

    def close(self) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None

    def log_step(
        self,
        step: int,
        row: list[str],
        result: Any = None,
        error: str | None = None,
        check: str | None = None,
    ) -> None:
        entry = {
            "step": step,
            "timestamp": time.time(),
            "row": row,
            "result": result,
            "error": error,
            "check": check,
        }
        line = json.dumps(entry, ensure_ascii=False, default=str)
        if self._fh:
            self._fh.write(line + "\n")
            self._fh.flush()
        if self.echo:
            click.echo(line, err=True)

    def read_last_n(self, n: int = DEFAULT_LOG_TAIL) -> list[dict[str, Any]]:
        if not self._log_path.exists():
            return []
        lines = self._log_path.read_text(encoding="utf-8").strip().splitlines()
        return [json.loads(l) for l in lines[-n:]]
