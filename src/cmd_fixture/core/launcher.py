"""Process launching for ``run command`` rows."""

from __future__ import annotations

import subprocess
from typing import Protocol

import psutil


class LaunchedProcess:
    """A process started by the fixture. Nothing waits on it."""

    def __init__(self, pid: int, argv: list[str], popen: subprocess.Popen | None = None):
        self.pid = pid
        self.argv = list(argv)
        self._popen = popen

    @property
    def is_alive(self) -> bool:
        if self._popen is not None:
            # Reap a finished child so it is not reported as a zombie
            if self._popen.poll() is not None:
                return False
        if not psutil.pid_exists(self.pid):
            return False
        try:
            return psutil.Process(self.pid).status() != psutil.STATUS_ZOMBIE
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False

    def __repr__(self) -> str:
        return f"LaunchedProcess(pid={self.pid}, argv={self.argv!r})"


class ProcessLauncher(Protocol):
    def launch(self, argv: list[str]) -> LaunchedProcess:
        """Start *argv* and return immediately. Raises OSError if it cannot start."""
        ...


class SubprocessLauncher:
    """Fire-and-forget launcher backed by ``subprocess.Popen``."""

    def __init__(self, cwd: str | None = None):
        self.cwd = cwd

    def launch(self, argv: list[str]) -> LaunchedProcess:
        proc = subprocess.Popen(argv, cwd=self.cwd)
        return LaunchedProcess(pid=proc.pid, argv=argv, popen=proc)
