"""Script session: directory prefix, file authoring and command launching.

A session is driven one row at a time by a script runner. It keeps a
directory prefix that is prepended to every filename and to whole command
lines, and at most one file that is being authored line by line::

    session = ScriptSession()
    session.set_directory("/tmp/t")
    session.open_file("a.txt")
    session.add_line("hello")
    session.make_executable()
    session.write_and_close()     # /tmp/t/a.txt is written here

Nothing touches storage until ``write_and_close``. Every operation either
completes or raises :class:`CommandError` with the session unchanged. The
one exception is a storage failure inside ``write_and_close``, which keeps
the session open so the write can be retried.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field

from cmd_fixture.constants import (
    DEFAULT_ENCODING,
    DIRECTORY_SEPARATORS,
    LINE_PREVIEW_LENGTH,
)
from cmd_fixture.core.errors import CommandError
from cmd_fixture.core.launcher import LaunchedProcess, ProcessLauncher, SubprocessLauncher
from cmd_fixture.core.storage import LocalStorage, Storage
from cmd_fixture.runner.logging import NullObserver, ProgressObserver, preview

# Encoding failures (ValueError, LookupError) count as storage failures too
STORAGE_ERRORS = (OSError, ValueError, LookupError)


@dataclass
class FileAuthoringState:
    """The file currently open for writing."""

    path: str
    pending_lines: list[str] = field(default_factory=list)
    executable_requested: bool = False

    @property
    def content(self) -> str:
        return "".join(self.pending_lines)


class ScriptSession:
    """Row-by-row fixture state: directory prefix plus at most one open file."""

    def __init__(
        self,
        observer: ProgressObserver | None = None,
        launcher: ProcessLauncher | None = None,
        storage: Storage | None = None,
        encoding: str = DEFAULT_ENCODING,
        line_preview_length: int = LINE_PREVIEW_LENGTH,
    ):
        self.observer = observer or NullObserver()
        self.launcher = launcher or SubprocessLauncher()
        self.storage = storage or LocalStorage(encoding=encoding)
        self.line_preview_length = line_preview_length
        self.directory_prefix = ""
        self.launched: list[LaunchedProcess] = []
        self._open_file: FileAuthoringState | None = None
        self._wake = threading.Event()

    # ── directory prefix ─────────────────────────────────────────

    def set_directory(self, path: str) -> None:
        """Prefix all later filenames and command lines with *path*.

        A separator is appended unless *path* already ends with ``/`` or
        ``\\``. An empty *path* removes the prefix.
        """
        if path and not path.endswith(DIRECTORY_SEPARATORS):
            path = path + os.sep
        self.directory_prefix = path

    def resolve(self, filename: str) -> str:
        return self.directory_prefix + filename

    # ── commands ─────────────────────────────────────────────────

    def run_command(self, command_line: str) -> LaunchedProcess:
        """Launch a command without waiting for it.

        The prefix is prepended to the whole command line, which is then
        split on whitespace. Arguments are not prefixed and quoting is not
        supported. Use :meth:`wait_for` to give the process time to finish.
        """
        argv = self.resolve(command_line).split()
        if not argv:
            raise CommandError("No command given.")
        self.observer.notify(f'Running command "{argv[0]}" with arguments:')
        for i, arg in enumerate(argv[1:], start=1):
            self.observer.notify(f"  arg {i}: {arg}")
        try:
            proc = self.launcher.launch(argv)
        except OSError as exc:
            raise CommandError.wrap(exc, f"Cannot run command \"{argv[0]}\": {exc}")
        self.launched.append(proc)
        return proc

    def still_running(self) -> list[LaunchedProcess]:
        return [p for p in self.launched if p.is_alive]

    # ── one-shot files ───────────────────────────────────────────

    def create_file(self, filename: str, contents: str) -> None:
        path = self.resolve(filename)
        self.observer.notify(f'Creating file "{path}"')
        self._write(path, contents, None)

    def create_executable_file(self, filename: str, contents: str) -> None:
        path = self.resolve(filename)
        self.observer.notify(f'Creating executable file "{path}"')
        self._write(path, contents, True)

    # ── file authoring ───────────────────────────────────────────

    @property
    def is_file_open(self) -> bool:
        return self._open_file is not None

    @property
    def open_file_state(self) -> FileAuthoringState | None:
        return self._open_file

    def open_file(self, filename: str) -> None:
        if self._open_file is not None:
            raise CommandError(
                "A file is already opened. It is not possible to open more "
                "than one file at any given time."
            )
        path = self.resolve(filename).strip()
        self.observer.notify(f'Opening file "{path}"')
        self._open_file = FileAuthoringState(path=path)

    def add_line(self, text: str) -> None:
        if self._open_file is None:
            raise CommandError("No open file available for writing.")
        self.observer.notify(
            f"Adding line to file with content: {preview(text, self.line_preview_length)}"
        )
        self._open_file.pending_lines.append(text.strip() + os.linesep)

    def make_executable(self) -> None:
        if self._open_file is None:
            raise CommandError("No open file available to make executable.")
        self._open_file.executable_requested = True

    def write_and_close(self) -> None:
        state = self._open_file
        if state is None:
            raise CommandError("No file has been opened for writing.")
        self.observer.notify(f'Writing and closing file "{state.path}"')
        try:
            self.storage.write(state.path, state.content, state.executable_requested)
        except STORAGE_ERRORS as exc:
            raise CommandError.wrap(
                exc, f"Error writing and closing file with the name: {state.path}"
            )
        self._open_file = None

    # ── checks and housekeeping ──────────────────────────────────

    def delete_file(self, filename: str) -> bool:
        path = self.resolve(filename)
        self.observer.notify(f'Deleting file "{path}"')
        if not self.storage.exists(path):
            raise CommandError(f'File "{path}" does not exist.')
        return self.storage.delete(path)

    def file_mutated_after(self, filename: str, epoch_seconds: int) -> bool:
        """True if the file was modified after *epoch_seconds*.

        A missing file counts as modified at the epoch.
        """
        return self.storage.last_modified_ms(self.resolve(filename)) > epoch_seconds * 1000

    def file_mutated_before(self, filename: str, epoch_seconds: int) -> bool:
        """True if the file was modified before *epoch_seconds*.

        A missing file counts as modified at the epoch.
        """
        return self.storage.last_modified_ms(self.resolve(filename)) < epoch_seconds * 1000

    def wait_for(self, seconds: float) -> None:
        """Pause for *seconds*. :meth:`interrupt` ends the pause early."""
        self.observer.notify(f"Waiting for {seconds} second(s)")
        interrupted = self._wake.wait(max(float(seconds), 0.0))
        self._wake.clear()
        if interrupted:
            self.observer.notify("Wait interrupted, continuing")

    def interrupt(self) -> None:
        self._wake.set()

    def _write(self, path: str, contents: str, executable: bool | None) -> None:
        try:
            self.storage.write(path, contents, executable)
        except STORAGE_ERRORS as exc:
            raise CommandError.wrap(exc, f'Cannot create file "{path}": {exc}')
