"""Filesystem access used by the fixture."""

from __future__ import annotations

import os
import pathlib
import stat
from typing import Protocol

from cmd_fixture.constants import DEFAULT_ENCODING

# Execute bits are only meaningful on POSIX; elsewhere they are skipped.
SUPPORTS_EXECUTABLE_BIT = os.name == "posix"

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class Storage(Protocol):
    def write(self, path: str, content: str, executable: bool | None = None) -> None: ...

    def exists(self, path: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def last_modified_ms(self, path: str) -> int: ...


def set_executable(path: str | pathlib.Path, executable: bool) -> None:
    """Add or clear execute bits, like ``chmod +x`` / ``chmod -x``.

    Execute bits are added where the matching read bit is set.
    """
    if not SUPPORTS_EXECUTABLE_BIT:
        return
    mode = os.stat(path).st_mode
    if executable:
        new_mode = mode | ((mode & 0o444) >> 2) | stat.S_IXUSR
    else:
        new_mode = mode & ~_EXEC_BITS
    if new_mode != mode:
        os.chmod(path, stat.S_IMODE(new_mode))


def is_executable(path: str | pathlib.Path) -> bool:
    return bool(os.stat(path).st_mode & stat.S_IXUSR)


class LocalStorage:
    """Host filesystem."""

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.encoding = encoding

    def write(self, path: str, content: str, executable: bool | None = None) -> None:
        """Create or truncate *path* and write *content* verbatim.

        ``executable=None`` leaves the file mode as the OS created it. The
        content is encoded before the file is opened, so an encoding error
        leaves an existing file untouched.
        """
        data = content.encode(self.encoding)
        with open(path, "wb") as fh:
            if executable is not None:
                set_executable(path, executable)
            fh.write(data)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def delete(self, path: str) -> bool:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.remove(path)
        except OSError:
            return False
        return True

    def last_modified_ms(self, path: str) -> int:
        """Modification time in epoch milliseconds, or 0 if *path* cannot be stat'ed."""
        try:
            return os.stat(path).st_mtime_ns // 1_000_000
        except OSError:
            return 0
