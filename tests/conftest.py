"""Shared fixtures: in-memory storage and a recording launcher."""

from __future__ import annotations

import pytest

from cmd_fixture.core.launcher import LaunchedProcess
from cmd_fixture.core.session import ScriptSession
from cmd_fixture.runner.logging import CollectingObserver


class FakeStorage:
    def __init__(self):
        self.files: dict[str, str] = {}
        self.executable: dict[str, bool] = {}
        self.mtimes: dict[str, int] = {}
        self.fail_writes = False

    def write(self, path, content, executable=None):
        if self.fail_writes:
            raise PermissionError(13, "Permission denied", path)
        self.files[path] = content
        if executable is not None:
            self.executable[path] = executable
        self.mtimes[path] = 1_000_000

    def exists(self, path):
        return path in self.files

    def delete(self, path):
        self.files.pop(path)
        return True

    def last_modified_ms(self, path):
        return self.mtimes.get(path, 0)


class FakeLauncher:
    def __init__(self, error: OSError | None = None):
        self.calls: list[list[str]] = []
        self.error = error

    def launch(self, argv):
        if self.error is not None:
            raise self.error
        self.calls.append(list(argv))
        return LaunchedProcess(pid=999_999_999, argv=argv)


@pytest.fixture()
def storage():
    return FakeStorage()


@pytest.fixture()
def launcher():
    return FakeLauncher()


@pytest.fixture()
def observer():
    return CollectingObserver()


@pytest.fixture()
def fake_session(storage, launcher, observer):
    return ScriptSession(observer=observer, launcher=launcher, storage=storage)
