"""Tests for cmd_fixture.core.errors."""

from __future__ import annotations

from cmd_fixture.core.errors import (
    EXIT_OK,
    EXIT_SCRIPT_FAILED,
    CommandError,
    FixtureError,
    ScriptError,
    exit_description,
)


def test_exit_description_ok():
    assert exit_description(EXIT_OK) == "Success"


def test_exit_description_failed():
    assert "failed" in exit_description(EXIT_SCRIPT_FAILED)


def test_exit_description_unknown():
    assert "999" in exit_description(999)


def test_command_error_message_only():
    err = CommandError("No open file available for writing.")
    assert str(err) == "No open file available for writing."
    assert err.cause is None


def test_command_error_wrap_keeps_cause():
    cause = PermissionError(13, "Permission denied")
    err = CommandError.wrap(cause, "Cannot create file")
    assert str(err) == "Cannot create file"
    assert err.cause is cause
    assert err.__cause__ is cause


def test_command_error_wrap_default_message():
    err = CommandError.wrap(FileNotFoundError("gone"))
    assert "FileNotFoundError" in str(err)
    assert "gone" in str(err)


def test_script_error_line_prefix():
    err = ScriptError("Unknown row: 'x'", line=4)
    assert str(err) == "line 4: Unknown row: 'x'"
    assert err.line == 4


def test_all_errors_are_subclasses_of_base():
    for cls in (CommandError, ScriptError):
        assert issubclass(cls, FixtureError)
