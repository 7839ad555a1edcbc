"""Exception hierarchy and exit codes."""

from __future__ import annotations

# Exit codes
EXIT_OK = 0
EXIT_GENERAL_ERROR = 1
EXIT_SCRIPT_FAILED = 2
EXIT_SCRIPT_INVALID = 4

_EXIT_DESCRIPTIONS = {
    EXIT_OK: "Success",
    EXIT_GENERAL_ERROR: "General error",
    EXIT_SCRIPT_FAILED: "A row failed (command error or failed check)",
    EXIT_SCRIPT_INVALID: "Script could not be loaded or contains unknown rows",
}


def exit_description(code: int) -> str:
    """Return a human-readable description for *code*."""
    return _EXIT_DESCRIPTIONS.get(code, f"Unknown error (code {code})")


class FixtureError(Exception):
    """Base exception for cmd-fixture."""


class CommandError(FixtureError):
    """A fixture operation could not be carried out.

    Raised for precondition violations (opening a second file, writing with
    no file open) and for storage or process-launch failures. ``cause`` holds
    the underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        if cause is not None and message == "":
            message = str(cause)
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def wrap(cls, cause: BaseException, message: str = "") -> CommandError:
        return cls(message or f"{type(cause).__name__}: {cause}", cause)


class ScriptError(FixtureError):
    """Script definition error (unreadable file, unknown row, bad arguments)."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
