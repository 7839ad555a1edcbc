"""Global constants."""

import pathlib


def _find_project_root() -> pathlib.Path:
    """Find the project root (directory containing cmd-fixture.json or .git).

    Search order:
      1. Walk up from cwd
      2. Walk up from the package source directory (editable install)
    Fallback: cwd
    """
    markers = (CONFIG_FILENAME, ".git")

    def _search(start: pathlib.Path) -> pathlib.Path | None:
        for d in [start, *start.parents]:
            if any((d / m).exists() for m in markers):
                return d
        return None

    found = _search(pathlib.Path.cwd())
    if found:
        return found

    pkg_dir = pathlib.Path(__file__).resolve().parent  # src/cmd_fixture/
    found = _search(pkg_dir)
    if found:
        return found

    return pathlib.Path.cwd()


CONFIG_FILENAME = "cmd-fixture.json"
PROJECT_ROOT = _find_project_root()

RUN_DIR = str(PROJECT_ROOT / "artifacts" / "runs")
CONFIG_FILE = str(PROJECT_ROOT / CONFIG_FILENAME)

DEFAULT_ENCODING = "utf-8"
# Progress messages show at most this many characters of an added line
LINE_PREVIEW_LENGTH = 20
DEFAULT_LOG_TAIL = 20

# Trailing separators accepted as-is by set_directory
DIRECTORY_SEPARATORS = ("/", "\\")
