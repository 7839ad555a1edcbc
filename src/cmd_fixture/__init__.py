"""Table-driven test fixture for shell-like file and command steps."""

__version__ = "0.1.0"
