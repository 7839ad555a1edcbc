"""Runner configuration."""

from __future__ import annotations

import json
import pathlib
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from cmd_fixture.constants import (
    CONFIG_FILE,
    DEFAULT_ENCODING,
    LINE_PREVIEW_LENGTH,
    RUN_DIR,
)
from cmd_fixture.core.errors import ScriptError


class RunnerConfig(BaseModel):
    directory: str = ""
    encoding: str = DEFAULT_ENCODING
    line_preview_length: int = Field(default=LINE_PREVIEW_LENGTH, ge=1)
    step_delay_ms: int = Field(default=0, ge=0)
    stop_on_failure: bool = True
    artifacts_dir: str = RUN_DIR
    write_log: bool = True

    @classmethod
    def from_file(cls, path: str | pathlib.Path | None = None) -> RunnerConfig:
        """Load a JSON config file. A missing default file yields defaults."""
        explicit = path is not None
        p = pathlib.Path(path or CONFIG_FILE)
        if not p.exists():
            if explicit:
                raise ScriptError(f"Config file not found: {p}")
            return cls()
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ScriptError(f"Invalid JSON in config file {p}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ScriptError(f"Config file {p} must contain a JSON object")
        return cls.parse_overrides(raw)

    @classmethod
    def parse_overrides(cls, raw: dict[str, Any]) -> RunnerConfig:
        try:
            return cls(**raw)
        except ValidationError as exc:
            raise ScriptError(f"Invalid configuration: {exc}") from exc

    def merged(self, overrides: dict[str, Any]) -> RunnerConfig:
        """Return a copy with *overrides* applied (``None`` values ignored)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.parse_overrides(data)
