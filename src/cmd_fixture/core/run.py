"""Run lifecycle management."""

from __future__ import annotations

import pathlib
import time
import uuid
from dataclasses import dataclass, field

from cmd_fixture.constants import RUN_DIR


@dataclass
class Run:
    """One script execution = one run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    started_at: float = field(default_factory=time.time)
    artifacts_dir: str = RUN_DIR
    base_dir: pathlib.Path = field(init=False)
    step_count: int = 0

    def __post_init__(self):
        self.base_dir = pathlib.Path(self.artifacts_dir) / self.run_id

    def start(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def next_step(self) -> int:
        self.step_count += 1
        return self.step_count

    def log_path(self) -> pathlib.Path:
        return self.base_dir / "runner.log"

    @property
    def elapsed_s(self) -> float:
        return time.time() - self.started_at
