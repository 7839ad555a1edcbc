"""Script runner: executes rows in order against one ScriptSession."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from cmd_fixture.config import RunnerConfig
from cmd_fixture.core.errors import CommandError, ScriptError
from cmd_fixture.core.run import Run
from cmd_fixture.core.session import ScriptSession
from cmd_fixture.runner.logging import ProgressObserver, StepLogger
from cmd_fixture.testing.rows import check_outcome, execute_row, parse_row
from cmd_fixture.testing.script import Script


@dataclass
class ScriptResult:
    script_id: str
    passed: bool
    rows_run: int
    failures: list[dict[str, Any]] = field(default_factory=list)
    run_id: str = ""
    still_running: list[int] = field(default_factory=list)
    elapsed_s: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "script_id": self.script_id,
            "passed": self.passed,
            "rows_run": self.rows_run,
            "failures": self.failures,
            "run_id": self.run_id,
            "still_running": self.still_running,
            "elapsed_s": round(self.elapsed_s, 3),
        }


def validate_script(script: Script) -> list[str]:
    """Return one message per row that does not match the vocabulary."""
    problems = []
    for row in script.rows:
        try:
            parse_row(row)
        except ScriptError as exc:
            problems.append(str(exc))
    return problems


def run_script(
    script: Script,
    config: RunnerConfig | None = None,
    session: ScriptSession | None = None,
    observer: ProgressObserver | None = None,
    echo_log: bool = True,
    overrides: dict[str, Any] | None = None,
) -> ScriptResult:
    """Execute a script and return results.

    Settings come from *overrides*, then the script's own ``config``
    block, then *config*.
    """
    config = (config or RunnerConfig()).merged(script.config).merged(overrides or {})
    if session is None:
        session = ScriptSession(
            observer=observer,
            encoding=config.encoding,
            line_preview_length=config.line_preview_length,
        )

    run = Run(artifacts_dir=config.artifacts_dir)
    logger = None
    if config.write_log:
        run.start()
        logger = StepLogger(run, echo=echo_log)
        logger.open()

    result = ScriptResult(
        script_id=script.id, passed=True, rows_run=0, run_id=run.run_id
    )

    directory = script.directory if script.directory is not None else config.directory
    if directory:
        session.set_directory(directory)

    try:
        for row in script.rows:
            step = run.next_step()
            result.rows_run = step
            failure: dict[str, Any] | None = None
            value: Any = None

            try:
                parsed = parse_row(row)
                value = execute_row(session, parsed)
            except (CommandError, ScriptError) as exc:
                failure = {"step": step, "row": row.cells, "error": str(exc)}
                if logger:
                    logger.log_step(step, row.cells, error=str(exc))
            else:
                check = check_outcome(parsed, value)
                if check is not None:
                    failure = {"step": step, "row": row.cells, "check": check}
                if logger:
                    logger.log_step(step, row.cells, result=value, check=check)

            if failure is not None:
                result.passed = False
                result.failures.append(failure)
                if config.stop_on_failure:
                    break

            if config.step_delay_ms > 0:
                time.sleep(config.step_delay_ms / 1000.0)

        state = session.open_file_state
        if state is not None:
            result.passed = False
            result.failures.append({
                "step": result.rows_run,
                "row": [],
                "error": f"file left open: {state.path}",
            })
    finally:
        if logger:
            logger.close()

    result.still_running = [p.pid for p in session.still_running()]
    result.elapsed_s = run.elapsed_s
    return result
