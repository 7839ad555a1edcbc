"""CLI entry point — click-based commands."""

from __future__ import annotations

import json
import pathlib
import sys
from typing import Optional, Tuple

import click

from cmd_fixture import __version__
from cmd_fixture.constants import DEFAULT_LOG_TAIL
from cmd_fixture.core.errors import (
    EXIT_GENERAL_ERROR,
    EXIT_OK,
    EXIT_SCRIPT_FAILED,
    EXIT_SCRIPT_INVALID,
    ScriptError,
    exit_description,
)


@click.group()
@click.version_option(version=__version__, prog_name="cmd-fixture")
def main() -> None:
    """Run table-driven file and command scripts."""


# ── run ───────────────────────────────────────────────────────────

@main.command()
@click.argument("scripts", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--directory", default=None, help="Initial directory prefix.")
@click.option("--config", "config_path", default=None, metavar="FILE",
              help="JSON runner configuration file.")
@click.option("--step-delay-ms", default=None, type=click.IntRange(min=0),
              help="Pause between rows, in milliseconds.")
@click.option("--keep-going", is_flag=True, help="Continue after a failed row.")
@click.option("--quiet", is_flag=True, help="Only print the summary.")
@click.option("--no-log", is_flag=True, help="Do not write a runner.log file.")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON.")
def run(
    scripts: Tuple[str, ...],
    directory: Optional[str],
    config_path: Optional[str],
    step_delay_ms: Optional[int],
    keep_going: bool,
    quiet: bool,
    no_log: bool,
    as_json: bool,
) -> None:
    """Run one or more scripts in order."""
    from cmd_fixture.config import RunnerConfig
    from cmd_fixture.runner.logging import ConsoleObserver, NullObserver
    from cmd_fixture.testing.runner import run_script
    from cmd_fixture.testing.script import Script

    try:
        base = RunnerConfig.from_file(config_path)
        loaded = [Script.from_file(pathlib.Path(p)) for p in scripts]
    except ScriptError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_SCRIPT_INVALID)

    observer = NullObserver() if quiet else ConsoleObserver()
    results = []
    for script in loaded:
        cli_overrides = {
            "directory": directory,
            "step_delay_ms": step_delay_ms,
            "stop_on_failure": False if keep_going else None,
            "write_log": False if no_log else None,
        }
        try:
            result = run_script(
                script, config=base, observer=observer,
                echo_log=not quiet, overrides=cli_overrides,
            )
        except ScriptError as exc:
            click.echo(f"Error: {script.id}: {exc}", err=True)
            sys.exit(EXIT_SCRIPT_INVALID)
        except OSError as exc:
            # run artifacts could not be written
            click.echo(f"Error: {script.id}: {exc}", err=True)
            sys.exit(EXIT_GENERAL_ERROR)
        results.append(result)
        if not as_json:
            _print_result(result)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in results], indent=2, default=str))

    if all(r.passed for r in results):
        sys.exit(EXIT_OK)
    click.echo(exit_description(EXIT_SCRIPT_FAILED), err=True)
    sys.exit(EXIT_SCRIPT_FAILED)


def _print_result(result) -> None:
    status = "PASS" if result.passed else "FAIL"
    click.echo(
        f"[{status}] {result.script_id}: {result.rows_run} row(s) run"
        f" in {result.elapsed_s:.2f}s (run {result.run_id})"
    )
    for f in result.failures:
        detail = f.get("error") or f.get("check")
        row = " | ".join(f.get("row", []))
        click.echo(f"  step {f['step']}: | {row} | -> {detail}")
    if result.still_running:
        pids = ", ".join(str(p) for p in result.still_running)
        click.echo(f"  still running: {pids}")


# ── check ─────────────────────────────────────────────────────────

@main.command()
@click.argument("scripts", nargs=-1, required=True, type=click.Path(dir_okay=False))
def check(scripts: Tuple[str, ...]) -> None:
    """Validate scripts against the row vocabulary without running them."""
    from cmd_fixture.testing.runner import validate_script
    from cmd_fixture.testing.script import Script

    ok = True
    for p in scripts:
        try:
            script = Script.from_file(pathlib.Path(p))
        except ScriptError as exc:
            click.echo(f"{p}: {exc}", err=True)
            ok = False
            continue
        problems = validate_script(script)
        for msg in problems:
            click.echo(f"{p}: {msg}", err=True)
        if problems:
            ok = False
        else:
            click.echo(f"{p}: {len(script.rows)} row(s) OK")
    sys.exit(EXIT_OK if ok else EXIT_SCRIPT_INVALID)


# ── rows ──────────────────────────────────────────────────────────

@main.command()
def rows() -> None:
    """List the row vocabulary."""
    from cmd_fixture.testing.rows import VOCABULARY

    for cmd in VOCABULARY.values():
        click.echo(f"  {cmd.usage}")
        click.echo(f"      {cmd.help}")


# ── tail ──────────────────────────────────────────────────────────

@main.command()
@click.argument("run_id")
@click.option("-n", "count", default=DEFAULT_LOG_TAIL, show_default=True,
              type=click.IntRange(min=1), help="Number of steps to show.")
@click.option("--config", "config_path", default=None, metavar="FILE",
              help="JSON runner configuration file (for artifacts_dir).")
def tail(run_id: str, count: int, config_path: Optional[str]) -> None:
    """Show the last logged steps of a run."""
    from cmd_fixture.config import RunnerConfig
    from cmd_fixture.core.run import Run
    from cmd_fixture.runner.logging import StepLogger

    try:
        config = RunnerConfig.from_file(config_path)
    except ScriptError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(EXIT_SCRIPT_INVALID)

    run = Run(run_id=run_id, artifacts_dir=config.artifacts_dir)
    if not run.log_path().exists():
        click.echo(f"No log for run '{run_id}' at {run.log_path()}", err=True)
        sys.exit(EXIT_GENERAL_ERROR)

    for entry in StepLogger(run, echo=False).read_last_n(count):
        row = " | ".join(entry.get("row") or [])
        outcome = entry.get("error") or entry.get("check") or "ok"
        click.echo(f"  step {entry['step']}: | {row} | -> {outcome}")
