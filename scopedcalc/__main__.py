"""CLI for scopedcalc.

Usage:
    python -m scopedcalc run                          # 100 slots, 10 + 5
    python -m scopedcalc run --a 10 --b 0 --op /      # Division guard, buffer still released
    python -m scopedcalc run --expect 15 --json       # Check the answer, JSON report on stdout
    python -m scopedcalc eval 7 '*' 6                 # Evaluate without a buffer
    python -m scopedcalc ops                          # Show supported operators
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from scopedcalc.config import Settings, parse_log_level, setup_logging
from scopedcalc.errors import EvaluationFailure
from scopedcalc.evaluator import evaluate
from scopedcalc.models import ExitCode
from scopedcalc.report import format_status, render_operations, render_report
from scopedcalc.runner import run

app = typer.Typer(
    name="scopedcalc",
    help="Scoped buffer lifecycle around a guarded arithmetic evaluation",
    no_args_is_help=True,
)
console = Console(stderr=True)


def _load_settings(log_level: Optional[str]) -> Settings:
    try:
        settings = Settings.from_env()
        level = parse_log_level(log_level, "--log-level") if log_level else settings.log_level
    except ValueError as e:
        console.print(f"Config error: {e}", style="red", markup=False, highlight=False)
        raise typer.Exit(int(ExitCode.USAGE))
    setup_logging(level, console)
    return settings


@app.command("run")
def cmd_run(
    size: Optional[int] = typer.Option(None, "--size", "-n", min=1, help="Buffer slots (default: SCOPEDCALC_BUFFER_SIZE or 100)"),
    a: int = typer.Option(10, "--a", help="Left operand"),
    b: int = typer.Option(5, "--b", help="Right operand"),
    op: str = typer.Option("+", "--op", help="Operator: + - * /"),
    expected: Optional[int] = typer.Option(None, "--expect", help="Check a successful result against this value"),
    as_json: bool = typer.Option(False, "--json", help="Write the run report as JSON to stdout"),
    save: Optional[Path] = typer.Option(None, "--save", help="Also write the JSON report to this file"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Status line only, no table"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override SCOPEDCALC_LOG_LEVEL"),
) -> None:
    """Allocate, fill, evaluate, release. Exit code reflects the outcome."""
    settings = _load_settings(log_level)
    report = run(size=size, a=a, b=b, op=op, expected=expected, settings=settings)

    if not quiet:
        render_report(report, console)
    style = "green" if report.exit_code == ExitCode.OK else "red"
    console.print(format_status(report), style=style, markup=False, highlight=False)

    if save:
        report.save(save)
    if as_json:
        typer.echo(json.dumps(report.to_dict()))

    if report.exit_code != ExitCode.OK:
        raise typer.Exit(int(report.exit_code))


@app.command("eval")
def cmd_eval(
    a: int = typer.Argument(help="Left operand"),
    op: str = typer.Argument(help="Operator: + - * /"),
    b: int = typer.Argument(help="Right operand"),
) -> None:
    """Evaluate a single expression without a buffer."""
    try:
        result = evaluate(a, b, op)
    except EvaluationFailure as e:
        console.print(f"ERROR: {e}", style="red", markup=False, highlight=False)
        raise typer.Exit(int(ExitCode.EVALUATION_FAILED))
    typer.echo(str(result))


@app.command("ops")
def cmd_ops() -> None:
    """Show supported operators."""
    render_operations(console)


if __name__ == "__main__":
    app()
