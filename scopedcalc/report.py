"""Status line and Rich table rendering for scopedcalc runs.

format_status() builds the one-line summary from typed RunReport fields;
there is no caller-supplied format template. render_report() shows the
visited states and outcome as a table.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scopedcalc.evaluator import list_operations
from scopedcalc.models import RunReport, RunState

_VERDICT_STYLES = {
    "ok": "green",
    "correct": "green",
    "wrong": "yellow",
    "allocation-failed": "red",
    "division-by-zero": "red",
    "unsupported-operation": "red",
}


def format_status(report: RunReport) -> str:
    """One plain-text line describing how the run ended."""
    expr = f"{report.a} {report.op} {report.b}"
    if report.allocation_error:
        return f"FAILED: {report.allocation_error}"
    outcome = report.outcome
    if outcome is None:
        return f"INCOMPLETE: {expr} was never evaluated"
    if not outcome.ok:
        return f"ERROR: {expr}: {outcome.message} (buffer of {report.size} slots released)"
    line = f"OK: {expr} = {outcome.value}"
    if report.expected is not None:
        line += f" ({report.verdict}, expected {report.expected})"
    return line


def _fmt_value(report: RunReport) -> str:
    if report.outcome is None:
        return "--"
    if report.outcome.ok:
        return str(report.outcome.value)
    return f"[red]{report.outcome.kind.value}[/red]"


def render_report(report: RunReport, console: Console) -> None:
    """Render a Rich table for a single run."""
    table = Table(title=f"Run: {escape(f'{report.a} {report.op} {report.b}')}", show_header=True, header_style="bold")
    table.add_column("Metric", style="dim", min_width=14)
    table.add_column("Value", justify="right", min_width=12)

    color = _VERDICT_STYLES.get(report.verdict, "white")
    table.add_row("Verdict", f"[{color}]{report.verdict}[/{color}]")
    table.add_row("Result", _fmt_value(report))
    table.add_row("Buffer slots", str(report.size))
    table.add_row(
        "Checksum",
        str(report.buffer_checksum) if report.buffer_checksum is not None else "--",
    )
    table.add_row("States", " → ".join(s.value for s in report.states) or "--")
    released = "[green]yes[/green]" if report.released else "[dim]no buffer[/dim]"
    if not report.allocation_error and RunState.ALLOCATED in report.states and not report.released:
        released = "[red]no[/red]"
    table.add_row("Released", released)
    table.add_row("Wall clock", f"{report.wall_clock_s * 1000:.2f}ms")
    code = int(report.exit_code)
    table.add_row("Exit code", f"[green]{code}[/green]" if code == 0 else f"[red]{code}[/red]")

    console.print()
    console.print(table)
    console.print()


def render_operations(console: Console) -> None:
    """Render the supported operators as a Rich table."""
    table = Table(title="Supported Operations", show_header=True, header_style="bold")
    table.add_column("Code", style="green", justify="center")
    table.add_column("Operation", min_width=20)
    for code, desc in list_operations():
        table.add_row(escape(code), desc)

    console.print()
    console.print(table)
    console.print()
