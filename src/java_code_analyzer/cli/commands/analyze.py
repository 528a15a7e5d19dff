"""Analyze command: run one analysis from the terminal."""

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ...analysis.engine import AnalysisEngine
from ...analysis.models import AnalysisOptions, AnalysisOutcome
from ...config.settings import load_settings
from ...core.exceptions import CodeAnalyzerError

console = Console()

SEVERITY_STYLES = {
    "critical": "bold red",
    "high": "red",
    "medium": "yellow",
    "low": "cyan",
}


def analyze_command(
    file: Path = typer.Argument(
        ...,
        help="Java source file to analyze",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    demo: bool = typer.Option(
        False, "--demo", help="Use locally generated demo data"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the raw JSON report"
    ),
    security: bool = typer.Option(True, "--security/--no-security"),
    performance: bool = typer.Option(True, "--performance/--no-performance"),
    bugs: bool = typer.Option(True, "--bugs/--no-bugs"),
    style: bool = typer.Option(True, "--style/--no-style"),
) -> None:
    """🔍 Analyze a Java file and print the defect report."""
    options = AnalysisOptions(
        security=security, performance=performance, bugs=bugs, style=style
    )
    try:
        code = file.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        console.print(f"[red]Analysis failed:[/red] {file.name} is not UTF-8 text")
        raise typer.Exit(1) from e

    try:
        engine = AnalysisEngine(load_settings())
        if demo:
            outcome = engine.analyze_demo(code, options)
        else:
            outcome = asyncio.run(engine.analyze(code, options, file.name))
    except CodeAnalyzerError as e:
        console.print(f"[red]Analysis failed:[/red] {e}")
        raise typer.Exit(1) from e

    if as_json:
        typer.echo(json.dumps(outcome.result.to_dict(), indent=2, ensure_ascii=False))
        return

    _print_report(file, outcome)


def _print_report(file: Path, outcome: AnalysisOutcome) -> None:
    result = outcome.result
    summary = result.summary

    console.print(f"\n[bold]Defect report for {file.name}[/bold]")
    if outcome.note:
        console.print(f"[dim]{outcome.note}[/dim]")

    counts = "  ".join(
        f"[{SEVERITY_STYLES[level]}]{level}: {getattr(summary, level)}[/]"
        for level in SEVERITY_STYLES
    )
    console.print(f"{counts}  total: {summary.total}\n")

    if result.issues:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Line", justify="right")
        table.add_column("Severity")
        table.add_column("Issue")
        table.add_column("Fix")
        for issue in result.issues:
            level = issue.severity.value
            table.add_row(
                str(issue.line),
                f"[{SEVERITY_STYLES[level]}]{level}[/]",
                f"[bold]{issue.title}[/bold]\n{issue.description}",
                issue.solution or "",
            )
        console.print(table)
    else:
        console.print("[green]No issues found.[/green]")

    metrics = result.metrics
    console.print(
        f"\nComplexity {metrics.complexity} · Lines {metrics.lines} · "
        f"Maintainability {metrics.maintainability}% · Security {metrics.security}%"
    )
    for suggestion in result.suggestions:
        console.print(f"  • {suggestion}")
