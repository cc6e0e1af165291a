"""Compare CLI command -- which of two files is simpler."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..exceptions import ComplexityInsightError
from ..logging_config import setup_logging
from ..metrics.analyzer import analyze_code_complexity
from ..metrics.comparator import compare_metrics
from ..metrics.types import Verdict
from ..scanning import language_for_path
from . import app
from ._common import category_table, console, metrics_to_dict, read_source, report_failure, resolve_config


@app.command()
def compare(
    file_a: Path = typer.Argument(..., help="First file"),
    file_b: Path = typer.Argument(..., help="Second file"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Compare two files by weighted complexity. Lower is better.

    [bold cyan]Examples:[/bold cyan]

      complexity-insight compare before.ts after.ts
    """
    setup_logging(verbose=verbose)

    try:
        settings = resolve_config(config)
    except ComplexityInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    analyzed = []
    for path in (file_a, file_b):
        try:
            code = read_source(path)
            analyzed.append(analyze_code_complexity(code, settings, language_for_path(str(path)), str(path)))
        except ComplexityInsightError as e:
            report_failure(path, e)
            raise typer.Exit(1)

    result = compare_metrics(analyzed[0], analyzed[1], settings.weights)

    if json_output:
        print(
            json.dumps(
                {
                    "a": {"path": str(file_a), "score": result.scalar_a, "metrics": metrics_to_dict(result.metrics_a)},
                    "b": {"path": str(file_b), "score": result.scalar_b, "metrics": metrics_to_dict(result.metrics_b)},
                    "verdict": result.verdict.value,
                },
                indent=2,
            )
        )
        return

    console.print()
    console.print(f"[bold]A[/bold] {file_a}: [bold]{result.scalar_a:.2f}[/bold]", highlight=False)
    console.print(f"[bold]B[/bold] {file_b}: [bold]{result.scalar_b:.2f}[/bold]", highlight=False)

    if result.verdict is Verdict.A:
        console.print(f"[green]Simpler:[/green] {file_a}")
    elif result.verdict is Verdict.B:
        console.print(f"[green]Simpler:[/green] {file_b}")
    else:
        console.print("[yellow]Both files are equally complex[/yellow]")

    console.print(category_table(("A", result.metrics_a), ("B", result.metrics_b)))
