"""Report CLI command -- weighted breakdown per file."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..exceptions import ComplexityInsightError
from ..logging_config import setup_logging
from ..metrics.reporter import generate_detailed_complexity_report, generate_hotspot_report
from ..metrics.types import CATEGORY_LABELS
from ..scanning import language_for_path
from . import app
from ._common import console, metrics_to_dict, read_source, report_failure, resolve_config


@app.command()
def report(
    files: List[Path] = typer.Argument(..., help="TypeScript files to report on"),
    hotspot: bool = typer.Option(
        False,
        "--hotspot",
        help="Include the hotspot list",
    ),
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
    Show each file's weighted category breakdown.

    [bold cyan]Examples:[/bold cyan]

      complexity-insight report src/main.ts --hotspot
    """
    setup_logging(verbose=verbose)
    try:
        settings = resolve_config(config)
    except ComplexityInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    failed = False
    reports = []
    for path in files:
        try:
            code = read_source(path)
            reports.append(
                (path, generate_detailed_complexity_report(code, None, settings, language_for_path(str(path))))
            )
        except ComplexityInsightError as e:
            report_failure(path, e)
            failed = True

    if json_output:
        print(
            json.dumps(
                [
                    {
                        "path": str(path),
                        "score": detailed.scalar,
                        "breakdown": {
                            name: {"value": entry.value, "weighted_score": entry.weighted_score}
                            for name, entry in detailed.breakdown.items()
                        },
                        "metrics": metrics_to_dict(detailed.metrics),
                    }
                    for path, detailed in reports
                ],
                indent=2,
            )
        )
    else:
        for path, detailed in reports:
            console.print()
            console.print(f"[bold cyan]{path}[/bold cyan] -- score [bold]{detailed.scalar:.2f}[/bold]")

            table = Table(show_header=True)
            table.add_column("Category", min_width=24)
            table.add_column("Value", justify="right")
            table.add_column("Weighted", justify="right")
            for name, entry in detailed.breakdown.items():
                table.add_row(CATEGORY_LABELS[name], f"{entry.value:.2f}", f"{entry.weighted_score:.2f}")
            console.print(table)

            if hotspot:
                console.print(generate_hotspot_report(detailed.metrics), markup=False)

    if failed:
        raise typer.Exit(1)
