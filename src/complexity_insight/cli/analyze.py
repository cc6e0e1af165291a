"""Analyze CLI command -- per-file metrics and hotspots."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..complexity import calculate_file_complexity, extract_hotspots, summarize_complexity_result
from ..exceptions import ComplexityInsightError
from ..logging_config import setup_logging
from ..metrics.analyzer import analyze_tree
from ..metrics.comparator import calculate_complexity_score
from ..scanning import language_for_path, parse_source
from . import app
from ._common import category_table, console, metrics_to_dict, read_source, report_failure, resolve_config


@app.command()
def analyze(
    files: List[Path] = typer.Argument(..., help="TypeScript files to analyze"),
    hotspot: int = typer.Option(
        0,
        "--hotspot",
        "-n",
        help="Show the top N hotspots per file",
        min=0,
    ),
    simple: bool = typer.Option(
        False,
        "--simple",
        help="Print one 'path score' line per file",
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
    Score each file and show its category breakdown.

    Files that cannot be read or parsed are reported and skipped; the exit
    code is 1 if any file failed.

    [bold cyan]Examples:[/bold cyan]

      complexity-insight analyze src/main.ts

      complexity-insight analyze src/*.ts --hotspot 5

      complexity-insight analyze src/*.ts --simple
    """
    logger = setup_logging(verbose=verbose)
    try:
        settings = resolve_config(config)
    except ComplexityInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    failed = False
    records = []

    for path in files:
        try:
            code = read_source(path)
            tree = parse_source(code, language_for_path(str(path)), str(path))
        except ComplexityInsightError as e:
            logger.debug(f"{e.__class__.__name__}: {e}")
            report_failure(path, e)
            failed = True
            continue

        metrics = analyze_tree(tree, settings)
        scored = calculate_file_complexity(tree, settings)
        summary = summarize_complexity_result(scored, settings.summary_top_n)
        tree_hotspots = len(extract_hotspots(scored, settings.hotspot_threshold))
        scalar = calculate_complexity_score(metrics, settings.weights)
        records.append((path, metrics, scalar, summary, tree_hotspots))

    if json_output:
        print(
            json.dumps(
                [
                    {
                        "path": str(path),
                        "score": scalar,
                        "metrics": metrics_to_dict(metrics),
                        "tree": {
                            "score": summary.total_score,
                            "node_count": summary.node_count,
                            "max_depth": summary.max_depth,
                            "median_score": summary.median_score,
                            "p90_score": summary.p90_score,
                            "hotspot_count": tree_hotspots,
                        },
                    }
                    for path, metrics, scalar, summary, tree_hotspots in records
                ],
                indent=2,
            )
        )
    elif simple:
        for path, _, scalar, _, _ in records:
            console.print(f"{path} {scalar:.2f}", highlight=False, soft_wrap=True)
    else:
        for path, metrics, scalar, summary, tree_hotspots in records:
            _output_rich(path, metrics, scalar, hotspot)
            console.print(
                f"[dim]Syntax tree: {summary.node_count} nodes, depth {summary.max_depth}, "
                f"median {summary.median_score:.2f}, p90 {summary.p90_score:.2f}, "
                f"{tree_hotspots} nodes >= {settings.hotspot_threshold:g}[/dim]",
                highlight=False,
            )

    if failed:
        raise typer.Exit(1)


def _output_rich(path: Path, metrics, scalar: float, hotspot: int) -> None:
    console.print()
    console.print(f"[bold cyan]{path}[/bold cyan] -- score [bold]{scalar:.2f}[/bold]")
    console.print(category_table(("Score", metrics)))

    if hotspot and metrics.hotspots:
        table = Table(show_header=True, title="Hotspots")
        table.add_column("Line", justify="right")
        table.add_column("Kind")
        table.add_column("Score", justify="right")
        table.add_column("Reason")
        for spot in metrics.hotspots[:hotspot]:
            table.add_row(str(spot.line), spot.node_kind, f"{spot.score:.2f}", spot.reason)
        console.print(table)
