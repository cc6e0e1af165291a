"""Module CLI command -- complexity across an import graph."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..complexity.module import calculate_modules_complexity
from ..exceptions import ComplexityInsightError
from ..logging_config import setup_logging
from ..scanning import language_for_path, parse_source
from . import app
from ._common import console, read_source, report_failure, resolve_config


@app.command()
def module(
    files: List[Path] = typer.Argument(..., help="Files forming one module graph"),
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
    Aggregate complexity over relative imports, most complex module first.

    Only imports between the given files are followed.

    [bold cyan]Examples:[/bold cyan]

      complexity-insight module src/*.ts
    """
    setup_logging(verbose=verbose)
    try:
        settings = resolve_config(config)
    except ComplexityInsightError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    failed = False
    paths: list[str] = []
    contents: dict[str, str] = {}
    for path in files:
        key = path.as_posix()
        try:
            code = read_source(path)
            # Parse failures are reported per file before the graph is built
            parse_source(code, language_for_path(key), key)
        except ComplexityInsightError as e:
            report_failure(path, e)
            failed = True
            continue
        paths.append(key)
        contents[key] = code

    results = calculate_modules_complexity(paths, contents, settings)
    results.sort(key=lambda r: r.module_complexity, reverse=True)

    if json_output:
        print(
            json.dumps(
                [
                    {
                        "path": r.path,
                        "file_complexity": r.file_complexity,
                        "module_complexity": r.module_complexity,
                        "dependencies": list(r.dependencies),
                    }
                    for r in results
                ],
                indent=2,
            )
        )
    else:
        table = Table(show_header=True, title="Module complexity")
        table.add_column("Module", min_width=24)
        table.add_column("File", justify="right")
        table.add_column("Module", justify="right")
        table.add_column("Dependencies")
        for r in results:
            table.add_row(
                r.path,
                f"{r.file_complexity:.2f}",
                f"{r.module_complexity:.2f}",
                ", ".join(r.dependencies) or "-",
            )
        console.print(table)

    if failed:
        raise typer.Exit(1)
