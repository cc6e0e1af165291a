"""Shared CLI helpers."""

from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from ..config import AnalysisConfig, load_config
from ..exceptions import FileAccessError
from ..metrics.types import CATEGORY_LABELS, CATEGORY_WEIGHTS, CodeComplexityMetrics

console = Console()
err_console = Console(stderr=True)


def resolve_config(config: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Build configuration from CLI options."""
    return load_config(config_file=config, **{k: v for k, v in overrides.items() if v is not None})


def read_source(path: Path) -> str:
    """Read a source file as UTF-8.

    Raises:
        FileAccessError: If the file is missing or unreadable
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileAccessError(path, str(e))


def report_failure(path: Path, error: Exception) -> None:
    err_console.print(f"[red]Error:[/red] {path}: {error}")


def metrics_to_dict(metrics: CodeComplexityMetrics) -> dict:
    return asdict(metrics)


def category_table(*columns: tuple[str, CodeComplexityMetrics]) -> Table:
    """Category scores side by side, one column per metrics record."""
    table = Table(show_header=True, show_lines=False, pad_edge=True)
    table.add_column("Category", min_width=24)
    for name, _ in columns:
        table.add_column(name, justify="right")

    for metric, _ in CATEGORY_WEIGHTS:
        table.add_row(
            CATEGORY_LABELS[metric], *(f"{getattr(m, metric):.2f}" for _, m in columns)
        )
    return table
