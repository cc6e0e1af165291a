"""Breakdowns and Markdown text reports for metrics and module results."""

from __future__ import annotations

from typing import Optional, Sequence

from ..complexity.module import ModuleComplexityResult
from ..config import DEFAULT_CONFIG, AnalysisConfig
from .analyzer import analyze_code_complexity
from .comparator import calculate_complexity_score, compare_code_complexity
from .types import (
    CATEGORY_LABELS,
    CATEGORY_WEIGHTS,
    DEFAULT_COMPLEXITY_WEIGHTS,
    BreakdownEntry,
    CodeComplexityMetrics,
    ComplexityWeights,
    DetailedReport,
    Verdict,
)


def calculate_breakdown(
    metrics: CodeComplexityMetrics, weights: ComplexityWeights = DEFAULT_COMPLEXITY_WEIGHTS
) -> dict[str, BreakdownEntry]:
    """Category attribute name -> raw value and weighted value."""
    breakdown = {}
    for metric, weight in CATEGORY_WEIGHTS:
        value = getattr(metrics, metric)
        breakdown[metric] = BreakdownEntry(value=value, weighted_score=value * getattr(weights, weight))
    return breakdown


def generate_detailed_complexity_report(
    code: str,
    weights: Optional[ComplexityWeights] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
    language: Optional[str] = None,
) -> DetailedReport:
    weights = weights or config.weights
    metrics = analyze_code_complexity(code, config, language)
    return DetailedReport(
        metrics=metrics,
        scalar=calculate_complexity_score(metrics, weights),
        breakdown=calculate_breakdown(metrics, weights),
        hotspots=metrics.hotspots,
    )


def generate_hotspot_report(metrics: CodeComplexityMetrics, limit: Optional[int] = None) -> str:
    hotspots = metrics.hotspots[:limit] if limit else metrics.hotspots
    if not hotspots:
        return "No hotspots found."

    lines = ["## Complexity hotspots", ""]
    for index, hotspot in enumerate(hotspots, start=1):
        lines.append(f"{index}. **{hotspot.node_kind}** (line {hotspot.line}): score {hotspot.score:.2f}")
        lines.append(f"   Reason: {hotspot.reason}")
        lines.append("")
    return "\n".join(lines)


def generate_metrics_report(
    metrics: CodeComplexityMetrics, weights: ComplexityWeights = DEFAULT_COMPLEXITY_WEIGHTS
) -> str:
    scalar = calculate_complexity_score(metrics, weights)
    lines = [
        "## Complexity metrics",
        "",
        f"Overall score: **{scalar:.2f}**",
        "",
        "### Breakdown",
        "",
    ]
    for metric, entry in calculate_breakdown(metrics, weights).items():
        lines.append(
            f"- **{CATEGORY_LABELS[metric]}**: {entry.value:.2f} (weighted: {entry.weighted_score:.2f})"
        )
    return "\n".join(lines) + "\n"


def generate_comparison_report(
    code_a: str,
    code_b: str,
    name_a: str = "Code A",
    name_b: str = "Code B",
    weights: Optional[ComplexityWeights] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> str:
    """Markdown report comparing two snippets side by side."""
    comparison = compare_code_complexity(code_a, code_b, weights, config)

    lines = [
        f"## {name_a} vs {name_b}",
        "",
        f"{name_a} score: **{comparison.scalar_a:.2f}**",
        f"{name_b} score: **{comparison.scalar_b:.2f}**",
        "",
    ]
    if comparison.verdict is Verdict.A:
        lines.append(f"**Result**: {name_a} is less complex.")
    elif comparison.verdict is Verdict.B:
        lines.append(f"**Result**: {name_b} is less complex.")
    else:
        lines.append("**Result**: both snippets are equally complex.")

    lines += [
        "",
        "### Details",
        "",
        f"| Metric | {name_a} | {name_b} |",
        "|--------|" + "-" * len(name_a) + "|" + "-" * len(name_b) + "|",
    ]
    for metric, _ in CATEGORY_WEIGHTS:
        value_a = getattr(comparison.metrics_a, metric)
        value_b = getattr(comparison.metrics_b, metric)
        lines.append(f"| {CATEGORY_LABELS[metric]} | {value_a:.2f} | {value_b:.2f} |")
    return "\n".join(lines) + "\n"


def generate_module_complexity_report(results: Sequence[ModuleComplexityResult]) -> str:
    """One ``path file:N module:N`` line per module, most complex first."""
    ordered = sorted(results, key=lambda r: r.module_complexity, reverse=True)
    return "".join(
        f"{r.path} file:{round(r.file_complexity)} module:{round(r.module_complexity)}\n"
        for r in ordered
    )
