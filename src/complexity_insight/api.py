"""Public entry points.

All functions are synchronous, take plain data and never touch the file
system; reading files is the caller's job.

Example:
    >>> from complexity_insight import api
    >>> api.compare("if (a > 0) { f(); }", "if (a > 0 && b > 0) { f(); }").verdict
    <Verdict.A: 'A'>
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .complexity.module import ModuleComplexityResult, calculate_modules_complexity
from .config import DEFAULT_CONFIG, AnalysisConfig
from .metrics.analyzer import analyze_code_complexity
from .metrics.comparator import compare_code_complexity
from .metrics.reporter import generate_detailed_complexity_report
from .metrics.types import CodeComplexityMetrics, ComparisonResult, ComplexityWeights, DetailedReport


def analyze(code: str, config: AnalysisConfig = DEFAULT_CONFIG) -> CodeComplexityMetrics:
    """Metrics for one snippet."""
    return analyze_code_complexity(code, config)


def compare(
    code_a: str,
    code_b: str,
    weights: Optional[ComplexityWeights] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> ComparisonResult:
    """Compare two snippets; the verdict names the simpler one."""
    return compare_code_complexity(code_a, code_b, weights, config)


def report(
    code: str,
    weights: Optional[ComplexityWeights] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> DetailedReport:
    """Metrics, weighted scalar, per-category breakdown and hotspots."""
    return generate_detailed_complexity_report(code, weights, config)


def analyze_modules(
    paths: Sequence[str],
    contents_by_path: Mapping[str, str],
    options: Optional[AnalysisConfig] = None,
) -> list[ModuleComplexityResult]:
    """Module-graph analysis over in-memory sources."""
    return calculate_modules_complexity(paths, contents_by_path, options or DEFAULT_CONFIG)
