"""Weighted scalar reduction and pairwise comparison. Lower is better."""

from __future__ import annotations

from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from .analyzer import analyze_code_complexity
from .types import (
    CATEGORY_WEIGHTS,
    DEFAULT_COMPLEXITY_WEIGHTS,
    CodeComplexityMetrics,
    ComparisonResult,
    ComplexityWeights,
    Verdict,
)


def calculate_complexity_score(
    metrics: CodeComplexityMetrics, weights: ComplexityWeights = DEFAULT_COMPLEXITY_WEIGHTS
) -> float:
    """Sum of each category score times its weight."""
    return sum(
        getattr(metrics, metric) * getattr(weights, weight) for metric, weight in CATEGORY_WEIGHTS
    )


to_scalar = calculate_complexity_score


def verdict_for(scalar_a: float, scalar_b: float) -> Verdict:
    if scalar_a < scalar_b:
        return Verdict.A
    if scalar_b < scalar_a:
        return Verdict.B
    return Verdict.NEITHER


def compare_metrics(
    metrics_a: CodeComplexityMetrics,
    metrics_b: CodeComplexityMetrics,
    weights: ComplexityWeights = DEFAULT_COMPLEXITY_WEIGHTS,
) -> ComparisonResult:
    """Compare two already computed metrics records."""
    scalar_a = calculate_complexity_score(metrics_a, weights)
    scalar_b = calculate_complexity_score(metrics_b, weights)
    return ComparisonResult(
        metrics_a=metrics_a,
        metrics_b=metrics_b,
        scalar_a=scalar_a,
        scalar_b=scalar_b,
        verdict=verdict_for(scalar_a, scalar_b),
    )


def compare_code_complexity(
    code_a: str,
    code_b: str,
    weights: Optional[ComplexityWeights] = None,
    config: AnalysisConfig = DEFAULT_CONFIG,
) -> ComparisonResult:
    """Analyze two snippets independently and pick the simpler one.

    Args:
        code_a: First snippet
        code_b: Second snippet
        weights: Category weights; defaults to ``config.weights``
        config: Analysis configuration

    Raises:
        ParsingError: If either snippet is malformed
    """
    metrics_a = analyze_code_complexity(code_a, config)
    metrics_b = analyze_code_complexity(code_b, config)
    return compare_metrics(metrics_a, metrics_b, weights or config.weights)
