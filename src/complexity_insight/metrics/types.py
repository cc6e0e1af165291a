"""Data models for snippet-level complexity metrics and comparison.

A ``CodeComplexityMetrics`` record is the flat, non-recursive summary of one
snippet: six category sub-scores plus line-keyed hotspots. The comparator
reduces it to a single scalar with ``ComplexityWeights`` (lower is better).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Category attribute on CodeComplexityMetrics -> weight attribute on ComplexityWeights.
# Order is the reporting order.
CATEGORY_WEIGHTS: tuple[tuple[str, str], ...] = (
    ("variable_mutability_score", "variable_mutability"),
    ("scope_complexity_score", "scope_complexity"),
    ("assignment_score", "assignment"),
    ("function_complexity_score", "function_complexity"),
    ("conditional_complexity_score", "conditional_complexity"),
    ("exception_handling_score", "exception_handling"),
)

CATEGORY_LABELS: dict[str, str] = {
    "variable_mutability_score": "Variable mutability",
    "scope_complexity_score": "Scope complexity",
    "assignment_score": "Assignments",
    "function_complexity_score": "Function complexity",
    "conditional_complexity_score": "Conditional complexity",
    "exception_handling_score": "Exception handling",
}


@dataclass(frozen=True)
class ComplexityWeights:
    """Multipliers applied when reducing metrics to one scalar.

    Not validated here: callers supply well-formed weights.
    """

    variable_mutability: float = 1.5
    scope_complexity: float = 1.0
    assignment: float = 1.2
    function_complexity: float = 1.0
    conditional_complexity: float = 2.0
    exception_handling: float = 1.5


DEFAULT_COMPLEXITY_WEIGHTS = ComplexityWeights()


@dataclass(frozen=True)
class Hotspot:
    """A locally expensive construct, keyed by its 1-based start line."""

    node_kind: str
    line: int
    score: float
    reason: str


@dataclass(frozen=True)
class CodeComplexityMetrics:
    """Six category sub-scores for one snippet plus its hotspots."""

    total_score: float = 1.0
    variable_mutability_score: float = 0.0
    scope_complexity_score: float = 0.0
    assignment_score: float = 0.0
    function_complexity_score: float = 0.0
    conditional_complexity_score: float = 0.0
    exception_handling_score: float = 0.0
    hotspots: tuple[Hotspot, ...] = field(default_factory=tuple)

    def category_scores(self) -> dict[str, float]:
        """Category attribute name -> raw score, in reporting order."""
        return {name: getattr(self, name) for name, _ in CATEGORY_WEIGHTS}


class Verdict(str, Enum):
    """Which of two snippets is simpler."""

    A = "A"
    B = "B"
    NEITHER = "NEITHER"

    def flipped(self) -> Verdict:
        if self is Verdict.A:
            return Verdict.B
        if self is Verdict.B:
            return Verdict.A
        return Verdict.NEITHER


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing two snippets."""

    metrics_a: CodeComplexityMetrics
    metrics_b: CodeComplexityMetrics
    scalar_a: float
    scalar_b: float
    verdict: Verdict


@dataclass(frozen=True)
class BreakdownEntry:
    value: float
    weighted_score: float


@dataclass(frozen=True)
class DetailedReport:
    """Metrics, their weighted scalar, and a per-category breakdown."""

    metrics: CodeComplexityMetrics
    scalar: float
    breakdown: dict[str, BreakdownEntry]
    hotspots: tuple[Hotspot, ...]
