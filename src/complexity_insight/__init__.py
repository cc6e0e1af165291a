"""
Complexity Insight - Heuristic complexity analysis for TypeScript

Scores syntax trees node by node, finds hotspots, compares snippets by a
weighted scalar and aggregates complexity across module import graphs.
Lower scores mean simpler code.
"""

__version__ = "0.1.0"

from .api import analyze, analyze_modules, compare, report
from .complexity.models import ComplexityResult
from .complexity.module import ModuleComplexityResult
from .config import AnalysisConfig, load_config
from .metrics.types import CodeComplexityMetrics, ComparisonResult, ComplexityWeights, Verdict

__all__ = [
    "analyze",  # Snippet metrics
    "compare",
    "report",
    "analyze_modules",  # Multi-file module graph
    "AnalysisConfig",
    "load_config",
    "CodeComplexityMetrics",
    "ComparisonResult",
    "ComplexityResult",
    "ComplexityWeights",
    "ModuleComplexityResult",
    "Verdict",
]
