"""Node scoring, file aggregation, hotspots and module graph analysis."""

from .file import calculate_code_complexity, calculate_file_complexity
from .models import (
    ComplexityResult,
    ComplexitySummary,
    FlatEntry,
    LineRange,
    ScoringContext,
    create_context,
)
from .module import (
    ModuleComplexityResult,
    ModuleDependency,
    VisitState,
    analyze_dependencies,
    analyze_imports,
    calculate_module_complexity,
    calculate_module_file_complexity,
    calculate_modules_complexity,
    normalize_path,
    resolve_import_path,
    topological_sort,
)
from .scorer import score_node
from .utils import extract_hotspots, flatten_complexity_result, summarize_complexity_result

__all__ = [
    "ComplexityResult",
    "ComplexitySummary",
    "FlatEntry",
    "LineRange",
    "ModuleComplexityResult",
    "ModuleDependency",
    "ScoringContext",
    "VisitState",
    "analyze_dependencies",
    "analyze_imports",
    "calculate_code_complexity",
    "calculate_file_complexity",
    "calculate_module_complexity",
    "calculate_module_file_complexity",
    "calculate_modules_complexity",
    "create_context",
    "extract_hotspots",
    "flatten_complexity_result",
    "normalize_path",
    "resolve_import_path",
    "score_node",
    "summarize_complexity_result",
    "topological_sort",
]
