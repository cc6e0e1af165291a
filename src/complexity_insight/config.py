"""Configuration loading and management for Complexity Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.complexity-insight.toml)
    3. Project config (./complexity-insight.toml)
    4. Explicit config file
    5. Environment variables (COMPLEXITY_* prefix)
    6. Keyword overrides (typically CLI flags)

The scoring constants exposed here (import pressure, dependency damping,
mutability factor) are heuristic defaults, not invariants of the metric.

Example:
    >>> config = load_config(max_depth=30)
    >>> config.max_depth
    30
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, get_type_hints

from .exceptions import InvalidConfigError
from .metrics.types import ComplexityWeights

SUPPORTED_LANGUAGES = ("typescript", "tsx")


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        Scoring:
            max_depth: Recursion ceiling for the node scorer
            language: Grammar used for snippets without a file name

        Hotspots and summaries:
            hotspot_threshold: Default score threshold for extract_hotspots
            metrics_hotspot_min_score: Minimum score for a metrics hotspot entry
            summary_top_n: Number of top entries kept in a summary

        Module graph:
            module_max_depth: Recursion ceiling for module aggregation
            default_module_file: File assumed when an import path ends in "/"
            dependency_damping: Share of dependency complexity folded in
            library_import_weight: Pressure per symbol imported from a package
            local_import_weight: Pressure per symbol imported from a relative path
            mutability_factor: Per-``let`` multiplier increment at file level

        Comparison:
            weights: Category weights for the comparator
    """

    max_depth: int = 20
    language: str = "typescript"

    hotspot_threshold: float = 5.0
    metrics_hotspot_min_score: float = 3.0
    summary_top_n: int = 5

    module_max_depth: int = 10
    default_module_file: str = "mod.ts"
    dependency_damping: float = 0.5
    library_import_weight: float = 3.0
    local_import_weight: float = 1.0
    mutability_factor: float = 0.5

    weights: ComplexityWeights = field(default_factory=ComplexityWeights)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.max_depth < 1:
            raise InvalidConfigError("max_depth", self.max_depth, "must be at least 1")
        if self.module_max_depth < 0:
            raise InvalidConfigError(
                "module_max_depth", self.module_max_depth, "must be non-negative"
            )
        if self.language not in SUPPORTED_LANGUAGES:
            raise InvalidConfigError(
                "language", self.language, f"expected one of {', '.join(SUPPORTED_LANGUAGES)}"
            )
        if self.summary_top_n < 1:
            raise InvalidConfigError("summary_top_n", self.summary_top_n, "must be at least 1")
        if not self.default_module_file or "/" in self.default_module_file:
            raise InvalidConfigError(
                "default_module_file", self.default_module_file, "must be a bare file name"
            )

        non_negative = [
            "hotspot_threshold",
            "metrics_hotspot_min_score",
            "dependency_damping",
            "library_import_weight",
            "local_import_weight",
            "mutability_factor",
        ]
        for field_name in non_negative:
            value = getattr(self, field_name)
            if value < 0:
                raise InvalidConfigError(field_name, value, "must be non-negative")


DEFAULT_CONFIG = AnalysisConfig()


def load_config(config_file: Path | None = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        InvalidConfigError: If a config file is missing or invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".complexity-insight.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config))

    project_config = Path.cwd() / "complexity-insight.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise InvalidConfigError("config_file", config_file, "file not found")
        merged.update(_read_config_file(config_file))

    merged.update(_load_env_vars())
    merged.update(overrides)

    # [weights] table from TOML
    weights = merged.pop("weights", None)
    if isinstance(weights, dict):
        try:
            merged["weights"] = ComplexityWeights(**weights)
        except TypeError as e:
            raise InvalidConfigError("weights", weights, str(e))
    elif isinstance(weights, ComplexityWeights):
        merged["weights"] = weights
    elif weights is not None:
        raise InvalidConfigError("weights", weights, "expected a table of category weights")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise InvalidConfigError("config", merged, str(e))


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        return _load_toml_file(path)
    except InvalidConfigError:
        raise
    except Exception as e:
        raise InvalidConfigError("config_file", path, str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COMPLEXITY_* environment variables.

    Supported environment variables:
        COMPLEXITY_MAX_DEPTH: int
        COMPLEXITY_LANGUAGE: typescript/tsx
        COMPLEXITY_HOTSPOT_THRESHOLD: float
        COMPLEXITY_MODULE_MAX_DEPTH: int
        COMPLEXITY_DEFAULT_MODULE_FILE: str
        ... one per scalar AnalysisConfig field

    Returns:
        Dict of field_name -> parsed_value for any COMPLEXITY_* vars found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"COMPLEXITY_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot be expressed as one env var
    (the nested weights table).
    """
    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str:
        return value

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict."""
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    with open(path, "rb") as f:
        return tomllib.load(f)
