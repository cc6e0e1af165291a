"""Exception hierarchy for Complexity Insight."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
    UnsupportedLanguageError,
)
from .base import ComplexityInsightError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "ComplexityInsightError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "UnsupportedLanguageError",
    "ConfigurationError",
    "InvalidConfigError",
]
