"""Data models for node-level complexity scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..scanning import SyntaxTree

DEFAULT_MAX_DEPTH = 20


@dataclass(frozen=True)
class LineRange:
    """1-based, inclusive line span."""

    start_line: int
    end_line: int


@dataclass(frozen=True, eq=False)
class ComplexityResult:
    """One node's contribution to the complexity of a tree.

    ``score`` is the node's base contribution plus the scores of its
    children plus kind-specific weighted terms, so it never decreases as
    the subtree grows.

    Results are read-only by convention: ``metadata`` is a private copy made
    at construction and is never mutated afterwards.
    """

    score: float
    node_kind: str
    children: tuple[ComplexityResult, ...] = ()
    line_range: Optional[LineRange] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "metadata", dict(self.metadata or {}))

    @property
    def truncated(self) -> bool:
        return bool(self.metadata.get("truncated", False))

    @property
    def circular(self) -> bool:
        return bool(self.metadata.get("circular", False))


@dataclass
class ScoringContext:
    """Traversal state for one top-level scoring call.

    Created per call by ``create_context`` and discarded afterwards; never
    shared between files. ``source`` names the tree being scored in log
    messages; positions are read from the nodes themselves.
    """

    source: Optional[SyntaxTree] = None
    visited: set[int] = field(default_factory=set)
    max_depth: int = DEFAULT_MAX_DEPTH
    current_depth: int = 0

    @property
    def filename(self) -> str:
        return self.source.filename if self.source is not None else "<source>"


def create_context(source: Optional[SyntaxTree] = None, max_depth: int = DEFAULT_MAX_DEPTH) -> ScoringContext:
    return ScoringContext(source=source, max_depth=max_depth)


@dataclass(frozen=True)
class FlatEntry:
    """One node of a flattened result tree."""

    node_kind: str
    score: float
    line_range: Optional[LineRange] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ComplexitySummary:
    """Statistics over a result tree.

    Attributes:
        total_score: Score of the root
        node_count: Number of nodes in the tree
        max_depth: Longest root-to-leaf path, root counted as 1
        average_score: total_score / node_count
        median_score: Median of all node scores
        p90_score: 90th percentile of all node scores
        top_hotspots: Highest-scoring entries, score descending
    """

    total_score: float
    node_count: int
    max_depth: int
    average_score: float
    median_score: float
    p90_score: float
    top_hotspots: tuple[FlatEntry, ...] = ()
