"""Pure helpers over a computed ComplexityResult tree.

None of these functions mutate their input.
"""

from __future__ import annotations

import numpy as np

from ..config import DEFAULT_CONFIG
from .models import ComplexityResult, ComplexitySummary, FlatEntry

DEFAULT_HOTSPOT_THRESHOLD = DEFAULT_CONFIG.hotspot_threshold
DEFAULT_TOP_N = DEFAULT_CONFIG.summary_top_n


def _preorder(result: ComplexityResult) -> list[tuple[ComplexityResult, int]]:
    """(node, depth) pairs in pre-order, root at depth 1."""
    out = []
    stack = [(result, 1)]
    while stack:
        node, depth = stack.pop()
        out.append((node, depth))
        for child in reversed(node.children):
            stack.append((child, depth + 1))
    return out


def extract_hotspots(
    result: ComplexityResult, threshold: float = DEFAULT_HOTSPOT_THRESHOLD
) -> list[ComplexityResult]:
    """Nodes with ``score >= threshold``, score descending.

    Collection is pre-order and the sort is stable, so ties keep
    encounter order. Returned objects are the nodes of ``result`` itself.
    """
    hotspots = [node for node, _ in _preorder(result) if node.score >= threshold]
    hotspots.sort(key=lambda node: node.score, reverse=True)
    return hotspots


def flatten_complexity_result(result: ComplexityResult) -> list[FlatEntry]:
    """Pre-order list of every node, root first."""
    return [
        FlatEntry(
            node_kind=node.node_kind,
            score=node.score,
            line_range=node.line_range,
            metadata=dict(node.metadata),
        )
        for node, _ in _preorder(result)
    ]


def summarize_complexity_result(result: ComplexityResult, top_n: int = DEFAULT_TOP_N) -> ComplexitySummary:
    """Summarize a result tree.

    ``top_hotspots`` are the ``top_n`` highest-scoring flattened entries,
    independent of any fixed threshold.
    """
    nodes = _preorder(result)
    flat = flatten_complexity_result(result)
    scores = np.array([entry.score for entry in flat], dtype=float)

    total_score = result.score
    node_count = len(flat)
    top = sorted(flat, key=lambda entry: entry.score, reverse=True)[:top_n]

    return ComplexitySummary(
        total_score=total_score,
        node_count=node_count,
        max_depth=max(depth for _, depth in nodes),
        average_score=total_score / node_count,
        median_score=float(np.median(scores)),
        p90_score=float(np.percentile(scores, 90)),
        top_hotspots=tuple(top),
    )
