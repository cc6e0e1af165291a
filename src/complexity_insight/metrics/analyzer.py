"""Snippet-level metrics.

Two passes over the parsed tree: the first counts how often each variable
is mutated, the second visits every node once (pre-order) and accumulates
six category scores:

    variable mutability   mutation count of each ``let`` binding
    scope                 0.5 per symbol declared under a block or the file
    assignment            1 per plain ``=`` assignment
    function              estimated calls * (body complexity + params)
    conditional           if-condition complexity, 0.5 per switch case
    exception handling    throw and try/catch/finally costs

Expression complexity inside these rules comes from the node scorer, run
with a fresh context per expression.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Optional

from ..complexity.models import create_context
from ..complexity.scorer import FUNCTION_KINDS, score_node
from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..scanning import SyntaxNode, SyntaxTree, parse_source
from .types import CodeComplexityMetrics, Hotspot

logger = logging.getLogger(__name__)

COMPOUND_ASSIGNMENTS = frozenset({"+=", "-=", "*=", "/=", "%="})

SCOPE_KINDS = frozenset({"statement_block", "program"})
SYMBOL_KINDS = frozenset(
    {
        "variable_declarator",
        "required_parameter",
        "optional_parameter",
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "type_alias_declaration",
    }
)

SYMBOL_WEIGHT = 0.5
SCOPE_HOTSPOT_SYMBOLS = 5
FUNCTION_HOTSPOT_SCORE = 5.0
CONDITION_HOTSPOT_SCORE = 2.0
SWITCH_CASE_WEIGHT = 0.5
SWITCH_HOTSPOT_CASES = 5
TRY_BASE = 1.0
TRY_LINE_WEIGHT = 0.5
CATCH_WEIGHT = 2.0
CATCH_BINDING_WEIGHT = 0.5
FINALLY_WEIGHT = 1.5
TRY_HOTSPOT_SCORE = 5.0

MutationMap = Counter


def track_variable_mutations(root: SyntaxNode) -> MutationMap:
    """Count writes per variable name.

    Counted: ``=`` to an identifier or ``obj.prop``, compound assignment to an
    identifier, and ``++``/``--`` on an identifier.
    """
    mutations: MutationMap = Counter()
    for node in root.walk():
        kind = node.kind
        if kind == "assignment_expression":
            left = node.field("left")
            if left is None:
                continue
            if left.kind == "identifier":
                mutations[left.text] += 1
            elif left.kind == "member_expression":
                obj = left.field("object")
                prop = left.field("property")
                if obj is not None and prop is not None and obj.kind == "identifier":
                    mutations[f"{obj.text}.{prop.text}"] += 1
        elif kind == "augmented_assignment_expression":
            left = node.field("left")
            if node.token("operator") in COMPOUND_ASSIGNMENTS and left is not None and left.kind == "identifier":
                mutations[left.text] += 1
        elif kind == "update_expression":
            argument = node.field("argument")
            if argument is not None and argument.kind == "identifier":
                mutations[argument.text] += 1
    return mutations


def count_scope_symbols(scope: SyntaxNode) -> int:
    """Declarations, parameters and type declarations anywhere under ``scope``."""
    count = 0
    for node in scope.walk():
        if node.kind in SYMBOL_KINDS:
            count += 1
        elif node.kind == "arrow_function" and node.field("parameter") is not None:
            count += 1
    return count


def parameter_count(function: SyntaxNode) -> int:
    params = function.field("parameters")
    if params is not None:
        return len(params.children())
    return 1 if function.field("parameter") is not None else 0


class _MetricsBuilder:
    """Mutable accumulator for one analysis run."""

    def __init__(self, tree: SyntaxTree, config: AnalysisConfig):
        self.tree = tree
        self.config = config
        self.total_score = 1.0
        self.scores = {
            "variable_mutability_score": 0.0,
            "scope_complexity_score": 0.0,
            "assignment_score": 0.0,
            "function_complexity_score": 0.0,
            "conditional_complexity_score": 0.0,
            "exception_handling_score": 0.0,
        }
        self.hotspots: list[Hotspot] = []

    def add(self, category: str, score: float) -> None:
        self.scores[category] += score
        self.total_score += score

    def add_hotspot(self, node: SyntaxNode, score: float, reason: str) -> None:
        if score >= self.config.metrics_hotspot_min_score:
            self.hotspots.append(Hotspot(node.kind, node.start_line, score, reason))

    def expression_complexity(self, expression: Optional[SyntaxNode]) -> float:
        if expression is None:
            return 0.0
        context = create_context(self.tree, self.config.max_depth)
        return score_node(expression, context).score

    def build(self) -> CodeComplexityMetrics:
        hotspots = sorted(self.hotspots, key=lambda h: h.score, reverse=True)
        return CodeComplexityMetrics(total_score=self.total_score, hotspots=tuple(hotspots), **self.scores)


def _visit(node: SyntaxNode, builder: _MetricsBuilder, mutations: MutationMap) -> None:
    kind = node.kind

    if kind == "lexical_declaration" and node.token("kind") == "let":
        for declarator in node.children():
            if declarator.kind != "variable_declarator":
                continue
            name = declarator.field("name")
            if name is None or name.kind != "identifier":
                continue
            count = mutations.get(name.text, 0)
            if count > 0:
                builder.add("variable_mutability_score", count)
                builder.add_hotspot(
                    declarator, count, f"let variable '{name.text}' is reassigned {count} times"
                )

    if kind in SCOPE_KINDS:
        symbols = count_scope_symbols(node)
        score = symbols * SYMBOL_WEIGHT
        builder.add("scope_complexity_score", score)
        if symbols > SCOPE_HOTSPOT_SYMBOLS:
            builder.add_hotspot(node, score, f"{symbols} symbols declared in one scope")

    if kind == "assignment_expression":
        builder.add("assignment_score", 1.0)

    if kind in FUNCTION_KINDS:
        _visit_function(node, builder)

    if kind == "if_statement":
        complexity = builder.expression_complexity(node.field("condition"))
        builder.add("conditional_complexity_score", complexity)
        if complexity > CONDITION_HOTSPOT_SCORE:
            builder.add_hotspot(node, complexity, f"condition complexity is {complexity:.1f}")

    if kind == "switch_statement":
        body = node.field("body")
        cases = [
            c for c in (body.children() if body is not None else [])
            if c.kind in ("switch_case", "switch_default")
        ]
        score = len(cases) * SWITCH_CASE_WEIGHT
        builder.add("conditional_complexity_score", score)
        if len(cases) > SWITCH_HOTSPOT_CASES:
            builder.add_hotspot(node, score, f"switch has {len(cases)} cases")

    if kind == "throw_statement":
        thrown = node.children()
        score = 1.0 + builder.expression_complexity(thrown[0] if thrown else None)
        builder.add("exception_handling_score", score)

    if kind == "try_statement":
        _visit_try(node, builder)


def _visit_function(node: SyntaxNode, builder: _MetricsBuilder) -> None:
    body_complexity = 1.0
    body = node.field("body")
    if body is not None and body.kind == "statement_block":
        for statement in body.children():
            if statement.kind in ("expression_statement", "return_statement"):
                expressions = statement.children()
                if expressions:
                    body_complexity += builder.expression_complexity(expressions[0])
    elif body is not None:
        body_complexity += builder.expression_complexity(body)

    params = parameter_count(node)
    estimated_calls = max(1, math.ceil(body_complexity / 2))
    score = estimated_calls * (body_complexity + params)

    builder.add("function_complexity_score", score)
    if score > FUNCTION_HOTSPOT_SCORE:
        builder.add_hotspot(node, score, f"function complexity is high (score: {score:.1f})")


def _visit_try(node: SyntaxNode, builder: _MetricsBuilder) -> None:
    score = TRY_BASE
    block = node.field("body")
    if block is not None:
        score += (block.end_line - block.start_line + 1) * TRY_LINE_WEIGHT

    handler = node.field("handler")
    if handler is not None:
        score += CATCH_WEIGHT
        if handler.field("parameter") is not None:
            score += CATCH_BINDING_WEIGHT

    if node.field("finalizer") is not None:
        score += FINALLY_WEIGHT

    builder.add("exception_handling_score", score)
    if score > TRY_HOTSPOT_SCORE:
        builder.add_hotspot(node, score, f"try/catch block complexity is high (score: {score:.1f})")


def analyze_tree(tree: SyntaxTree, config: AnalysisConfig = DEFAULT_CONFIG) -> CodeComplexityMetrics:
    """Compute metrics for an already parsed tree."""
    mutations = track_variable_mutations(tree.root)
    builder = _MetricsBuilder(tree, config)
    for node in tree.root.walk():
        _visit(node, builder, mutations)
    metrics = builder.build()
    logger.debug("Metrics for %s: total %.2f", tree.filename, metrics.total_score)
    return metrics


def analyze_code_complexity(
    code: str,
    config: AnalysisConfig = DEFAULT_CONFIG,
    language: Optional[str] = None,
    filename: str = "<source>",
) -> CodeComplexityMetrics:
    """Parse a snippet and compute its metrics.

    Raises:
        ParsingError: If the source is malformed
    """
    tree = parse_source(code, language or config.language, filename)
    return analyze_tree(tree, config)
