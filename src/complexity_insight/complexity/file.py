"""File-level complexity: weighted sum over top-level statements."""

from __future__ import annotations

from typing import Optional

from ..config import DEFAULT_CONFIG, AnalysisConfig
from ..scanning import SyntaxNode, SyntaxTree, parse_source
from .models import ComplexityResult, LineRange, create_context
from .scorer import BASE_SCORE, CLASS_KINDS, score_node

DEFAULT_STATEMENT_WEIGHT = 1.0
CLASS_MEMBER_WEIGHT = 0.1
CLASS_HERITAGE_WEIGHT = 0.5
INTERFACE_MEMBER_WEIGHT = 0.05
FUNCTION_BASE_WEIGHT = 0.8
FUNCTION_PARAM_WEIGHT = 0.05

_FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})


def statement_weight(statement: SyntaxNode) -> float:
    """Weight of a top-level statement in the file score.

    Classes are boosted by member count and inheritance, interfaces by
    member count; plain function declarations are dampened.
    """
    if statement.kind == "export_statement":
        declaration = statement.field("declaration")
        if declaration is None:
            return DEFAULT_STATEMENT_WEIGHT
        statement = declaration

    kind = statement.kind
    if kind in CLASS_KINDS:
        body = statement.field("body")
        members = len(body.children()) if body is not None else 0
        weight = DEFAULT_STATEMENT_WEIGHT + CLASS_MEMBER_WEIGHT * members
        if statement.child_of_kind("class_heritage") is not None:
            weight += CLASS_HERITAGE_WEIGHT
        return weight

    if kind == "interface_declaration":
        body = statement.field("body")
        members = len(body.children()) if body is not None else 0
        return DEFAULT_STATEMENT_WEIGHT + INTERFACE_MEMBER_WEIGHT * members

    if kind in _FUNCTION_DECLARATIONS:
        params = statement.field("parameters")
        count = len(params.children()) if params is not None else 0
        return FUNCTION_BASE_WEIGHT + FUNCTION_PARAM_WEIGHT * count

    return DEFAULT_STATEMENT_WEIGHT


def calculate_file_complexity(tree: SyntaxTree, config: AnalysisConfig = DEFAULT_CONFIG) -> ComplexityResult:
    """Score a parsed file.

    The file score is ``1 + sum(weight(stmt) * score(stmt))`` over the
    top-level statements. A fresh scoring context is used per call.
    """
    context = create_context(tree, config.max_depth)
    root = tree.root
    context.visited.add(root.node_id)

    score = BASE_SCORE
    children = []
    statements = root.children()
    for statement in statements:
        result = score_node(statement, context)
        children.append(result)
        score += result.score * statement_weight(statement)

    return ComplexityResult(
        score=score,
        node_kind=root.kind,
        children=tuple(children),
        line_range=LineRange(1, root.end_line),
        metadata={
            "filename": tree.filename,
            "statement_count": len(statements),
            "weighted_score": True,
        },
    )


def calculate_code_complexity(
    code: str,
    config: AnalysisConfig = DEFAULT_CONFIG,
    language: Optional[str] = None,
    filename: str = "<source>",
) -> ComplexityResult:
    """Parse and score a source snippet.

    Raises:
        ParsingError: If the source is malformed
    """
    tree = parse_source(code, language or config.language, filename)
    return calculate_file_complexity(tree, config)
