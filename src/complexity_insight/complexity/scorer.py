"""Recursive node complexity scorer.

Every node starts from a base score of 1. Per-kind formulas add the scores
of the scored children plus kind-specific weights:

    binary / assignment   1 + left + right + op weight
    unary / update        1 + operand + op weight
    ternary               1 + condition + consequence + alternative
    call / new            1 + callee + argSum * max(1, argCount * 0.2)
    member access         1 + object
    subscript             1 + object + index
    object / array        1 + sum of property values / elements
    declaration           1 + sum of initializers, times 1 + 0.5 * n for let/var
    if                    1 + condition + then [+ else] + 0.5
    loops                 1 + control parts + body + loop constant
    switch                1 + discriminant + sum(0.3 * case + case body) + 0.5 * cases
    try                   1 + block [+ catch + 2 (+ 0.5 if bound)] [+ finally + 1.5]
    throw                 1 + thrown expression
    block                 1 + sum of statements + 0.1 * statements

The weights are heuristic defaults tuned for relative ordering ("A is
simpler than B"); only the shape of each formula is meant to be stable.

Every call is guarded by the context's depth ceiling and visited set, so
scoring always terminates and always returns a result.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..scanning import SyntaxNode
from .models import ComplexityResult, LineRange, ScoringContext

logger = logging.getLogger(__name__)

BASE_SCORE = 1.0

LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})
COMPARISON_OPERATORS = frozenset({"==", "===", "!=", "!==", "<", "<=", ">", ">="})

LOGICAL_WEIGHT = 0.5
COMPARISON_WEIGHT = 0.3
OPERATOR_WEIGHT = 0.1

NEGATION_WEIGHT = 0.3
POSTFIX_UPDATE_WEIGHT = 0.2
UNARY_WEIGHT = 0.1

ARGUMENT_FACTOR = 0.2
MUTABLE_BINDING_FACTOR = 0.5
MUTABLE_BINDINGS = frozenset({"let", "var"})

IF_WEIGHT = 0.5
LOOP_WEIGHTS = {
    "for_statement": 1.0,
    "for_in_statement": 0.8,
    "while_statement": 0.8,
    "do_statement": 1.0,
}
CASE_EXPRESSION_FACTOR = 0.3
CASE_WEIGHT = 0.5
CATCH_WEIGHT = 2.0
CATCH_BINDING_WEIGHT = 0.5
FINALLY_WEIGHT = 1.5
STATEMENT_WEIGHT = 0.1

# kind -> extra cost added to BASE_SCORE when a node is reached twice
CIRCULAR_ESTIMATES = {
    "ternary_expression": 1.0,
    "if_statement": 0.5,
    "for_statement": 0.8,
    "for_in_statement": 0.8,
    "while_statement": 0.8,
    "do_statement": 1.0,
    "switch_statement": 1.5,
    "try_statement": 3.0,
    "throw_statement": 1.0,
}

BINARY_KINDS = frozenset(
    {"binary_expression", "assignment_expression", "augmented_assignment_expression"}
)
CALL_KINDS = frozenset({"call_expression", "new_expression"})
FUNCTION_KINDS = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "method_definition",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
    }
)
CLASS_KINDS = frozenset({"class_declaration", "abstract_class_declaration", "class"})
TRANSPARENT_KINDS = frozenset(
    {
        "parenthesized_expression",
        "as_expression",
        "non_null_expression",
        "satisfies_expression",
    }
)

Handler = Callable[[SyntaxNode, ScoringContext], ComplexityResult]


def score_node(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    """Score one node and its subtree.

    Args:
        node: Node from the syntax facade
        context: Traversal state shared across one scoring call

    Returns:
        ComplexityResult for the node. Past the depth ceiling a truncated
        result is returned; a node seen twice gets a kind-only estimate.
    """
    if context.current_depth >= context.max_depth:
        logger.debug(
            "Depth limit %d reached at %s (%s:%d)",
            context.max_depth,
            node.kind,
            context.filename,
            node.start_line,
        )
        return _make(node, BASE_SCORE, truncated=True)

    if node.node_id in context.visited:
        estimate = estimate_score(node)
        return _make(node, estimate, circular=True, estimated_score=estimate)

    context.visited.add(node.node_id)
    context.current_depth += 1
    try:
        handler = _HANDLERS.get(node.kind)
        if handler is None:
            return _make(node, BASE_SCORE)
        return handler(node, context)
    finally:
        context.current_depth -= 1


def estimate_score(node: SyntaxNode) -> float:
    """Kind-only score used when a node is reached again."""
    kind = node.kind
    if kind in BINARY_KINDS:
        return BASE_SCORE + operator_weight(_operator(node))
    if kind in CALL_KINDS:
        return BASE_SCORE + ARGUMENT_FACTOR * len(_arguments(node))
    return BASE_SCORE + CIRCULAR_ESTIMATES.get(kind, 0.0)


def operator_weight(operator: Optional[str]) -> float:
    if operator in LOGICAL_OPERATORS:
        return LOGICAL_WEIGHT
    if operator in COMPARISON_OPERATORS:
        return COMPARISON_WEIGHT
    return OPERATOR_WEIGHT


def _make(
    node: SyntaxNode,
    score: float,
    children: tuple[ComplexityResult, ...] | list[ComplexityResult] = (),
    **metadata: Any,
) -> ComplexityResult:
    return ComplexityResult(
        score=score,
        node_kind=node.kind,
        children=tuple(children),
        line_range=LineRange(node.start_line, node.end_line),
        metadata=metadata,
    )


def _score_all(nodes: list[SyntaxNode], context: ScoringContext) -> list[ComplexityResult]:
    return [score_node(n, context) for n in nodes]


def _total(results: list[ComplexityResult]) -> float:
    return sum(r.score for r in results)


def _operator(node: SyntaxNode) -> Optional[str]:
    if node.kind == "assignment_expression":
        return "="
    return node.token("operator")


def _arguments(node: SyntaxNode) -> list[SyntaxNode]:
    args = node.field("arguments")
    if args is None:
        return []
    if args.kind == "arguments":
        return args.children()
    # tagged template: the template string is the only argument
    return [args]


def _clause_expression(node: Optional[SyntaxNode]) -> Optional[SyntaxNode]:
    """Unwrap the statement forms tree-sitter uses inside ``for (...)`` headers."""
    if node is None or node.kind == "empty_statement":
        return None
    if node.kind == "expression_statement":
        children = node.children()
        return children[0] if children else None
    return node


# --- expressions -----------------------------------------------------------


def _score_binary(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    operator = _operator(node)
    parts = [p for p in (node.field("left"), node.field("right")) if p is not None]
    children = _score_all(parts, context)
    score = BASE_SCORE + _total(children) + operator_weight(operator)
    return _make(node, score, children, operator=operator)


def _score_unary(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    operator = node.token("operator")
    argument = node.field("argument")
    children = _score_all([argument] if argument is not None else [], context)

    prefix = True
    if node.kind == "update_expression":
        prefix = node.first_token() in ("++", "--")

    if operator == "!":
        weight = NEGATION_WEIGHT
    elif node.kind == "update_expression" and not prefix:
        weight = POSTFIX_UPDATE_WEIGHT
    else:
        weight = UNARY_WEIGHT

    score = BASE_SCORE + _total(children) + weight
    return _make(node, score, children, operator=operator, prefix=prefix)


def _score_ternary(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    parts = [node.field(name) for name in ("condition", "consequence", "alternative")]
    children = _score_all([p for p in parts if p is not None], context)
    return _make(node, BASE_SCORE + _total(children), children)


def _score_call(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    callee = node.field("function") or node.field("constructor")
    children: list[ComplexityResult] = []
    score = BASE_SCORE
    if callee is not None:
        callee_result = score_node(callee, context)
        children.append(callee_result)
        score += callee_result.score

    arguments = _arguments(node)
    arg_results = _score_all(arguments, context)
    children.extend(arg_results)
    score += _total(arg_results) * max(1.0, len(arguments) * ARGUMENT_FACTOR)
    return _make(node, score, children, argument_count=len(arguments))


def _score_member(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    obj = node.field("object")
    children = _score_all([obj] if obj is not None else [], context)
    return _make(node, BASE_SCORE + _total(children), children)


def _score_subscript(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    parts = [p for p in (node.field("object"), node.field("index")) if p is not None]
    children = _score_all(parts, context)
    return _make(node, BASE_SCORE + _total(children), children)


def _score_object(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    values = []
    for member in node.children():
        if member.kind == "pair":
            value = member.field("value")
            if value is not None:
                values.append(value)
        else:
            values.append(member)
    children = _score_all(values, context)
    return _make(node, BASE_SCORE + _total(children), children, property_count=len(values))


def _score_array(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    children = _score_all(node.children(), context)
    return _make(node, BASE_SCORE + _total(children), children, element_count=len(children))


def _score_transparent(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    inner = node.children()
    if not inner:
        return _make(node, BASE_SCORE)
    return score_node(inner[0], context)


def _score_wrapper(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    """Statements and expressions that only carry one or more children."""
    children = _score_all(node.children(), context)
    return _make(node, BASE_SCORE + _total(children), children)


# --- declarations ----------------------------------------------------------


def _score_declaration(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    if node.kind == "variable_declaration":
        binding = "var"
    else:
        binding = node.token("kind") or node.first_token() or "const"

    declarators = [c for c in node.children() if c.kind == "variable_declarator"]
    initializers = [v for v in (d.field("value") for d in declarators) if v is not None]
    children = _score_all(initializers, context)

    score = BASE_SCORE + _total(children)
    mutable = binding in MUTABLE_BINDINGS
    if mutable:
        score *= 1 + MUTABLE_BINDING_FACTOR * len(declarators)

    return _make(
        node,
        score,
        children,
        binding=binding,
        declarator_count=len(declarators),
        mutable=mutable,
    )


def _score_function(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    body = node.field("body")
    children = _score_all([body] if body is not None else [], context)
    return _make(node, BASE_SCORE + _total(children), children)


def _class_members(node: SyntaxNode) -> list[SyntaxNode]:
    body = node.field("body")
    return body.children() if body is not None else []


def _score_class(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    members = _class_members(node)
    children = _score_all(members, context)
    return _make(
        node,
        BASE_SCORE + _total(children),
        children,
        member_count=len(members),
        has_heritage=node.child_of_kind("class_heritage") is not None,
    )


def _score_field(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    value = node.field("value")
    children = _score_all([value] if value is not None else [], context)
    return _make(node, BASE_SCORE + _total(children), children)


def _score_export(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    inner = node.field("declaration") or node.field("value")
    children = _score_all([inner] if inner is not None else [], context)
    return _make(node, BASE_SCORE + _total(children), children)


# --- statements ------------------------------------------------------------


def _score_if(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    parts = [node.field("condition"), node.field("consequence")]
    alternative = node.field("alternative")
    if alternative is not None and alternative.kind == "else_clause":
        inner = alternative.children()
        alternative = inner[0] if inner else None
    parts.append(alternative)

    children = _score_all([p for p in parts if p is not None], context)
    score = BASE_SCORE + _total(children) + IF_WEIGHT
    return _make(node, score, children, has_else=alternative is not None)


def _score_loop(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    kind = node.kind
    if kind == "for_statement":
        parts = [
            _clause_expression(node.field("initializer")),
            _clause_expression(node.field("condition")),
            node.field("increment"),
        ]
        loop_kind = "for"
    elif kind == "for_in_statement":
        parts = [node.field("right")]
        loop_kind = "for-of" if node.has_token("of") else "for-in"
    else:
        parts = [node.field("condition")]
        loop_kind = "while" if kind == "while_statement" else "do-while"

    parts.append(node.field("body"))
    children = _score_all([p for p in parts if p is not None], context)
    score = BASE_SCORE + _total(children) + LOOP_WEIGHTS[kind]
    return _make(node, score, children, loop_kind=loop_kind)


def _score_switch(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    children: list[ComplexityResult] = []
    score = BASE_SCORE

    discriminant = node.field("value")
    if discriminant is not None:
        result = score_node(discriminant, context)
        children.append(result)
        score += result.score

    body = node.field("body")
    clauses = body.children() if body is not None else []
    case_count = 0
    for clause in clauses:
        if clause.kind not in ("switch_case", "switch_default"):
            continue
        case_count += 1
        test = clause.field("value")
        if test is not None:
            result = score_node(test, context)
            children.append(result)
            score += CASE_EXPRESSION_FACTOR * result.score
        statements = _score_all(clause.fields("body"), context)
        children.extend(statements)
        score += _total(statements)

    score += CASE_WEIGHT * case_count
    return _make(node, score, children, case_count=case_count)


def _score_try(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    children: list[ComplexityResult] = []
    score = BASE_SCORE

    block = node.field("body")
    if block is not None:
        result = score_node(block, context)
        children.append(result)
        score += result.score

    handler = node.field("handler")
    catch_binds = False
    if handler is not None:
        catch_body = handler.field("body")
        if catch_body is not None:
            result = score_node(catch_body, context)
            children.append(result)
            score += result.score
        score += CATCH_WEIGHT
        catch_binds = handler.field("parameter") is not None
        if catch_binds:
            score += CATCH_BINDING_WEIGHT

    finalizer = node.field("finalizer")
    if finalizer is not None:
        finally_body = finalizer.field("body")
        if finally_body is not None:
            result = score_node(finally_body, context)
            children.append(result)
            score += result.score
        score += FINALLY_WEIGHT

    return _make(
        node,
        score,
        children,
        has_catch=handler is not None,
        has_finally=finalizer is not None,
        catch_binds=catch_binds,
    )


def _score_block(node: SyntaxNode, context: ScoringContext) -> ComplexityResult:
    statements = node.children()
    children = _score_all(statements, context)
    score = BASE_SCORE + _total(children) + STATEMENT_WEIGHT * len(statements)
    return _make(node, score, children, statement_count=len(statements))


_HANDLERS: dict[str, Handler] = {
    "unary_expression": _score_unary,
    "update_expression": _score_unary,
    "ternary_expression": _score_ternary,
    "member_expression": _score_member,
    "subscript_expression": _score_subscript,
    "object": _score_object,
    "array": _score_array,
    "lexical_declaration": _score_declaration,
    "variable_declaration": _score_declaration,
    "public_field_definition": _score_field,
    "field_definition": _score_field,
    "export_statement": _score_export,
    "if_statement": _score_if,
    "switch_statement": _score_switch,
    "try_statement": _score_try,
    "statement_block": _score_block,
    "throw_statement": _score_wrapper,
    "expression_statement": _score_wrapper,
    "return_statement": _score_wrapper,
    "await_expression": _score_wrapper,
    "yield_expression": _score_wrapper,
    "spread_element": _score_wrapper,
}
_HANDLERS.update({kind: _score_binary for kind in BINARY_KINDS})
_HANDLERS.update({kind: _score_call for kind in CALL_KINDS})
_HANDLERS.update({kind: _score_function for kind in FUNCTION_KINDS})
_HANDLERS.update({kind: _score_class for kind in CLASS_KINDS})
_HANDLERS.update({kind: _score_loop for kind in LOOP_WEIGHTS})
_HANDLERS.update({kind: _score_transparent for kind in TRANSPARENT_KINDS})
