"""Unit tests for complexity/scorer.py - per-kind formulas and recursion guards."""

import copy
import logging
from dataclasses import asdict

import pytest

from complexity_insight.complexity import scorer
from complexity_insight.complexity.models import ComplexityResult, create_context
from complexity_insight.complexity.scorer import estimate_score, operator_weight, score_node
from complexity_insight.logging_config import PACKAGE_LOGGER
from complexity_insight.scanning import parse_source


def _score_expr(first_expression, code, **context_kwargs):
    tree, expr = first_expression(code)
    return score_node(expr, create_context(tree, **context_kwargs))


def _score_stmt(first_statement, code):
    tree, stmt = first_statement(code)
    return score_node(stmt, create_context(tree))


# ── Expressions ───────────────────────────────────────────────────


class TestBinaryExpressions:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("a + b;", 3.1),
            ("a * b;", 3.1),
            ("a && b;", 3.5),
            ("a || b;", 3.5),
            ("a ?? b;", 3.5),
            ("a === b;", 3.3),
            ("a < b;", 3.3),
            ("a >= b;", 3.3),
        ],
    )
    def test_operator_weights(self, first_expression, code, expected):
        assert _score_expr(first_expression, code).score == pytest.approx(expected)

    def test_nested_sums_children(self, first_expression):
        # (a + b) = 3.1, then 1 + 3.1 + c(1) + 0.1
        result = _score_expr(first_expression, "a + b + c;")
        assert result.score == pytest.approx(5.2)
        assert result.children[0].node_kind == "binary_expression"

    def test_operator_metadata(self, first_expression):
        result = _score_expr(first_expression, "a && b;")
        assert result.metadata["operator"] == "&&"

    def test_assignment_scored_as_binary(self, first_expression):
        assert _score_expr(first_expression, "x = y;").score == pytest.approx(3.1)
        assert _score_expr(first_expression, "x += y;").score == pytest.approx(3.1)

    def test_operator_weight_helper(self):
        assert operator_weight("||") == 0.5
        assert operator_weight("!==") == 0.3
        assert operator_weight("%") == 0.1
        assert operator_weight(None) == 0.1


class TestUnaryExpressions:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("!a;", 2.3),
            ("-a;", 2.1),
            ("typeof a;", 2.1),
            ("++i;", 2.1),
            ("i++;", 2.2),
            ("i--;", 2.2),
        ],
    )
    def test_unary_weights(self, first_expression, code, expected):
        assert _score_expr(first_expression, code).score == pytest.approx(expected)

    def test_prefix_metadata(self, first_expression):
        assert _score_expr(first_expression, "++i;").metadata["prefix"] is True
        assert _score_expr(first_expression, "i++;").metadata["prefix"] is False


class TestOtherExpressions:
    def test_ternary(self, first_expression):
        assert _score_expr(first_expression, "a ? b : c;").score == pytest.approx(4.0)

    def test_call_without_arguments(self, first_expression):
        result = _score_expr(first_expression, "f();")
        assert result.score == pytest.approx(2.0)
        assert result.metadata["argument_count"] == 0

    def test_call_with_one_argument(self, first_expression):
        assert _score_expr(first_expression, "f(a);").score == pytest.approx(3.0)

    def test_call_argument_multiplier(self, first_expression):
        # six trivial arguments: 6 * max(1, 6 * 0.2) = 7.2
        result = _score_expr(first_expression, "f(a, b, c, d, e, g);")
        assert result.score == pytest.approx(1 + 1 + 7.2)
        assert result.metadata["argument_count"] == 6

    def test_call_scores_argument_subtrees(self, first_expression):
        assert _score_expr(first_expression, "f(a + b);").score == pytest.approx(5.1)

    def test_new_expression_scored_as_call(self, first_expression):
        assert _score_expr(first_expression, 'new Error("x");').score == pytest.approx(3.0)

    def test_member_access(self, first_expression):
        assert _score_expr(first_expression, "a.b;").score == pytest.approx(2.0)
        assert _score_expr(first_expression, "a.b.c;").score == pytest.approx(3.0)

    def test_subscript(self, first_expression):
        assert _score_expr(first_expression, "a[0];").score == pytest.approx(3.0)

    def test_object_literal(self, first_expression):
        result = _score_expr(first_expression, "({ x: 1, y: a + b });")
        assert result.node_kind == "object"
        assert result.score == pytest.approx(1 + 1 + 3.1)

    def test_array_literal(self, first_expression):
        assert _score_expr(first_expression, "[1, 2, 3];").score == pytest.approx(4.0)

    def test_parentheses_are_transparent(self, first_expression):
        result = _score_expr(first_expression, "(a + b);")
        assert result.node_kind == "binary_expression"
        assert result.score == pytest.approx(3.1)

    def test_unrecognized_kind_scores_base(self, first_expression):
        result = _score_expr(first_expression, "x;")
        assert result.score == 1.0
        assert result.children == ()


# ── Declarations and statements ───────────────────────────────────


class TestDeclarations:
    @pytest.mark.parametrize(
        "code, expected",
        [
            ("const x = 1;", 2.0),
            ("let x = 1;", 3.0),
            ("var x = 1;", 3.0),
            ("let x;", 1.5),
            ("let x = 1, y = 2;", 6.0),
            ("const x = 1, y = 2;", 3.0),
        ],
    )
    def test_mutable_multiplier(self, first_statement, code, expected):
        assert _score_stmt(first_statement, code).score == pytest.approx(expected)

    def test_declaration_metadata(self, first_statement):
        result = _score_stmt(first_statement, "let a = 1, b = 2;")
        assert result.metadata["binding"] == "let"
        assert result.metadata["declarator_count"] == 2
        assert result.metadata["mutable"] is True

    def test_interface_scores_base(self, first_statement):
        assert _score_stmt(first_statement, "interface I { a: number; }").score == 1.0


class TestControlFlow:
    # "{ b(); }" scores 1 + (1 + 2) + 0.1 = 4.1

    def test_if(self, first_statement):
        result = _score_stmt(first_statement, "if (a) { b(); }")
        assert result.score == pytest.approx(1 + 1 + 4.1 + 0.5)
        assert result.metadata["has_else"] is False

    def test_if_else(self, first_statement):
        result = _score_stmt(first_statement, "if (a) { b(); } else { c(); }")
        assert result.score == pytest.approx(1 + 1 + 4.1 + 4.1 + 0.5)
        assert result.metadata["has_else"] is True

    def test_else_if_nests(self, first_statement):
        chained = _score_stmt(first_statement, "if (a) { b(); } else if (c) { d(); }")
        inner = 1 + 1 + 4.1 + 0.5
        assert chained.score == pytest.approx(1 + 1 + 4.1 + inner + 0.5)

    def test_while(self, first_statement):
        result = _score_stmt(first_statement, "while (a) { b(); }")
        assert result.score == pytest.approx(1 + 1 + 4.1 + 0.8)
        assert result.metadata["loop_kind"] == "while"

    def test_do_while(self, first_statement):
        result = _score_stmt(first_statement, "do { b(); } while (a);")
        assert result.score == pytest.approx(1 + 4.1 + 1 + 1.0)
        assert result.metadata["loop_kind"] == "do-while"

    def test_for_of(self, first_statement):
        result = _score_stmt(first_statement, "for (const x of xs) { b(); }")
        assert result.score == pytest.approx(1 + 1 + 4.1 + 0.8)
        assert result.metadata["loop_kind"] == "for-of"

    def test_for_in(self, first_statement):
        result = _score_stmt(first_statement, "for (const k in obj) { b(); }")
        assert result.metadata["loop_kind"] == "for-in"

    def test_for(self, first_statement):
        # init: (1 + 1) * 1.5, condition: 3.3, increment: 2.2
        result = _score_stmt(first_statement, "for (let i = 0; i < n; i++) { b(); }")
        assert result.score == pytest.approx(1 + 3.0 + 3.3 + 2.2 + 4.1 + 1.0)
        assert result.metadata["loop_kind"] == "for"

    def test_switch(self, first_statement):
        # per case: 0.3 * 1 + (3 + 1)
        result = _score_stmt(
            first_statement, "switch (x) { case 1: a(); break; case 2: b(); break; }"
        )
        assert result.score == pytest.approx(1 + 1 + 2 * 4.3 + 0.5 * 2)
        assert result.metadata["case_count"] == 2

    def test_switch_default_counts_as_case(self, first_statement):
        result = _score_stmt(first_statement, "switch (x) { case 1: a(); break; default: c(); }")
        assert result.metadata["case_count"] == 2
        assert result.score == pytest.approx(1 + 1 + 4.3 + 3 + 0.5 * 2)

    def test_try_catch_finally(self, first_statement):
        result = _score_stmt(first_statement, "try { a(); } catch (e) { b(); } finally { c(); }")
        assert result.score == pytest.approx(1 + 4.1 + (4.1 + 2 + 0.5) + (4.1 + 1.5))
        assert result.metadata["has_catch"] is True
        assert result.metadata["catch_binds"] is True
        assert result.metadata["has_finally"] is True

    def test_catch_without_binding(self, first_statement):
        result = _score_stmt(first_statement, "try { a(); } catch { b(); }")
        assert result.score == pytest.approx(1 + 4.1 + 4.1 + 2)
        assert result.metadata["catch_binds"] is False

    def test_try_finally(self, first_statement):
        result = _score_stmt(first_statement, "try { a(); } finally { c(); }")
        assert result.score == pytest.approx(1 + 4.1 + 4.1 + 1.5)

    def test_throw(self, first_statement):
        assert _score_stmt(first_statement, 'throw new Error("x");').score == pytest.approx(4.0)

    def test_block(self, first_statement):
        result = _score_stmt(first_statement, "{ a(); b(); }")
        assert result.score == pytest.approx(1 + 3 + 3 + 0.2)
        assert result.metadata["statement_count"] == 2

    def test_function_carries_body(self, first_statement):
        # body: 1 + (1 + 3.1) + 0.1
        result = _score_stmt(first_statement, "function add(a, b) { return a + b; }")
        assert result.score == pytest.approx(1 + 5.2)

    def test_arrow_with_expression_body(self, first_statement):
        result = _score_stmt(first_statement, "const f = (x) => x * 2;")
        assert result.score == pytest.approx(1 + (1 + 3.1))

    def test_class_members(self, first_statement):
        result = _score_stmt(first_statement, "class A { x = 1; m() { return 1; } }")
        # field: 1 + 1, method: 1 + (1 + 2 + 0.1)
        assert result.score == pytest.approx(1 + 2 + 4.1)
        assert result.metadata["member_count"] == 2
        assert result.metadata["has_heritage"] is False

    def test_line_range(self, first_statement):
        result = _score_stmt(first_statement, "if (a) {\n  b();\n}\n")
        assert result.line_range.start_line == 1
        assert result.line_range.end_line == 3


# ── Recursion guards ──────────────────────────────────────────────


class TestRecursionGuards:
    def test_truncates_at_max_depth(self, first_expression):
        # a.b.c.d: the third member level sits at depth 2
        result = _score_expr(first_expression, "a.b.c.d;", max_depth=2)
        leaf = result.children[0].children[0]
        assert leaf.truncated
        assert leaf.score == 1.0
        assert leaf.children == ()
        assert result.score == pytest.approx(3.0)

    def test_depth_limit_logs_filename(self, caplog, monkeypatch):
        # the CLI may have detached the package logger from the root logger
        monkeypatch.setattr(logging.getLogger(PACKAGE_LOGGER), "propagate", True)
        caplog.set_level(logging.DEBUG, logger=scorer.logger.name)
        tree = parse_source("a.b.c.d;", filename="deep.ts")
        expr = tree.root.children()[0].children()[0]
        score_node(expr, create_context(tree, max_depth=2))
        assert "Depth limit 2 reached at member_expression (deep.ts:1)" in caplog.text

    def test_context_filename(self):
        assert create_context(parse_source("x;", filename="f.ts")).filename == "f.ts"
        assert create_context().filename == "<source>"

    def test_untruncated_deeper_tree(self, first_expression):
        assert _score_expr(first_expression, "a.b.c.d;").score == pytest.approx(4.0)

    def test_depth_restored_after_call(self, first_expression):
        tree, expr = first_expression("f(a && b, c);")
        context = create_context(tree)
        score_node(expr, context)
        assert context.current_depth == 0

    def test_depth_restored_when_handler_raises(self, first_expression, monkeypatch):
        def boom(node, context):
            raise RuntimeError("boom")

        monkeypatch.setitem(scorer._HANDLERS, "binary_expression", boom)
        tree, expr = first_expression("a + b;")
        context = create_context(tree)
        with pytest.raises(RuntimeError):
            score_node(expr, context)
        assert context.current_depth == 0

    def test_visited_node_returns_circular_estimate(self, first_expression):
        tree, expr = first_expression("a && b;")
        context = create_context(tree)
        first = score_node(expr, context)
        second = score_node(expr, context)
        assert not first.circular
        assert second.circular
        assert second.score == pytest.approx(1.5)
        assert second.metadata["estimated_score"] == pytest.approx(1.5)
        assert second.children == ()

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("if (a) {}", 1.5),
            ("while (a) {}", 1.8),
            ("do {} while (a);", 2.0),
            ("switch (a) {}", 2.5),
            ("try {} catch {}", 4.0),
            ("throw a;", 2.0),
            ("f(a, b);", 1.4),
            ("x;", 1.0),
        ],
    )
    def test_estimates_by_kind(self, first_statement, code, expected):
        tree, stmt = first_statement(code)
        node = stmt.children()[0] if stmt.kind == "expression_statement" else stmt
        assert estimate_score(node) == pytest.approx(expected)

    def test_visited_set_grows(self, first_expression):
        tree, expr = first_expression("a + b;")
        context = create_context(tree)
        score_node(expr, context)
        assert len(context.visited) == 3


class TestResultImmutability:
    def test_results_are_frozen(self, first_expression):
        result = _score_expr(first_expression, "a + b;")
        with pytest.raises(AttributeError):
            result.score = 0

    def test_metadata_is_a_private_copy(self):
        source = {"operator": "+"}
        result = ComplexityResult(score=1.0, node_kind="binary_expression", metadata=source)
        source["operator"] = "-"
        assert result.metadata == {"operator": "+"}

    def test_results_serialize_and_copy(self, first_expression):
        result = _score_expr(first_expression, "a && b;")
        data = asdict(result)
        assert data["metadata"]["operator"] == "&&"
        assert len(data["children"]) == 2
        assert data["line_range"] == {"start_line": 1, "end_line": 1}
        clone = copy.deepcopy(result)
        assert clone.score == result.score
        assert clone.metadata == result.metadata
        assert clone.metadata is not result.metadata

    def test_deterministic(self, first_statement):
        code = "for (let i = 0; i < n; i++) { if (i % 2 === 0) { f(i); } }"
        assert _score_stmt(first_statement, code).score == _score_stmt(first_statement, code).score
