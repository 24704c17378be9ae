#!/usr/bin/env python3
"""
Tests for condition-string rendering and until-condition flipping.
"""

import pytest

from pseudotrace.ir.loader import IRLoader
from pseudotrace.ir.nodes import UnaryExpressionIR, VariableDeclarationIR
from pseudotrace.runtime.conditions import ConditionRenderer, flip_condition, render_condition
from pseudotrace.shared.errors import UnsupportedNode
from pseudotrace.shared.types import BinaryOp, UnaryOp
from tests.test_utils import boolean, expr, ident, length, not_, num, substring, text


def _load(raw):
    return IRLoader().load_operand(raw)


class TestRenderCondition:
    """Infix rendering with original operand text"""

    @pytest.mark.parametrize("raw, expected", [
        (expr("x", "<=", "5"), "x <= 5"),
        (expr(ident("x"), ">", num(5)), "x > 5"),
        (expr("x", "greater", "10"), "x > 10"),
        (expr("a", "less", "b"), "a < b"),
        (expr("a", "equal", "b"), "a == b"),
        (expr("a", "&&", "b"), "a and b"),
        (expr("5", "<", "x"), "5 < x"),
    ])
    def test_binary(self, raw, expected):
        assert render_condition(_load(raw)) == expected

    def test_number_keeps_source_text(self):
        assert render_condition(_load(expr("x", "==", "2.50"))) == "x == 2.50"

    def test_not_renders_with_bang(self):
        assert render_condition(_load(not_("isTrue"))) == "!isTrue"

    def test_not_of_comparison_is_parenthesized(self):
        assert render_condition(_load(not_(expr("x", ">", "1")))) == "!(x > 1)"

    def test_nested_operands_are_parenthesized(self):
        raw = expr(expr("x", "+", "1"), "<", "y")
        assert render_condition(_load(raw)) == "(x + 1) < y"

    def test_literals(self):
        assert render_condition(_load(expr(boolean(True), "==", "flag"))) == "true == flag"
        assert render_condition(_load(expr(text("abc"), "==", "s"))) == "abc == s"

    def test_string_operations(self):
        assert render_condition(_load(expr(length("s"), ">", "3"))) == "length of s > 3"
        assert render_condition(_load(substring("s", "0", "2"))) == "substring of s from 0 to 2"

    def test_statement_is_rejected(self):
        node = VariableDeclarationIR("x", _load("1"))
        with pytest.raises(UnsupportedNode):
            node.accept(ConditionRenderer())


class TestFlipCondition:
    """Until-condition to continue-condition"""

    @pytest.mark.parametrize("operator, flipped", [
        (">", "<="), ("<=", ">"), ("<", ">="), (">=", "<"), ("==", "!="), ("!=", "=="),
    ])
    def test_comparisons_flip(self, operator, flipped):
        result = flip_condition(_load(expr("x", operator, "5")))
        assert render_condition(result) == f"x {flipped} 5"

    def test_word_operator_flips(self):
        assert render_condition(flip_condition(_load(expr("x", "greater", "5")))) == "x <= 5"

    def test_not_unwraps(self):
        assert render_condition(flip_condition(_load(not_("done")))) == "done"

    def test_other_expressions_are_negated(self):
        result = flip_condition(_load("done"))
        assert isinstance(result, UnaryExpressionIR)
        assert result.operator is UnaryOp.NOT
        assert render_condition(result) == "!done"

    def test_logical_is_negated_as_a_whole(self):
        result = flip_condition(_load(expr("a", "and", "b")))
        assert render_condition(result) == "!(a and b)"

    def test_original_is_untouched(self):
        original = _load(expr("x", ">", "5"))
        flip_condition(original)
        assert original.operator is BinaryOp.GT
