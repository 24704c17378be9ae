#!/usr/bin/env python3
"""
Tests for decoding the parser's JSON document into IR nodes.
"""

import pytest

from pseudotrace.ir.loader import IRLoader, load_program
from pseudotrace.ir.nodes import (
    BinaryExpressionIR, BooleanLiteralIR, FunctionDeclarationIR, IdentifierIR, IfStatementIR,
    LengthExpressionIR, LoopFromToIR, LoopUntilIR, NumberLiteralIR, PrintStatementIR, ProgramIR,
    ReturnStatementIR, StringLiteralIR, SubstringExpressionIR, UnaryExpressionIR,
    VariableDeclarationIR, WhileLoopIR,
)
from pseudotrace.shared.errors import UnsupportedNode
from pseudotrace.shared.types import BinaryOp, UnaryOp
from tests.test_utils import (
    else_if, expr, function, ident, if_, length, loop_from_to, loop_until, not_, num, print_,
    program, return_, set_, substring, text, while_,
)


class TestOperands:
    """Bare operand decoding"""

    def test_raw_number(self):
        node = IRLoader().load_operand(5)
        assert node == NumberLiteralIR(5, text="5")

    def test_numeric_string_keeps_text(self):
        node = IRLoader().load_operand("05")
        assert isinstance(node, NumberLiteralIR)
        assert node.value == 5
        assert node.text == "05"

    def test_decimal_string(self):
        assert IRLoader().load_operand("2.5").value == 2.5

    def test_boolean_words(self):
        assert IRLoader().load_operand("true") == BooleanLiteralIR(True)
        assert IRLoader().load_operand(False) == BooleanLiteralIR(False)

    def test_other_string_is_identifier(self):
        assert IRLoader().load_operand("x") == IdentifierIR("x")

    def test_untagged_value_wrapper(self):
        assert IRLoader().load_operand({"value": "x"}) == IdentifierIR("x")

    def test_untagged_condition(self):
        node = IRLoader().load_operand({"left": "x", "operator": "greater", "right": "5"})
        assert isinstance(node, BinaryExpressionIR)
        assert node.operator is BinaryOp.GT
        assert node.left == IdentifierIR("x")

    def test_unsupported_operand(self):
        with pytest.raises(UnsupportedNode):
            IRLoader().load_operand([1, 2])


class TestExpressions:

    def test_tagged_literals(self):
        loader = IRLoader()
        assert loader.load_operand(num(3)) == NumberLiteralIR(3, text="3")
        assert loader.load_operand(text("5")) == StringLiteralIR("5")
        assert loader.load_operand(ident("y")) == IdentifierIR("y")
        assert loader.load_operand({"type": "Identifier", "name": "z"}) == IdentifierIR("z")

    def test_generic_literal(self):
        loader = IRLoader()
        assert loader.load_operand({"type": "Literal", "value": "hi"}) == StringLiteralIR("hi")
        assert loader.load_operand({"type": "Literal", "value": True}) == BooleanLiteralIR(True)

    def test_unary_forms(self):
        loader = IRLoader()
        tagged = loader.load_operand(not_("flag"))
        legacy = loader.load_operand({"type": "Expression", "operator": "!", "right": "flag"})
        for node in (tagged, legacy):
            assert isinstance(node, UnaryExpressionIR)
            assert node.operator is UnaryOp.NOT
            assert node.operand == IdentifierIR("flag")

    def test_string_operations(self):
        loader = IRLoader()
        assert loader.load_operand(length("s")) == LengthExpressionIR("s")
        node = loader.load_operand(substring({"type": "Identifier", "value": "s"}, "0", "x"))
        assert isinstance(node, SubstringExpressionIR)
        assert node.string == "s"
        assert node.start == NumberLiteralIR(0, text="0")
        assert node.end == IdentifierIR("x")

    def test_unknown_operator(self):
        with pytest.raises(UnsupportedNode) as exc_info:
            IRLoader().load_operand(expr("a", "**", "b"))
        assert "**" in str(exc_info.value)

    def test_missing_operand(self):
        with pytest.raises(UnsupportedNode):
            IRLoader().load_operand({"type": "Expression", "operator": "+", "left": "a"})


class TestStatements:

    def test_program_shapes(self):
        document = program(set_("x", num(1)), print_("x"))
        loaded = load_program(document)
        assert isinstance(loaded, ProgramIR)
        assert loaded == load_program(document["program"])
        assert loaded.statements[0] == VariableDeclarationIR("x", NumberLiteralIR(1, text="1"))
        assert loaded.statements[1] == PrintStatementIR("x")

    def test_print_unwraps_literal_nodes(self):
        loaded = load_program(program(print_(text("hello")), print_(num(3))))
        assert [s.value for s in loaded.statements] == ["hello", 3]

    def test_lines_are_kept(self):
        loaded = load_program(program(set_("x", num(1), line=4)))
        assert loaded.statements[0].line == 4

    def test_if(self):
        node = load_program(program(if_(expr("x", ">", "1"), [print_("a")], [print_("b")]))).statements[0]
        assert isinstance(node, IfStatementIR)
        assert node.consequent == [PrintStatementIR("a")]
        assert node.alternate == [PrintStatementIR("b")]

    def test_if_without_alternate(self):
        node = load_program(program(if_(expr("x", ">", "1"), []))).statements[0]
        assert node.alternate is None

    def test_loops(self):
        loaded = load_program(program(
            loop_until(expr("x", ">", "5"), [print_("x")]),
            loop_from_to("0", "10", [print_("i")]),
            loop_from_to("1", "n", [], variable="k"),
            {"type": "LoopFromTo", "loopVariable": {"value": "j"}, "range": {"start": 0, "end": 1}},
        ))
        until, counted, named, wrapped = loaded.statements
        assert isinstance(until, LoopUntilIR)
        assert isinstance(counted, LoopFromToIR)
        assert counted.loop_variable is None
        assert counted.end == NumberLiteralIR(10, text="10")
        assert named.loop_variable == "k"
        assert wrapped.loop_variable == "j"
        assert wrapped.body == []

    def test_while_loop(self):
        node = load_program(program(while_(expr("x", "<", "3"), [print_("x")], line=4))).statements[0]
        assert isinstance(node, WhileLoopIR)
        assert node.condition.operator is BinaryOp.LT
        assert isinstance(node.body[0], PrintStatementIR)
        assert node.line == 4

    def test_else_if_decodes_as_if(self):
        node = load_program(program(
            if_(expr("x", ">", "1"), [], [else_if(expr("x", "==", "1"), [print_("x")])]),
        )).statements[0]
        (chained,) = node.alternate
        assert isinstance(chained, IfStatementIR)
        assert chained.condition.operator is BinaryOp.EQ
        assert chained.alternate is None

    def test_function_and_return(self):
        node = load_program(program(
            function("add", ["a", {"value": "b"}], [return_(expr("a", "+", "b"))]),
        )).statements[0]
        assert isinstance(node, FunctionDeclarationIR)
        assert node.params == ["a", "b"]
        assert isinstance(node.body[0], ReturnStatementIR)


class TestMalformedInput:

    def test_unknown_statement_kind(self):
        with pytest.raises(UnsupportedNode) as exc_info:
            load_program(program({"type": "ArrayCreation", "varName": "a"}))
        assert exc_info.value.kind == "ArrayCreation"

    def test_missing_type_tag(self):
        with pytest.raises(UnsupportedNode):
            load_program(program({"name": "x", "value": 1}))

    def test_expression_as_statement(self):
        with pytest.raises(UnsupportedNode) as exc_info:
            load_program(program(expr("a", "+", "b")))
        assert "expression used where a statement is expected" in str(exc_info.value)

    def test_missing_field(self):
        with pytest.raises(UnsupportedNode) as exc_info:
            load_program(program({"type": "VariableDeclaration", "name": "x"}))
        assert "missing 'value'" in str(exc_info.value)

    def test_missing_program_key(self):
        with pytest.raises(UnsupportedNode):
            load_program({"statements": []})
