"""
IR Loader

Builds IR nodes from the parser's JSON document `{"program": [...]}`.

The parser flattens many operands to bare values (`"x"`, `"5"`, `true`), so
operand decoding follows the same rules everywhere:

- bool                      -> BooleanLiteralIR
- int / float / "5" / "2.5" -> NumberLiteralIR (source text kept)
- "true" / "false"          -> BooleanLiteralIR
- any other string          -> IdentifierIR
- object                    -> decoded by its `type` tag

Unknown or missing tags raise UnsupportedNode: a node the executor cannot
handle must never be skipped silently.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..shared.errors import UnsupportedNode
from ..shared.numbers import format_number, is_number, parse_number
from ..shared.types import parse_binary_op, parse_unary_op
from ..utils.config import BOOLEAN_FALSE_LITERAL, BOOLEAN_TRUE_LITERAL
from .nodes import (
    BinaryExpressionIR, BooleanLiteralIR, ExpressionIR, FunctionDeclarationIR, IdentifierIR,
    IfStatementIR, LengthExpressionIR, LoopFromToIR, LoopUntilIR, NumberLiteralIR,
    PrintStatementIR, ProgramIR, ReturnStatementIR, StatementIR, StringLiteralIR,
    SubstringExpressionIR, UnaryExpressionIR, VariableDeclarationIR, WhileLoopIR,
)

logger = logging.getLogger("pseudotrace.ir.loader")

_LITERAL_KINDS = frozenset({"Identifier", "NumberLiteral", "StringLiteral", "BooleanLiteral", "Literal"})


def load_program(document: Any) -> ProgramIR:
    """
    Decode an IR document. Accepts `{"program": [...]}` or the bare list.
    """
    if isinstance(document, dict):
        if "program" not in document:
            raise UnsupportedNode("document", "missing 'program' list")
        nodes = document["program"]
    else:
        nodes = document
    if not isinstance(nodes, list):
        raise UnsupportedNode("document", "'program' must be a list of statements")
    loader = IRLoader()
    program = ProgramIR(loader.load_statements(nodes))
    logger.debug(f"Loaded IR program with {len(program.statements)} top-level statements")
    return program


class IRLoader:
    """Stateless decoder from JSON-shaped dicts to IR nodes."""

    def __init__(self):
        self._statement_decoders: Dict[str, Callable[[dict], StatementIR]] = {
            "VariableDeclaration": self._load_variable_declaration,
            "PrintStatement": self._load_print_statement,
            "IfStatement": self._load_if_statement,
            # else-if: the alternate holds the rest of the chain
            "OtherwiseIfStatement": self._load_if_statement,
            "LoopUntil": self._load_loop_until,
            "WhileLoop": self._load_while_loop,
            "LoopFromTo": self._load_loop_from_to,
            "FunctionDeclaration": self._load_function_declaration,
            "ReturnStatement": self._load_return_statement,
        }
        self._expression_decoders: Dict[str, Callable[[dict], ExpressionIR]] = {
            "Expression": self._load_expression,
            "UnaryExpression": self._load_unary_expression,
            "Identifier": self._load_identifier,
            "NumberLiteral": self._load_number_literal,
            "StringLiteral": self._load_string_literal,
            "BooleanLiteral": self._load_boolean_literal,
            "Literal": self._load_literal,
            "LengthExpression": self._load_length_expression,
            "SubstringExpression": self._load_substring_expression,
        }

    # === Statements ===

    def load_statements(self, nodes: Optional[List[Any]]) -> List[StatementIR]:
        if nodes is None:
            return []
        if not isinstance(nodes, list):
            raise UnsupportedNode("block", "statement bodies must be lists")
        return [self.load_statement(node) for node in nodes]

    def load_statement(self, node: Any) -> StatementIR:
        if not isinstance(node, dict):
            raise UnsupportedNode(type(node).__name__, "statements must be objects")
        kind = node.get("type")
        if kind is None:
            raise UnsupportedNode(None, "node has no 'type' tag")
        decoder = self._statement_decoders.get(kind)
        if decoder is None:
            if kind in self._expression_decoders:
                raise UnsupportedNode(kind, "expression used where a statement is expected")
            raise UnsupportedNode(kind)
        return decoder(node)

    def _load_variable_declaration(self, node: dict) -> StatementIR:
        name = node.get("name", node.get("varName"))
        if not isinstance(name, str):
            raise UnsupportedNode("VariableDeclaration", "missing 'name'")
        return VariableDeclarationIR(name, self.load_operand(_require(node, "VariableDeclaration", "value")),
                                     line=_line(node))

    def _load_print_statement(self, node: dict) -> StatementIR:
        value = _require(node, "PrintStatement", "value")
        if isinstance(value, dict):
            if value.get("type") not in _LITERAL_KINDS and "type" in value:
                raise UnsupportedNode("PrintStatement", f"cannot print a {value.get('type')}")
            value = value.get("value", value.get("name"))
        return PrintStatementIR(value, line=_line(node))

    def _load_if_statement(self, node: dict) -> StatementIR:
        alternate = node.get("alternate")
        return IfStatementIR(
            self.load_operand(_require(node, "IfStatement", "condition")),
            self.load_statements(node.get("consequent", [])),
            self.load_statements(alternate) if alternate is not None else None,
            line=_line(node),
        )

    def _load_loop_until(self, node: dict) -> StatementIR:
        return LoopUntilIR(
            self.load_operand(_require(node, "LoopUntil", "condition")),
            self.load_statements(node.get("body", [])),
            line=_line(node),
        )

    def _load_while_loop(self, node: dict) -> StatementIR:
        return WhileLoopIR(
            self.load_operand(_require(node, "WhileLoop", "condition")),
            self.load_statements(node.get("body", [])),
            line=_line(node),
        )

    def _load_loop_from_to(self, node: dict) -> StatementIR:
        range_ = _require(node, "LoopFromTo", "range")
        if not isinstance(range_, dict):
            raise UnsupportedNode("LoopFromTo", "'range' must be an object")
        loop_variable = node.get("loopVariable")
        if isinstance(loop_variable, dict):
            loop_variable = loop_variable.get("value", loop_variable.get("name"))
        return LoopFromToIR(
            loop_variable,
            self.load_operand(_require(range_, "LoopFromTo", "start")),
            self.load_operand(_require(range_, "LoopFromTo", "end")),
            self.load_statements(node.get("body", [])),
            line=_line(node),
        )

    def _load_function_declaration(self, node: dict) -> StatementIR:
        name = _require(node, "FunctionDeclaration", "name")
        params = node.get("params") or []
        return FunctionDeclarationIR(
            name,
            [p if isinstance(p, str) else str(p.get("value", p.get("name"))) for p in params],
            self.load_statements(node.get("body", [])),
            line=_line(node),
        )

    def _load_return_statement(self, node: dict) -> StatementIR:
        return ReturnStatementIR(self.load_operand(_require(node, "ReturnStatement", "value")),
                                 line=_line(node))

    # === Expressions ===

    def load_operand(self, raw: Any) -> ExpressionIR:
        """Decode an expression node or a bare operand value."""
        if isinstance(raw, dict):
            kind = raw.get("type")
            if kind is None:
                # Untagged shapes the parser emits: `{value}` wrappers and
                # `{left, operator, right}` conditions.
                if "operator" in raw:
                    return self._load_expression(raw)
                if "value" in raw:
                    return self.load_operand(raw["value"])
                raise UnsupportedNode(None, "expression has no 'type' tag")
            decoder = self._expression_decoders.get(kind)
            if decoder is None:
                raise UnsupportedNode(kind, "not an expression")
            return decoder(raw)
        if isinstance(raw, bool):
            return BooleanLiteralIR(raw)
        if is_number(raw):
            return NumberLiteralIR(raw, text=format_number(raw))
        if isinstance(raw, str):
            number = parse_number(raw)
            if number is not None:
                return NumberLiteralIR(number, text=raw.strip())
            if raw in (BOOLEAN_TRUE_LITERAL, BOOLEAN_FALSE_LITERAL):
                return BooleanLiteralIR(raw == BOOLEAN_TRUE_LITERAL)
            return IdentifierIR(raw)
        raise UnsupportedNode(type(raw).__name__, "operand must be a value or an expression node")

    def _load_expression(self, node: dict) -> ExpressionIR:
        operator = node.get("operator")
        if not isinstance(operator, str):
            raise UnsupportedNode("Expression", "missing 'operator'")
        unary = parse_unary_op(operator)
        if unary is not None:
            operand = node.get("argument", node.get("right"))
            return UnaryExpressionIR(unary, self.load_operand(_require_value(operand, "Expression", "right")),
                                     line=_line(node))
        binary = parse_binary_op(operator)
        if binary is None:
            raise UnsupportedNode("Expression", f"unknown operator '{operator}'")
        return BinaryExpressionIR(
            binary,
            self.load_operand(_require(node, "Expression", "left")),
            self.load_operand(_require(node, "Expression", "right")),
            line=_line(node),
        )

    def _load_unary_expression(self, node: dict) -> ExpressionIR:
        operator = parse_unary_op(node.get("operator", "not"))
        if operator is None:
            raise UnsupportedNode("UnaryExpression", f"unknown operator '{node.get('operator')}'")
        operand = node.get("argument", node.get("operand", node.get("right")))
        return UnaryExpressionIR(operator, self.load_operand(_require_value(operand, "UnaryExpression", "argument")),
                                 line=_line(node))

    def _load_identifier(self, node: dict) -> ExpressionIR:
        name = node.get("value", node.get("name"))
        if not isinstance(name, str):
            raise UnsupportedNode("Identifier", "missing 'value'")
        return IdentifierIR(name, line=_line(node))

    def _load_number_literal(self, node: dict) -> ExpressionIR:
        value = _require(node, "NumberLiteral", "value")
        if is_number(value):
            return NumberLiteralIR(value, text=format_number(value), line=_line(node))
        number = parse_number(value) if isinstance(value, str) else None
        if number is None:
            raise UnsupportedNode("NumberLiteral", f"value {value!r} is not a number")
        return NumberLiteralIR(number, text=value.strip(), line=_line(node))

    def _load_string_literal(self, node: dict) -> ExpressionIR:
        value = _require(node, "StringLiteral", "value")
        return StringLiteralIR(str(value), line=_line(node))

    def _load_boolean_literal(self, node: dict) -> ExpressionIR:
        value = _require(node, "BooleanLiteral", "value")
        if isinstance(value, str):
            value = value.lower() == BOOLEAN_TRUE_LITERAL
        if not isinstance(value, bool):
            raise UnsupportedNode("BooleanLiteral", f"value {value!r} is not a boolean")
        return BooleanLiteralIR(value, line=_line(node))

    def _load_literal(self, node: dict) -> ExpressionIR:
        value = _require(node, "Literal", "value")
        if isinstance(value, bool):
            return BooleanLiteralIR(value, line=_line(node))
        if is_number(value):
            return NumberLiteralIR(value, text=format_number(value), line=_line(node))
        return StringLiteralIR(str(value), line=_line(node))

    def _load_length_expression(self, node: dict) -> ExpressionIR:
        return LengthExpressionIR(_variable_name(_require(node, "LengthExpression", "source"), "LengthExpression"),
                                  line=_line(node))

    def _load_substring_expression(self, node: dict) -> ExpressionIR:
        return SubstringExpressionIR(
            _variable_name(_require(node, "SubstringExpression", "string"), "SubstringExpression"),
            self.load_operand(_require(node, "SubstringExpression", "start")),
            self.load_operand(_require(node, "SubstringExpression", "end")),
            line=_line(node),
        )


def _require(node: dict, kind: str, field: str) -> Any:
    if field not in node:
        raise UnsupportedNode(kind, f"missing '{field}'")
    return _require_value(node[field], kind, field)


def _require_value(value: Any, kind: str, field: str) -> Any:
    if value is None:
        raise UnsupportedNode(kind, f"missing '{field}'")
    return value


def _variable_name(raw: Any, kind: str) -> str:
    if isinstance(raw, dict):
        raw = raw.get("value", raw.get("name"))
    if not isinstance(raw, str):
        raise UnsupportedNode(kind, "source must name a variable")
    return raw


def _line(node: dict) -> Optional[int]:
    line = node.get("line")
    return line if isinstance(line, int) and not isinstance(line, bool) else None
