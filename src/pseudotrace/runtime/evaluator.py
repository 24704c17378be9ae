"""
Expression Evaluator

Resolves expression nodes to runtime values against the symbol table.
Every failure is raised where it is detected; nothing is caught here.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..ir.nodes import (
    BinaryExpressionIR, BooleanLiteralIR, ExpressionIR, ExpressionVisitor, IdentifierIR,
    LengthExpressionIR, NumberLiteralIR, StringLiteralIR, SubstringExpressionIR,
    UnaryExpressionIR,
)
from ..shared.errors import InvalidOperation, InvalidSubstringRange, UndeclaredVariable
from ..shared.numbers import Number, is_number, normalize_number, parse_number
from ..shared.types import BinaryOp, ValueType
from .conditions import render_condition
from .environment import SymbolEntry, SymbolTable
from .values import (
    Primitive, PrimitiveValue, RuntimeValue, SubstringResult, format_primitive, plain,
    primitive, type_of,
)

logger = logging.getLogger("pseudotrace.runtime.evaluator")


@dataclass(frozen=True)
class EvaluatedCondition:
    """Condition string plus its boolean outcome, as shown in `if` frames."""
    condition: str
    result: bool


def _to_number(value: Primitive) -> Optional[Number]:
    if is_number(value):
        return value
    if isinstance(value, str):
        return parse_number(value)
    return None


def _mod(left: Number, right: Number) -> Number:
    # Sign follows the dividend
    return math.fmod(left, right)


_ARITHMETIC: Dict[BinaryOp, Callable[[Number, Number], Number]] = {
    BinaryOp.ADD: lambda l, r: l + r,
    BinaryOp.SUB: lambda l, r: l - r,
    BinaryOp.MUL: lambda l, r: l * r,
    BinaryOp.DIV: lambda l, r: l / r,
    BinaryOp.MOD: _mod,
}

_COMPARISON: Dict[BinaryOp, Callable[[Primitive, Primitive], bool]] = {
    BinaryOp.EQ: lambda l, r: l == r,
    BinaryOp.NE: lambda l, r: l != r,
    BinaryOp.LT: lambda l, r: l < r,
    BinaryOp.LE: lambda l, r: l <= r,
    BinaryOp.GT: lambda l, r: l > r,
    BinaryOp.GE: lambda l, r: l >= r,
}


class ExpressionEvaluator(ExpressionVisitor[RuntimeValue]):
    """
    Evaluates expressions in the single flat scope.

    `line` is the line of the statement being executed; the executor updates
    it so errors raised here point at the offending statement.
    """

    def __init__(self, symbols: SymbolTable):
        self.symbols = symbols
        self.line: Optional[int] = None

    def evaluate(self, expr: ExpressionIR) -> RuntimeValue:
        return expr.accept(self)

    def evaluate_condition(self, expr: ExpressionIR) -> EvaluatedCondition:
        value = plain(self.evaluate(expr))
        return EvaluatedCondition(render_condition(expr), bool(value))

    def lookup(self, name: str) -> SymbolEntry:
        if not self.symbols.has(name):
            logger.debug(f"Undeclared variable '{name}' on line {self.line}")
            raise UndeclaredVariable(name, line=self.line)
        return self.symbols.get(name)

    # === Literals ===

    def visit_number_literal(self, node: NumberLiteralIR) -> RuntimeValue:
        return PrimitiveValue(ValueType.NUMBER, normalize_number(node.value))

    def visit_string_literal(self, node: StringLiteralIR) -> RuntimeValue:
        return PrimitiveValue(ValueType.STRING, node.value)

    def visit_boolean_literal(self, node: BooleanLiteralIR) -> RuntimeValue:
        return PrimitiveValue(ValueType.BOOLEAN, node.value)

    def visit_identifier(self, node: IdentifierIR) -> RuntimeValue:
        return self.lookup(node.name).value

    # === Operators ===

    def visit_binary_expression(self, node: BinaryExpressionIR) -> RuntimeValue:
        left = plain(self.evaluate(node.left))
        right = plain(self.evaluate(node.right))
        operator = node.operator
        if operator.is_arithmetic:
            return primitive(self._arithmetic(operator, left, right))
        if operator.is_comparison:
            return primitive(self._compare(operator, left, right))
        return primitive(self._logical(operator, left, right))

    def visit_unary_expression(self, node: UnaryExpressionIR) -> RuntimeValue:
        operand = plain(self.evaluate(node.operand))
        if not isinstance(operand, bool):
            raise InvalidOperation("Cannot use 'not' with a non-boolean expression.", line=self.line)
        return PrimitiveValue(ValueType.BOOLEAN, not operand)

    def _arithmetic(self, operator: BinaryOp, left: Primitive, right: Primitive) -> Primitive:
        if operator is BinaryOp.ADD and isinstance(left, str) and isinstance(right, str):
            return left + right
        if isinstance(left, bool) or isinstance(right, bool):
            raise InvalidOperation("Booleans cannot be used in numeric expressions.", line=self.line)
        left_number = _to_number(left)
        right_number = _to_number(right)
        if left_number is None or right_number is None:
            if operator is BinaryOp.ADD:
                return format_primitive(left) + format_primitive(right)
            raise InvalidOperation(
                f"Cannot apply '{operator.value}' to non-numeric operands.", line=self.line
            )
        if operator in (BinaryOp.DIV, BinaryOp.MOD) and right_number == 0:
            raise InvalidOperation("Division by zero is not allowed.", line=self.line)
        try:
            return normalize_number(_ARITHMETIC[operator](left_number, right_number))
        except OverflowError:
            raise InvalidOperation("Numeric result is too large.", line=self.line) from None

    def _compare(self, operator: BinaryOp, left: Primitive, right: Primitive) -> bool:
        if type_of(left) is not type_of(right):
            raise InvalidOperation(
                "Using comparison operators with different value types on either side is not allowed.",
                line=self.line,
            )
        return _COMPARISON[operator](left, right)

    def _logical(self, operator: BinaryOp, left: Primitive, right: Primitive) -> bool:
        if not isinstance(left, bool) or not isinstance(right, bool):
            raise InvalidOperation(
                f"Cannot use '{operator.value}' with non-boolean expressions on either side.",
                line=self.line,
            )
        if operator is BinaryOp.AND:
            return left and right
        return left or right

    # === String operations ===

    def visit_length_expression(self, node: LengthExpressionIR) -> RuntimeValue:
        text = plain(self.lookup(node.source).value)
        if not isinstance(text, str):
            raise InvalidOperation(
                f"Cannot compute length for non-string type: {node.source}", line=self.line
            )
        return PrimitiveValue(ValueType.NUMBER, len(text))

    def visit_substring_expression(self, node: SubstringExpressionIR) -> RuntimeValue:
        text = plain(self.lookup(node.string).value)
        if not isinstance(text, str):
            raise InvalidOperation(
                f"Cannot take a substring of non-string type: {node.string}", line=self.line
            )
        start = self._index(node.start)
        end = self._index(node.end)
        if start > end:
            raise InvalidSubstringRange(start, end, line=self.line)
        lo = max(0, min(start, len(text)))
        hi = max(0, min(end, len(text)))
        return SubstringResult(source=node.string, start=start, end=end, result=text[lo:hi])

    def _index(self, expr: ExpressionIR) -> int:
        value = plain(self.evaluate(expr))
        number = None if isinstance(value, bool) else _to_number(value)
        if number is None:
            raise InvalidOperation(
                f"Substring index '{format_primitive(value)}' is not a number.", line=self.line
            )
        return int(number)

