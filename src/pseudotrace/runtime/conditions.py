"""
Condition Strings

Pure rendering of expressions into the infix text shown by the playback
client (`x <= 5`, `!isTrue`), plus the operator flip that turns an "until"
condition into its continue-condition. Nothing here touches runtime values.
"""

from ..ir.nodes import (
    BinaryExpressionIR, BooleanLiteralIR, ExpressionIR, ExpressionVisitor, IdentifierIR,
    LengthExpressionIR, NumberLiteralIR, StringLiteralIR, SubstringExpressionIR,
    UnaryExpressionIR,
)
from ..shared.numbers import format_number
from ..shared.types import COMPARISON_FLIP, BinaryOp, UnaryOp
from .values import format_primitive


def render_binary(operator: BinaryOp, left: str, right: str) -> str:
    """`<left> <op> <right>` with the operator's canonical symbol."""
    return f"{left} {operator.value} {right}"


def render_not(operand: str) -> str:
    return f"!{operand}"


def render_condition(expr: ExpressionIR) -> str:
    """Condition string for any expression node."""
    return expr.accept(ConditionRenderer())


def flip_condition(expr: ExpressionIR) -> ExpressionIR:
    """
    Continue-condition of an "until" condition. Comparisons flip their
    operator (`>` becomes `<=`), `not c` unwraps to `c`, anything else is
    wrapped in `not`.
    """
    if isinstance(expr, BinaryExpressionIR) and expr.operator in COMPARISON_FLIP:
        return BinaryExpressionIR(COMPARISON_FLIP[expr.operator], expr.left, expr.right, line=expr.line)
    if isinstance(expr, UnaryExpressionIR) and expr.operator is UnaryOp.NOT:
        return expr.operand
    return UnaryExpressionIR(UnaryOp.NOT, expr, line=expr.line)


class ConditionRenderer(ExpressionVisitor[str]):
    """Renders operands by their source text: names stay names, literals stay literals."""

    def _operand(self, expr: ExpressionIR) -> str:
        text = expr.accept(self)
        if isinstance(expr, BinaryExpressionIR):
            return f"({text})"
        return text

    def visit_number_literal(self, node: NumberLiteralIR) -> str:
        return node.text if node.text is not None else format_number(node.value)

    def visit_string_literal(self, node: StringLiteralIR) -> str:
        return node.value

    def visit_boolean_literal(self, node: BooleanLiteralIR) -> str:
        return format_primitive(node.value)

    def visit_identifier(self, node: IdentifierIR) -> str:
        return node.name

    def visit_binary_expression(self, node: BinaryExpressionIR) -> str:
        return render_binary(node.operator, self._operand(node.left), self._operand(node.right))

    def visit_unary_expression(self, node: UnaryExpressionIR) -> str:
        return render_not(self._operand(node.operand))

    def visit_length_expression(self, node: LengthExpressionIR) -> str:
        return f"length of {node.source}"

    def visit_substring_expression(self, node: SubstringExpressionIR) -> str:
        return f"substring of {node.string} from {self._operand(node.start)} to {self._operand(node.end)}"

