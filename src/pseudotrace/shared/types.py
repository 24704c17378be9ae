"""
Value Types and Operators

Closed enums for runtime value kinds and IR operators. Operator spellings
coming from the parser are normalized here once, so the evaluator and the
condition renderer only ever see enum members.
"""

from enum import Enum
from typing import Dict, Optional


class ValueType(Enum):
    """Runtime value kind, as reported in `set` frames."""
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"


class BinaryOp(Enum):
    """Binary operators - compile-time checked enum"""
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"

    # Comparison
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Logical
    AND = "and"
    OR = "or"

    @property
    def is_arithmetic(self) -> bool:
        return self in _ARITHMETIC_OPS

    @property
    def is_comparison(self) -> bool:
        return self in _COMPARISON_OPS

    @property
    def is_logical(self) -> bool:
        return self in (BinaryOp.AND, BinaryOp.OR)


class UnaryOp(Enum):
    """Unary operators"""
    NOT = "not"


_ARITHMETIC_OPS = frozenset({BinaryOp.ADD, BinaryOp.SUB, BinaryOp.MUL, BinaryOp.DIV, BinaryOp.MOD})
_COMPARISON_OPS = frozenset({BinaryOp.EQ, BinaryOp.NE, BinaryOp.LT, BinaryOp.LE, BinaryOp.GT, BinaryOp.GE})

# Word and C-style spellings the parser may emit
_BINARY_OP_ALIASES: Dict[str, BinaryOp] = {
    "greater": BinaryOp.GT,
    "less": BinaryOp.LT,
    "equal": BinaryOp.EQ,
    "&&": BinaryOp.AND,
    "||": BinaryOp.OR,
}

_UNARY_OP_ALIASES: Dict[str, UnaryOp] = {
    "not": UnaryOp.NOT,
    "!": UnaryOp.NOT,
}

# Negation of each comparison: `until x > 5` continues while `x <= 5`
COMPARISON_FLIP: Dict[BinaryOp, BinaryOp] = {
    BinaryOp.GT: BinaryOp.LE,
    BinaryOp.LE: BinaryOp.GT,
    BinaryOp.LT: BinaryOp.GE,
    BinaryOp.GE: BinaryOp.LT,
    BinaryOp.EQ: BinaryOp.NE,
    BinaryOp.NE: BinaryOp.EQ,
}


def parse_binary_op(text: str) -> Optional[BinaryOp]:
    """Map an operator spelling to its BinaryOp, or None if unknown."""
    if text in _BINARY_OP_ALIASES:
        return _BINARY_OP_ALIASES[text]
    try:
        return BinaryOp(text)
    except ValueError:
        return None


def parse_unary_op(text: str) -> Optional[UnaryOp]:
    return _UNARY_OP_ALIASES.get(text)
