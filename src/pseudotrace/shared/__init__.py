"""
Shared components: value kinds, operators and the error taxonomy.
"""

from .types import ValueType, BinaryOp, UnaryOp, COMPARISON_FLIP, parse_binary_op, parse_unary_op
from .errors import (
    Diagnostic, format_diagnostic,
    PseudotraceError, UndeclaredVariable, InvalidSubstringRange, InvalidOperation,
    LoopIterationLimitExceeded, PseudotraceImplementationError, UnsupportedNode,
)
