"""
IR Nodes

One class per IR kind produced by the pseudocode parser. Dispatch goes
through IRVisitor: every visitor must implement every visit_* method, so a
visitor that forgets a kind fails at instantiation rather than mid-trace.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar, Union

from ..shared.errors import UnsupportedNode
from ..shared.types import BinaryOp, UnaryOp

T = TypeVar('T')


class IRNode:
    """
    Base class for all IR nodes.

    Every node optionally carries the source `line` it came from. Regular
    class (not dataclass) so subclasses can declare __slots__ freely.
    """
    __slots__ = ('line',)

    def __init__(self, line: Optional[int] = None):
        self.line = line

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        raise NotImplementedError(f"accept() not implemented for {self.__class__.__name__}")

    def _get_all_attributes(self):
        """Get all attribute values for equality (works with __slots__)."""
        attrs = {}
        for cls in self.__class__.__mro__:
            slots = getattr(cls, '__slots__', ())
            if isinstance(slots, str):
                slots = (slots,)
            for slot in slots:
                if slot not in attrs:
                    attrs[slot] = getattr(self, slot, None)
        return attrs

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return False
        return self._get_all_attributes() == other._get_all_attributes()

    __hash__ = None  # nodes are mutable

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self._get_all_attributes().items())
        return f"{self.__class__.__name__}({fields})"


# ============================================================================
# Expressions
# ============================================================================

class ExpressionIR(IRNode):
    """Expression in IR"""
    __slots__ = ()


class NumberLiteralIR(ExpressionIR):
    """
    Number literal. `text` is the operand text used in condition strings
    (the parser may hand over "05" or 5.0; both render as written).
    """
    __slots__ = ('value', 'text')

    def __init__(self, value: Union[int, float], text: Optional[str] = None, line: Optional[int] = None):
        super().__init__(line)
        self.value = value
        self.text = text

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_number_literal(self)


class StringLiteralIR(ExpressionIR):
    __slots__ = ('value',)

    def __init__(self, value: str, line: Optional[int] = None):
        super().__init__(line)
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_string_literal(self)


class BooleanLiteralIR(ExpressionIR):
    __slots__ = ('value',)

    def __init__(self, value: bool, line: Optional[int] = None):
        super().__init__(line)
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_boolean_literal(self)


class IdentifierIR(ExpressionIR):
    """Variable reference. Lookup is by name in the single flat scope."""
    __slots__ = ('name',)

    def __init__(self, name: str, line: Optional[int] = None):
        super().__init__(line)
        self.name = name

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_identifier(self)


class BinaryExpressionIR(ExpressionIR):
    """Arithmetic, comparison or logical operation."""
    __slots__ = ('operator', 'left', 'right')

    def __init__(self, operator: BinaryOp, left: ExpressionIR, right: ExpressionIR,
                 line: Optional[int] = None):
        super().__init__(line)
        self.operator = operator
        self.left = left
        self.right = right

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_binary_expression(self)


class UnaryExpressionIR(ExpressionIR):
    __slots__ = ('operator', 'operand')

    def __init__(self, operator: UnaryOp, operand: ExpressionIR, line: Optional[int] = None):
        super().__init__(line)
        self.operator = operator
        self.operand = operand

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_unary_expression(self)


class LengthExpressionIR(ExpressionIR):
    """Character count of the string held by variable `source`."""
    __slots__ = ('source',)

    def __init__(self, source: str, line: Optional[int] = None):
        super().__init__(line)
        self.source = source

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_length_expression(self)


class SubstringExpressionIR(ExpressionIR):
    """Slice [start, end) of the string held by variable `string`."""
    __slots__ = ('string', 'start', 'end')

    def __init__(self, string: str, start: ExpressionIR, end: ExpressionIR,
                 line: Optional[int] = None):
        super().__init__(line)
        self.string = string
        self.start = start
        self.end = end

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_substring_expression(self)


# ============================================================================
# Statements
# ============================================================================

class StatementIR(IRNode):
    __slots__ = ()


class VariableDeclarationIR(StatementIR):
    """SET name TO value. Re-declaring a name overwrites it."""
    __slots__ = ('name', 'value')

    def __init__(self, name: str, value: ExpressionIR, line: Optional[int] = None):
        super().__init__(line)
        self.name = name
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_variable_declaration(self)


class PrintStatementIR(StatementIR):
    """
    PRINT value. `value` is the raw operand (already unwrapped by the
    parser): a variable name or a literal.
    """
    __slots__ = ('value',)

    def __init__(self, value: Any, line: Optional[int] = None):
        super().__init__(line)
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_print_statement(self)


class IfStatementIR(StatementIR):
    __slots__ = ('condition', 'consequent', 'alternate')

    def __init__(self, condition: ExpressionIR, consequent: List[StatementIR],
                 alternate: Optional[List[StatementIR]] = None, line: Optional[int] = None):
        super().__init__(line)
        self.condition = condition
        self.consequent = consequent
        self.alternate = alternate

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_if_statement(self)


class LoopUntilIR(StatementIR):
    """LOOP UNTIL condition: the body repeats while the condition is false."""
    __slots__ = ('condition', 'body')

    def __init__(self, condition: ExpressionIR, body: List[StatementIR], line: Optional[int] = None):
        super().__init__(line)
        self.condition = condition
        self.body = body

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_loop_until(self)


class WhileLoopIR(StatementIR):
    """WHILE condition: the body repeats while the condition is true."""
    __slots__ = ('condition', 'body')

    def __init__(self, condition: ExpressionIR, body: List[StatementIR], line: Optional[int] = None):
        super().__init__(line)
        self.condition = condition
        self.body = body

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_while_loop(self)


class LoopFromToIR(StatementIR):
    """LOOP var FROM start TO end (inclusive, step 1)."""
    __slots__ = ('loop_variable', 'start', 'end', 'body')

    def __init__(self, loop_variable: Optional[str], start: ExpressionIR, end: ExpressionIR,
                 body: List[StatementIR], line: Optional[int] = None):
        super().__init__(line)
        self.loop_variable = loop_variable
        self.start = start
        self.end = end
        self.body = body

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_loop_from_to(self)


class FunctionDeclarationIR(StatementIR):
    __slots__ = ('name', 'params', 'body')

    def __init__(self, name: str, params: List[str], body: List[StatementIR],
                 line: Optional[int] = None):
        super().__init__(line)
        self.name = name
        self.params = params
        self.body = body

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_function_declaration(self)


class ReturnStatementIR(StatementIR):
    __slots__ = ('value',)

    def __init__(self, value: ExpressionIR, line: Optional[int] = None):
        super().__init__(line)
        self.value = value

    def accept(self, visitor: 'IRVisitor[T]') -> T:
        return visitor.visit_return_statement(self)


class ProgramIR:
    """Complete program: the top-level statement list."""
    __slots__ = ('statements',)

    def __init__(self, statements: List[StatementIR]):
        self.statements = statements

    def __eq__(self, other):
        return isinstance(other, ProgramIR) and self.statements == other.statements

    __hash__ = None

    def __repr__(self) -> str:
        return f"ProgramIR(statements={self.statements!r})"


# ============================================================================
# Visitor
# ============================================================================

class IRVisitor(ABC, Generic[T]):
    """
    Visitor for IR nodes. All methods are abstract: a subclass that does
    not handle a kind cannot be instantiated.
    """

    @abstractmethod
    def visit_number_literal(self, node: NumberLiteralIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_string_literal(self, node: StringLiteralIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_boolean_literal(self, node: BooleanLiteralIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_identifier(self, node: IdentifierIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_binary_expression(self, node: BinaryExpressionIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_unary_expression(self, node: UnaryExpressionIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_length_expression(self, node: LengthExpressionIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_substring_expression(self, node: SubstringExpressionIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_variable_declaration(self, node: VariableDeclarationIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_print_statement(self, node: PrintStatementIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_if_statement(self, node: IfStatementIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_loop_until(self, node: LoopUntilIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_while_loop(self, node: WhileLoopIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_loop_from_to(self, node: LoopFromToIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_function_declaration(self, node: FunctionDeclarationIR) -> T:
        raise NotImplementedError

    @abstractmethod
    def visit_return_statement(self, node: ReturnStatementIR) -> T:
        raise NotImplementedError


class ExpressionVisitor(IRVisitor[T]):
    """Visitor over expressions; a statement reaching it is a contract error."""

    def visit_variable_declaration(self, node: VariableDeclarationIR) -> T:
        raise UnsupportedNode("VariableDeclaration", "not an expression")

    def visit_print_statement(self, node: PrintStatementIR) -> T:
        raise UnsupportedNode("PrintStatement", "not an expression")

    def visit_if_statement(self, node: IfStatementIR) -> T:
        raise UnsupportedNode("IfStatement", "not an expression")

    def visit_loop_until(self, node: LoopUntilIR) -> T:
        raise UnsupportedNode("LoopUntil", "not an expression")

    def visit_while_loop(self, node: WhileLoopIR) -> T:
        raise UnsupportedNode("WhileLoop", "not an expression")

    def visit_loop_from_to(self, node: LoopFromToIR) -> T:
        raise UnsupportedNode("LoopFromTo", "not an expression")

    def visit_function_declaration(self, node: FunctionDeclarationIR) -> T:
        raise UnsupportedNode("FunctionDeclaration", "not an expression")

    def visit_return_statement(self, node: ReturnStatementIR) -> T:
        raise UnsupportedNode("ReturnStatement", "not an expression")


class StatementVisitor(IRVisitor[T]):
    """Visitor over statements; an expression reaching it is a contract error."""

    def visit_number_literal(self, node: NumberLiteralIR) -> T:
        raise UnsupportedNode("NumberLiteral", "not a statement")

    def visit_string_literal(self, node: StringLiteralIR) -> T:
        raise UnsupportedNode("StringLiteral", "not a statement")

    def visit_boolean_literal(self, node: BooleanLiteralIR) -> T:
        raise UnsupportedNode("BooleanLiteral", "not a statement")

    def visit_identifier(self, node: IdentifierIR) -> T:
        raise UnsupportedNode("Identifier", "not a statement")

    def visit_binary_expression(self, node: BinaryExpressionIR) -> T:
        raise UnsupportedNode("Expression", "not a statement")

    def visit_unary_expression(self, node: UnaryExpressionIR) -> T:
        raise UnsupportedNode("UnaryExpression", "not a statement")

    def visit_length_expression(self, node: LengthExpressionIR) -> T:
        raise UnsupportedNode("LengthExpression", "not a statement")

    def visit_substring_expression(self, node: SubstringExpressionIR) -> T:
        raise UnsupportedNode("SubstringExpression", "not a statement")
