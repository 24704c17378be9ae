"""
Statement Executor

Walks the statement list depth-first, updating the symbol table through the
expression evaluator and reporting every observable step to the frame
emitter. Loops are unrolled here: each check of a loop condition becomes its
own `if` frame.
"""

import logging
from typing import Any, Dict, List, Optional

from ..ir.nodes import (
    BinaryExpressionIR, BooleanLiteralIR, ExpressionIR, ExpressionVisitor, FunctionDeclarationIR,
    IdentifierIR, IfStatementIR, LengthExpressionIR, LoopFromToIR, LoopUntilIR, NumberLiteralIR,
    PrintStatementIR, ReturnStatementIR, StatementIR, StatementVisitor, StringLiteralIR,
    SubstringExpressionIR, UnaryExpressionIR, VariableDeclarationIR, WhileLoopIR,
)
from ..shared.errors import InvalidOperation, LoopIterationLimitExceeded
from ..shared.numbers import is_number, normalize_number
from ..shared.types import BinaryOp, ValueType
from ..utils.config import DEFAULT_LOOP_VARIABLE
from .conditions import flip_condition, render_condition
from .environment import SymbolTable
from .evaluator import ExpressionEvaluator
from .frames import FrameEmitter
from .values import PrimitiveValue, plain

logger = logging.getLogger("pseudotrace.runtime.executor")


def statement_span(node: StatementIR) -> int:
    """
    Source lines a statement occupies when the parser gives no line numbers:
    one per statement, plus a closing line for blocks and an `else` line.
    """
    if isinstance(node, IfStatementIR):
        span = 2 + block_span(node.consequent)
        if node.alternate:
            span += 1 + block_span(node.alternate)
        return span
    if isinstance(node, (LoopUntilIR, WhileLoopIR, LoopFromToIR, FunctionDeclarationIR)):
        return 2 + block_span(node.body)
    return 1


def block_span(statements: List[StatementIR]) -> int:
    return sum(statement_span(s) for s in statements)


class ReturnValueRenderer(ExpressionVisitor[Any]):
    """
    Symbolic form of a returned expression: binary expressions stay as
    `{left, operator, right}` trees, declared identifiers read as their
    current value and undeclared ones as their name.
    """

    def __init__(self, evaluator: ExpressionEvaluator):
        self.evaluator = evaluator

    def render(self, expr: ExpressionIR) -> Dict[str, Any]:
        if isinstance(expr, BinaryExpressionIR):
            return expr.accept(self)
        return {"value": expr.accept(self)}

    def visit_number_literal(self, node: NumberLiteralIR) -> Any:
        return normalize_number(node.value)

    def visit_string_literal(self, node: StringLiteralIR) -> Any:
        return node.value

    def visit_boolean_literal(self, node: BooleanLiteralIR) -> Any:
        return node.value

    def visit_identifier(self, node: IdentifierIR) -> Any:
        if self.evaluator.symbols.has(node.name):
            return plain(self.evaluator.symbols.get(node.name).value)
        return node.name

    def visit_binary_expression(self, node: BinaryExpressionIR) -> Any:
        return {
            "left": node.left.accept(self),
            "operator": node.operator.value,
            "right": node.right.accept(self),
        }

    def visit_unary_expression(self, node: UnaryExpressionIR) -> Any:
        return plain(self.evaluator.evaluate(node))

    def visit_length_expression(self, node: LengthExpressionIR) -> Any:
        return plain(self.evaluator.evaluate(node))

    def visit_substring_expression(self, node: SubstringExpressionIR) -> Any:
        return plain(self.evaluator.evaluate(node))


class StatementExecutor(StatementVisitor[None]):
    """
    Executes one program against one symbol table and one emitter.

    Line bookkeeping: `cursor` is the line of the statement last started and
    `high_water` the highest line executed so far. Closing frames (`endif`,
    `loop_end`) land one past the highest line their body reached.
    """

    def __init__(self, symbols: SymbolTable, emitter: FrameEmitter,
                 max_loop_iterations: Optional[int] = None):
        self.symbols = symbols
        self.emitter = emitter
        self.evaluator = ExpressionEvaluator(symbols)
        self.max_loop_iterations = max_loop_iterations
        self.cursor = 0
        self.high_water = 0
        self.returning = False

    # === Traversal ===

    def execute_block(self, statements: List[StatementIR]) -> None:
        for statement in statements:
            if self.returning:
                break
            statement.accept(self)

    def _enter(self, node: StatementIR) -> int:
        line = node.line if node.line is not None else self.cursor + 1
        self.cursor = line
        self.high_water = max(self.high_water, line)
        self.evaluator.line = line
        return line

    def _close(self, node: StatementIR, opened_at: int, previous_high: int) -> int:
        """
        Line for a closing frame. The cursor moves past the whole construct
        so statements after it keep the same implicit lines whichever
        branch ran.
        """
        line = self.high_water + 1
        self.cursor = max(line, opened_at + statement_span(node) - 1)
        self.high_water = max(previous_high, self.cursor)
        return line

    def _rewind(self, line: int) -> None:
        # Every iteration of a loop body reports the same lines
        self.cursor = line
        self.evaluator.line = line

    def _check_iterations(self, line: int, iterations: int) -> None:
        limit = self.max_loop_iterations
        if limit and iterations > limit:
            logger.debug(f"Loop on line {line} hit the iteration cap ({limit})")
            raise LoopIterationLimitExceeded(line, limit)

    # === Data ===

    def visit_variable_declaration(self, node: VariableDeclarationIR) -> None:
        line = self._enter(node)
        value = self.evaluator.evaluate(node.value)
        self.symbols.declare(node.name, value.type, value)
        self.emitter.emit_set(line, node.name, value)

    def visit_print_statement(self, node: PrintStatementIR) -> None:
        line = self._enter(node)
        raw = node.value
        if isinstance(raw, str) and self.symbols.has(raw):
            self.emitter.emit_print_variable(line, raw, self.symbols.get(raw).value)
        else:
            self.emitter.emit_print_literal(line, raw)

    # === Control flow ===

    def visit_if_statement(self, node: IfStatementIR) -> None:
        line = self._enter(node)
        previous_high = self.high_water
        self.high_water = line
        evaluated = self.evaluator.evaluate_condition(node.condition)
        self.emitter.emit_if(line, evaluated.condition, evaluated.result)
        if evaluated.result:
            self.execute_block(node.consequent)
        elif node.alternate:
            # The alternate starts below the consequent and its `else` line
            self.cursor = line + block_span(node.consequent) + 1
            self.execute_block(node.alternate)
        self.emitter.emit_endif(self._close(node, line, previous_high))

    def visit_loop_until(self, node: LoopUntilIR) -> None:
        self._condition_loop(node, flip_condition(node.condition))

    def visit_while_loop(self, node: WhileLoopIR) -> None:
        self._condition_loop(node, node.condition)

    def _condition_loop(self, node, condition: ExpressionIR) -> None:
        """Body repeats while `condition` holds; one `if` frame per check."""
        line = self._enter(node)
        previous_high = self.high_water
        self.high_water = line
        self.emitter.emit_while(line, render_condition(condition))
        logger.debug(f"Entering while loop on line {line}")

        iterations = 0
        while not self.returning:
            self._rewind(line)
            evaluated = self.evaluator.evaluate_condition(condition)
            self.emitter.emit_if(line, evaluated.condition, evaluated.result)
            if not evaluated.result:
                break
            iterations += 1
            self._check_iterations(line, iterations)
            self.execute_block(node.body)

        logger.debug(f"Leaving while loop on line {line} after {iterations} iterations")
        self.emitter.emit_loop_end(self._close(node, line, previous_high), "while")

    def visit_loop_from_to(self, node: LoopFromToIR) -> None:
        line = self._enter(node)
        previous_high = self.high_water
        self.high_water = line
        name = node.loop_variable or self._fresh_loop_variable()

        start = self.evaluator.evaluate(node.start)
        if not is_number(plain(start)):
            raise InvalidOperation(
                f"Loop bound '{render_condition(node.start)}' is not a number.", line=line
            )
        start = PrimitiveValue(ValueType.NUMBER, plain(start))
        self.symbols.declare(name, start.type, start)
        self.emitter.emit_set(line, name, start)

        condition = BinaryExpressionIR(BinaryOp.LE, IdentifierIR(name), node.end, line=line)
        self.emitter.emit_loop_from_to(line, render_condition(condition))
        logger.debug(f"Entering from/to loop over '{name}' on line {line}")

        iterations = 0
        while not self.returning:
            self._rewind(line)
            evaluated = self.evaluator.evaluate_condition(condition)
            self.emitter.emit_if(line, evaluated.condition, evaluated.result)
            if not evaluated.result:
                break
            iterations += 1
            self._check_iterations(line, iterations)
            self.execute_block(node.body)
            if self.returning:
                break
            self._rewind(line)
            self._increment(line, name)

        logger.debug(f"Leaving from/to loop on line {line} after {iterations} iterations")
        self.emitter.emit_loop_end(self._close(node, line, previous_high), "loop from_to")

    def _fresh_loop_variable(self) -> str:
        name = DEFAULT_LOOP_VARIABLE
        counter = 0
        while self.symbols.has(name):
            counter += 1
            name = f"{DEFAULT_LOOP_VARIABLE}{counter}"
        return name

    def _increment(self, line: int, name: str) -> None:
        current = plain(self.evaluator.lookup(name).value)
        if not is_number(current):
            raise InvalidOperation(
                f"Loop variable '{name}' no longer holds a number.", line=line
            )
        value = PrimitiveValue(ValueType.NUMBER, normalize_number(current + 1))
        self.symbols.declare(name, value.type, value)
        self.emitter.emit_set(line, name, value)

    # === Functions ===

    def visit_function_declaration(self, node: FunctionDeclarationIR) -> None:
        line = self._enter(node)
        with self.emitter.collect() as body:
            self.execute_block(node.body)
        # A return ends the function body, not the program
        self.returning = False
        self.emitter.emit_define(line, node.name, node.params, body)
        self.cursor = max(self.high_water + 1, line + statement_span(node) - 1)
        self.high_water = self.cursor

    def visit_return_statement(self, node: ReturnStatementIR) -> None:
        line = self._enter(node)
        value = ReturnValueRenderer(self.evaluator).render(node.value)
        self.emitter.emit_return(line, value)
        self.returning = True
