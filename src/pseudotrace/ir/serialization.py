"""
IR Serialization to S-Expressions
====================================

Converts IR to a readable S-expression form for debugging (`--dump-ir`) and
for tests that compare loader output structurally.

Uses structured sexpr (nested lists + sexpdata.Symbol),
then pretty-prints for readable output.
"""

from typing import Any, List

import sexpdata

from .nodes import IRNode, ProgramIR, StatementIR

# Keywords/symbols (from _sym) - unquoted. Names (node.name, etc.) use "".
_KNOWN_SYMBOLS = frozenset({
    "nil", "program", "set", "print", "if", "else", "loop-until", "while", "loop-from-to",
    "function", "return", "params", "body", "identifier", "number", "string", "bool",
    "binary-op", "unary-op", "length", "substring", "true", "false", "...",
    "+", "-", "*", "/", "%", "==", "!=", "<", "<=", ">", ">=", "and", "or", "not",
})


def _is_symbol(s: str) -> bool:
    """True if s is a keyword/symbol (unquoted), not a name."""
    return s.startswith(":") or s in _KNOWN_SYMBOLS


def _pretty_dumps(sexpr: Any, indent: int = 0, indent_str: str = "  ", max_line: int = 100) -> str:
    """
    Pretty-print structured sexpr. Keeps short forms on one line; breaks only when needed.
    """
    if sexpr is None:
        return "()"
    if isinstance(sexpr, bool):
        return "true" if sexpr else "false"
    if isinstance(sexpr, (int, float)):
        return str(sexpr)
    # Check Symbol before str
    if isinstance(sexpr, sexpdata.Symbol):
        return sexpdata.dumps(sexpr)
    if isinstance(sexpr, str):
        if _is_symbol(sexpr):
            return sexpr
        escaped = sexpr.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(sexpr, list):
        if not sexpr:
            return "()"
        parts = [_pretty_dumps(e, indent + 1, indent_str, max_line) for e in sexpr]
        one_line = "(" + " ".join(parts) + ")"
        if len(one_line) <= max_line and "\n" not in one_line:
            return one_line
        prefix = indent_str * indent
        next_prefix = indent_str * (indent + 1)
        # First element on same line as ( to avoid orphan (; no space after (
        rest = "\n".join(next_prefix + p for p in parts[1:])
        inner = parts[0] + ("\n" + rest if rest else "")
        return f"({inner}\n{prefix})"
    return str(sexpr)


def serialize_ir(node: Any, include_location: bool = False, pretty: bool = True) -> str:
    """
    Serialize an IR node (or a whole ProgramIR) to an S-expression string.

    Args:
        node: IR node or program to serialize
        include_location: Append `:line N` to nodes that carry a line
        pretty: Use pretty-printed format (default True). Set False for compact single-line.
    """
    serializer = IRSerializer(include_location=include_location)
    sexpr = serializer.serialize_to_sexpr(node)
    if pretty:
        return _pretty_dumps(sexpr)
    return sexpdata.dumps(sexpr)


class IRSerializer:
    """
    IR to structured S-expression serializer.

    Dispatches on the node's class name (`_serialize_<ClassName>`); a class
    without a method falls back to `(<ClassName> ...)`.
    """

    def __init__(self, include_location: bool = False):
        self.include_location = include_location

    def _sym(self, s: str) -> Any:
        return sexpdata.Symbol(s)

    def serialize_to_sexpr(self, node: Any) -> Any:
        """Serialize any IR node to structured sexpr (list/Symbol/str)."""
        if node is None:
            return [self._sym("nil")]

        method = getattr(self, f"_serialize_{type(node).__name__}", None)
        if method is not None:
            return method(node)
        return self._serialize_generic(node)

    def _serialize_generic(self, node: Any) -> list:
        return [self._sym(type(node).__name__), self._sym("...")]

    def _with_line(self, node: IRNode, core: list) -> list:
        if self.include_location and node.line is not None:
            core.extend([self._sym(":line"), node.line])
        return core

    def _block(self, statements: List[StatementIR]) -> list:
        return [self._sym("body")] + [self.serialize_to_sexpr(s) for s in statements]

    def _serialize_ProgramIR(self, node: ProgramIR) -> list:
        return [self._sym("program")] + [self.serialize_to_sexpr(s) for s in node.statements]

    # === Literals ===

    def _serialize_NumberLiteralIR(self, node) -> list:
        return self._with_line(node, [self._sym("number"), node.value])

    def _serialize_StringLiteralIR(self, node) -> list:
        return self._with_line(node, [self._sym("string"), node.value])

    def _serialize_BooleanLiteralIR(self, node) -> list:
        # Bool as symbol to avoid sexpdata's True->() conversion
        value = self._sym("true" if node.value else "false")
        return self._with_line(node, [self._sym("bool"), value])

    def _serialize_IdentifierIR(self, node) -> list:
        return self._with_line(node, [self._sym("identifier"), node.name])

    # === Operators ===

    def _serialize_BinaryExpressionIR(self, node) -> list:
        """(binary-op OP left right)"""
        core = [
            self._sym("binary-op"),
            self._sym(node.operator.value),
            self.serialize_to_sexpr(node.left),
            self.serialize_to_sexpr(node.right),
        ]
        return self._with_line(node, core)

    def _serialize_UnaryExpressionIR(self, node) -> list:
        core = [self._sym("unary-op"), self._sym(node.operator.value), self.serialize_to_sexpr(node.operand)]
        return self._with_line(node, core)

    def _serialize_LengthExpressionIR(self, node) -> list:
        return self._with_line(node, [self._sym("length"), node.source])

    def _serialize_SubstringExpressionIR(self, node) -> list:
        core = [
            self._sym("substring"),
            node.string,
            self.serialize_to_sexpr(node.start),
            self.serialize_to_sexpr(node.end),
        ]
        return self._with_line(node, core)

    # === Statements ===

    def _serialize_VariableDeclarationIR(self, node) -> list:
        core = [self._sym("set"), node.name, self.serialize_to_sexpr(node.value)]
        return self._with_line(node, core)

    def _serialize_PrintStatementIR(self, node) -> list:
        value = node.value
        if isinstance(value, bool):
            value = self._sym("true" if value else "false")
        return self._with_line(node, [self._sym("print"), value])

    def _serialize_IfStatementIR(self, node) -> list:
        """(if condition (body ...) (else ...))"""
        core = [self._sym("if"), self.serialize_to_sexpr(node.condition), self._block(node.consequent)]
        if node.alternate:
            core.append([self._sym("else")] + [self.serialize_to_sexpr(s) for s in node.alternate])
        return self._with_line(node, core)

    def _serialize_LoopUntilIR(self, node) -> list:
        core = [self._sym("loop-until"), self.serialize_to_sexpr(node.condition), self._block(node.body)]
        return self._with_line(node, core)

    def _serialize_WhileLoopIR(self, node) -> list:
        core = [self._sym("while"), self.serialize_to_sexpr(node.condition), self._block(node.body)]
        return self._with_line(node, core)

    def _serialize_LoopFromToIR(self, node) -> list:
        variable = node.loop_variable if node.loop_variable is not None else [self._sym("nil")]
        core = [
            self._sym("loop-from-to"),
            variable,
            self.serialize_to_sexpr(node.start),
            self.serialize_to_sexpr(node.end),
            self._block(node.body),
        ]
        return self._with_line(node, core)

    def _serialize_FunctionDeclarationIR(self, node) -> list:
        core = [
            self._sym("function"),
            node.name,
            [self._sym("params")] + list(node.params),
            self._block(node.body),
        ]
        return self._with_line(node, core)

    def _serialize_ReturnStatementIR(self, node) -> list:
        return self._with_line(node, [self._sym("return"), self.serialize_to_sexpr(node.value)])
