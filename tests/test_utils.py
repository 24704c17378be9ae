"""
Test utilities for the pseudotrace test suite.

IR builders return the JSON shapes the parser produces, so tests exercise
the loader and the executor together.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# =============================================================================
# IR builders
# =============================================================================

def num(value) -> Dict[str, Any]:
    return {"type": "NumberLiteral", "value": value}


def text(value: str) -> Dict[str, Any]:
    return {"type": "StringLiteral", "value": value}


def boolean(value: bool) -> Dict[str, Any]:
    return {"type": "BooleanLiteral", "value": value}


def ident(name: str) -> Dict[str, Any]:
    return {"type": "Identifier", "value": name}


def expr(left: Any, operator: str, right: Any) -> Dict[str, Any]:
    return {"type": "Expression", "left": left, "operator": operator, "right": right}


def not_(argument: Any) -> Dict[str, Any]:
    return {"type": "UnaryExpression", "operator": "not", "argument": argument}


def length(source: str) -> Dict[str, Any]:
    return {"type": "LengthExpression", "source": source}


def substring(string: str, start: Any, end: Any) -> Dict[str, Any]:
    return {"type": "SubstringExpression", "string": string, "start": start, "end": end}


def set_(name: str, value: Any, line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "VariableDeclaration", "name": name, "value": value}, line)


def print_(value: Any, line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "PrintStatement", "value": value}, line)


def if_(condition: Any, consequent: List[Any], alternate: Optional[List[Any]] = None,
        line: Optional[int] = None) -> Dict[str, Any]:
    node = {"type": "IfStatement", "condition": condition, "consequent": consequent}
    if alternate is not None:
        node["alternate"] = alternate
    return _with_line(node, line)


def loop_until(condition: Any, body: List[Any], line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "LoopUntil", "condition": condition, "body": body}, line)


def while_(condition: Any, body: List[Any], line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "WhileLoop", "condition": condition, "body": body}, line)


def else_if(condition: Any, consequent: List[Any], alternate: Optional[List[Any]] = None,
            line: Optional[int] = None) -> Dict[str, Any]:
    node = if_(condition, consequent, alternate, line)
    node["type"] = "OtherwiseIfStatement"
    return node


def loop_from_to(start: Any, end: Any, body: List[Any], variable: Optional[str] = None,
                 line: Optional[int] = None) -> Dict[str, Any]:
    node = {"type": "LoopFromTo", "range": {"start": start, "end": end}, "body": body}
    if variable is not None:
        node["loopVariable"] = variable
    return _with_line(node, line)


def function(name: str, params: List[str], body: List[Any], line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "FunctionDeclaration", "name": name, "params": params, "body": body}, line)


def return_(value: Any, line: Optional[int] = None) -> Dict[str, Any]:
    return _with_line({"type": "ReturnStatement", "value": value}, line)


def program(*statements: Any) -> Dict[str, Any]:
    return {"program": list(statements)}


def _with_line(node: Dict[str, Any], line: Optional[int]) -> Dict[str, Any]:
    if line is not None:
        node["line"] = line
    return node


# =============================================================================
# Frame helpers
# =============================================================================

def operations(frames: Iterable[Dict[str, Any]]) -> List[str]:
    return [frame["operation"] for frame in frames]


def without_timestamps(frames: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Frames with `timestamp` removed at every nesting level."""
    stripped = []
    for frame in frames:
        copy = {k: v for k, v in frame.items() if k != "timestamp"}
        if "body" in copy:
            copy["body"] = without_timestamps(copy["body"])
        stripped.append(copy)
    return stripped


def frames_of(frames: Iterable[Dict[str, Any]], operation: str) -> List[Dict[str, Any]]:
    return [frame for frame in frames if frame["operation"] == operation]
