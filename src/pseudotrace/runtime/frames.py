"""
Action Frames

One ActionFrame per observable step, appended in execution order. The
emitter owns the frame list and the clock; the executor only says what
happened and on which line.
"""

import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Sequence

from .values import RuntimeValue, SubstringResult, format_primitive, format_value, plain, to_frame_value


class SystemClock:
    """Wall-clock timestamps in ISO-8601 UTC with milliseconds (`...T12:00:00.000Z`)."""

    def now(self) -> str:
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return stamp.replace("+00:00", "Z")


class TickClock:
    """Counter clock for reproducible traces: 0, 1, 2, ..."""

    def __init__(self, start: int = 0):
        self._next = start

    def now(self) -> int:
        value = self._next
        self._next += 1
        return value


@dataclass
class ActionFrame:
    line: int
    operation: str
    fields: Dict[str, Any] = field(default_factory=dict)
    timestamp: Any = None
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Key order: line, operation, <fields>, timestamp, description."""
        result: Dict[str, Any] = {"line": self.line, "operation": self.operation}
        for key, value in self.fields.items():
            if key == "body":
                value = [frame.to_dict() for frame in value]
            result[key] = value
        result["timestamp"] = self.timestamp
        result["description"] = self.description
        return result


def _substring_description(name: str, value: SubstringResult) -> str:
    if value.is_empty_range:
        return (
            f"Set variable {name} to an empty substring of {value.source} "
            f"as start and end indices are identical."
        )
    return (
        f"Set variable {name} to a substring of {value.source} "
        f"from index {value.start} to {value.end}."
    )


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


class FrameEmitter:
    """
    Builds frames and appends them to the innermost open frame list.
    `collect()` opens a nested list (function bodies).
    """

    def __init__(self, clock=None):
        self.clock = clock if clock is not None else SystemClock()
        self.frames: List[ActionFrame] = []
        self._stack: List[List[ActionFrame]] = [self.frames]

    def _emit(self, line: int, operation: str, description: str, **fields: Any) -> ActionFrame:
        frame = ActionFrame(line, operation, fields, self.clock.now(), description)
        self._stack[-1].append(frame)
        return frame

    @contextmanager
    def collect(self) -> Iterator[List[ActionFrame]]:
        body: List[ActionFrame] = []
        self._stack.append(body)
        try:
            yield body
        finally:
            self._stack.pop()

    # === Data ===

    def emit_set(self, line: int, name: str, value: RuntimeValue) -> ActionFrame:
        if isinstance(value, SubstringResult):
            description = _substring_description(name, value)
        else:
            description = f"Set variable {name} to {format_value(value)}."
        return self._emit(
            line, "set", description,
            varName=name, type=value.type.value, value=to_frame_value(value),
        )

    def emit_print_variable(self, line: int, name: str, value: RuntimeValue) -> ActionFrame:
        return self._emit(
            line, "print", f"Printed {name}.",
            isLiteral=False, varName=name, literal=plain(value),
        )

    def emit_print_literal(self, line: int, literal: Any) -> ActionFrame:
        return self._emit(
            line, "print", f"Printed {format_primitive(literal)}.",
            isLiteral=True, varName=None, literal=literal,
        )

    # === Control flow ===

    def emit_if(self, line: int, condition: str, result: bool) -> ActionFrame:
        return self._emit(line, "if", f"Checked if {condition}.", condition=condition, result=result)

    def emit_endif(self, line: int) -> ActionFrame:
        return self._emit(line, "endif", "End of if statement.")

    def emit_while(self, line: int, condition: str) -> ActionFrame:
        return self._emit(line, "while", f"while loop with condition {condition}.", condition=condition)

    def emit_loop_from_to(self, line: int, condition: str) -> ActionFrame:
        return self._emit(
            line, "loop_from_to", f"loop from_to loop with condition {condition}.", condition=condition,
        )

    def emit_loop_end(self, line: int, kind: str) -> ActionFrame:
        return self._emit(line, "loop_end", f"End of {kind} loop")

    # === Functions ===

    def emit_define(self, line: int, name: str, params: Sequence[str],
                    body: List[ActionFrame]) -> ActionFrame:
        if params:
            description = f"Defined function {name} with parameters {', '.join(params)}."
        else:
            description = f"Defined function {name} with no parameters."
        return self._emit(line, "define", description, varName=name, params=list(params), body=body)

    def emit_return(self, line: int, value: Any) -> ActionFrame:
        return self._emit(line, "return", f"Returned {_compact_json(value)}.", value=value)


def frames_to_dicts(frames: Sequence[ActionFrame]) -> List[Dict[str, Any]]:
    return [frame.to_dict() for frame in frames]
