"""
Runtime Values

A variable holds either a PrimitiveValue or a SubstringResult. The
substring composite remembers how its text was produced so a later read can
describe chained operations; everything that needs plain text goes through
`plain()`.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from typing_extensions import TypeAlias

from ..shared.numbers import format_number, is_number
from ..shared.types import ValueType
from ..utils.config import BOOLEAN_FALSE_LITERAL, BOOLEAN_TRUE_LITERAL, SUBSTRING_OPERATION

Primitive: TypeAlias = Union[int, float, str, bool]


@dataclass(frozen=True)
class PrimitiveValue:
    type: ValueType
    value: Primitive


@dataclass(frozen=True)
class SubstringResult:
    """Text sliced out of variable `source`; always typed as a string."""
    source: str
    start: int
    end: int
    result: str

    @property
    def type(self) -> ValueType:
        return ValueType.STRING

    @property
    def is_empty_range(self) -> bool:
        return self.start == self.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "operation": SUBSTRING_OPERATION,
            "source": self.source,
            "start": self.start,
            "end": self.end,
            "result": self.result,
        }


RuntimeValue: TypeAlias = Union[PrimitiveValue, SubstringResult]


def type_of(value: Primitive) -> ValueType:
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if is_number(value):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.STRING
    raise TypeError(f"Not a runtime primitive: {value!r}")


def primitive(value: Primitive) -> PrimitiveValue:
    return PrimitiveValue(type_of(value), value)


def plain(value: RuntimeValue) -> Primitive:
    """The primitive a value reads as inside expressions."""
    if isinstance(value, SubstringResult):
        return value.result
    return value.value


def to_frame_value(value: RuntimeValue) -> Any:
    """JSON-ready form stored in `set` frames."""
    if isinstance(value, SubstringResult):
        return value.to_dict()
    return value.value


def format_primitive(value: Any) -> str:
    """Display text of a primitive in descriptions (`true`, `10`, `2.5`, `abc`)."""
    if isinstance(value, bool):
        return BOOLEAN_TRUE_LITERAL if value else BOOLEAN_FALSE_LITERAL
    if is_number(value):
        return format_number(value)
    return str(value)


def format_value(value: RuntimeValue) -> str:
    return format_primitive(plain(value))
