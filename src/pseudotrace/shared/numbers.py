"""
Number parsing and display shared by the IR loader and the runtime.

The pseudocode language has a single number type; integral values are kept
as `int` so they display and serialize as `10`, not `10.0`.
"""

import re
from typing import Optional, Union

Number = Union[int, float]

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_number(value) -> bool:
    """True for int/float values (bool excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to int (6 / 2 is 3, not 3.0)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def parse_number(text: str) -> Optional[Number]:
    """Parse a numeric string, or return None if it is not one."""
    stripped = text.strip()
    if not _NUMBER_RE.match(stripped):
        return None
    if re.match(r"^[+-]?\d+$", stripped):
        return int(stripped)
    return normalize_number(float(stripped))


def format_number(value: Number) -> str:
    value = normalize_number(value)
    if isinstance(value, float):
        return repr(value)
    return str(value)
