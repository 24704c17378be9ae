"""
Error Reporting

Exception taxonomy for trace generation plus a small diagnostic renderer
used by the command line. Errors are raised at the point of detection and
propagate unchanged to whoever called the trace compiler.
"""

import os
from dataclasses import dataclass
from typing import Any, List, Optional


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("PSEUDOTRACE_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Diagnostic dataclass
# ---------------------------------------------------------------------------

@dataclass
class Diagnostic:
    """Renderable view of a trace error."""
    message: str
    line: Optional[int] = None
    code: Optional[str] = None
    help: Optional[str] = None


def _format_diagnostic(diagnostic: Diagnostic, color: bool = False) -> str:
    """
    Render a diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0425]: Variable 'y' is not declared.
         --> line 3
          = help: declare 'y' before it is used
    """
    out: List[str] = []
    code_str = f"[{diagnostic.code}]" if diagnostic.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {diagnostic.message}", _BOLD, color=color)
    )
    where = f"line {diagnostic.line}" if diagnostic.line is not None else "<unknown line>"
    out.append(_style(" --> ", _BOLD, _BLUE, color=color) + where)
    if diagnostic.help:
        out.append(
            _style("  = ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + diagnostic.help
        )
    return "\n".join(out)


def format_diagnostic(error: Exception, color: Optional[bool] = None) -> str:
    """Render any exception raised by trace generation for a terminal."""
    use_color = color if color is not None else _use_color()
    if isinstance(error, PseudotraceError):
        diagnostic = Diagnostic(
            message=error.message,
            line=error.line,
            code=error.error_code,
            help=error.help_text,
        )
    elif isinstance(error, PseudotraceImplementationError):
        diagnostic = Diagnostic(message=error.message, code=error.error_code)
    else:
        diagnostic = Diagnostic(message=str(error))
    return _format_diagnostic(diagnostic, color=use_color)


# ============================================================================
# Exception Classes
# ============================================================================

class PseudotraceError(Exception):
    """Base exception for errors in the user's program"""
    error_code = "E0001"

    def __init__(self, message: str, line: Optional[int] = None, help: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.help_text = help

    def __str__(self):
        return self.message


class UndeclaredVariable(PseudotraceError):
    """An identifier, length source or substring source was read before declaration."""
    error_code = "E0425"

    def __init__(self, name: str, line: Optional[int] = None):
        super().__init__(
            f"Variable '{name}' is not declared.",
            line=line,
            help=f"declare '{name}' before it is used",
        )
        self.name = name


class InvalidSubstringRange(PseudotraceError):
    error_code = "E0600"

    def __init__(self, start: int, end: int, line: Optional[int] = None):
        super().__init__(
            f"Invalid substring operation: 'start' index ({start}) cannot be greater "
            f"than 'end' index ({end}).",
            line=line,
        )
        self.start = start
        self.end = end


class InvalidOperation(PseudotraceError):
    """Operands of the wrong kind for an operator (runtime type error)."""
    error_code = "E0308"


class LoopIterationLimitExceeded(PseudotraceError):
    error_code = "E0700"

    def __init__(self, line: Optional[int], limit: int):
        super().__init__(
            f"Loop on line {line} exceeded the maximum of {limit} iterations.",
            line=line,
            help="check that the loop condition eventually changes",
        )
        self.limit = limit


class PseudotraceImplementationError(Exception):
    """
    Error in the trace compiler or its contract with the parser, not in the
    user's program.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class UnsupportedNode(PseudotraceImplementationError):
    """The IR contains a node shape the executor does not recognize."""

    def __init__(self, kind: Any, detail: Optional[str] = None):
        message = f"Unsupported IR node: {kind}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.kind = kind
