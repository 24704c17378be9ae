"""
pseudotrace: executes a pseudocode program's IR and records every
observable step as an action frame for step-by-step playback.
"""

from .ir.loader import load_program
from .ir.nodes import ProgramIR
from .runtime.frames import ActionFrame, SystemClock, TickClock
from .runtime.runtime import TraceCompiler, TraceResult, generate_trace
from .shared.errors import (
    PseudotraceError, UndeclaredVariable, InvalidSubstringRange, InvalidOperation,
    LoopIterationLimitExceeded, PseudotraceImplementationError, UnsupportedNode,
    format_diagnostic,
)

__version__ = "0.1.0"

__all__ = [
    "load_program", "ProgramIR",
    "ActionFrame", "SystemClock", "TickClock",
    "TraceCompiler", "TraceResult", "generate_trace",
    "PseudotraceError", "UndeclaredVariable", "InvalidSubstringRange", "InvalidOperation",
    "LoopIterationLimitExceeded", "PseudotraceImplementationError", "UnsupportedNode",
    "format_diagnostic",
]
