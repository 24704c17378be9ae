"""
Runtime

Entry point of trace generation. A TraceCompiler holds only configuration;
every generate() call builds a fresh symbol table, emitter and executor, so
one compiler can serve concurrent callers.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Union

from ..ir.loader import load_program
from ..ir.nodes import ProgramIR
from ..utils.config import DEFAULT_JSON_INDENT, DEFAULT_MAX_LOOP_ITERATIONS, MAX_LOOP_ITERATIONS_ENV_VAR
from .environment import SymbolTable
from .executor import StatementExecutor
from .frames import ActionFrame, FrameEmitter, frames_to_dicts

logger = logging.getLogger("pseudotrace.runtime.runtime")


class TraceResult:
    """The finished trace: action frames in execution order."""

    def __init__(self, action_frames: List[ActionFrame]):
        self.action_frames = action_frames

    def __len__(self) -> int:
        return len(self.action_frames)

    def to_dict(self) -> Dict[str, Any]:
        return {"actionFrames": frames_to_dicts(self.action_frames)}

    def to_json(self, indent: Optional[int] = DEFAULT_JSON_INDENT) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def _iteration_limit_from_env() -> Optional[int]:
    raw = os.environ.get(MAX_LOOP_ITERATIONS_ENV_VAR)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            f"{MAX_LOOP_ITERATIONS_ENV_VAR} must be an integer, got {raw!r}"
        ) from None


class TraceCompiler:
    """
    Turns an IR program into an action-frame trace.

    - clock: timestamp source; defaults to the wall clock
    - max_loop_iterations: per-loop body execution cap, 0 disables it.
      The environment variable PSEUDOTRACE_MAX_LOOP_ITERATIONS takes
      precedence over the argument.
    """

    def __init__(self, clock=None, max_loop_iterations: Optional[int] = None):
        self.clock = clock
        env_limit = _iteration_limit_from_env()
        if env_limit is not None:
            self.max_loop_iterations = env_limit
        elif max_loop_iterations is not None:
            self.max_loop_iterations = max_loop_iterations
        else:
            self.max_loop_iterations = DEFAULT_MAX_LOOP_ITERATIONS
        if self.max_loop_iterations < 0:
            source = MAX_LOOP_ITERATIONS_ENV_VAR if env_limit is not None else "max_loop_iterations"
            raise ValueError(
                f"{source} must be 0 or a positive integer, got {self.max_loop_iterations}"
            )

    def generate(self, program: Union[ProgramIR, Dict[str, Any], List[Any]]) -> TraceResult:
        """
        Execute `program` (an IR document or an already loaded ProgramIR).
        Errors propagate unchanged; no partial trace is ever returned.
        """
        if not isinstance(program, ProgramIR):
            program = load_program(program)

        emitter = FrameEmitter(self.clock)
        executor = StatementExecutor(SymbolTable(), emitter, self.max_loop_iterations or None)
        logger.debug(f"Generating trace for {len(program.statements)} statements")
        executor.execute_block(program.statements)
        logger.debug(f"Trace finished with {len(emitter.frames)} top-level frames")
        return TraceResult(emitter.frames)


def generate_trace(program: Union[ProgramIR, Dict[str, Any], List[Any]], clock=None,
                   max_loop_iterations: Optional[int] = None) -> TraceResult:
    """One-shot helper around TraceCompiler.generate()."""
    return TraceCompiler(clock=clock, max_loop_iterations=max_loop_iterations).generate(program)
