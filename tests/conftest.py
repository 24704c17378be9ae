"""
Pytest configuration and shared fixtures for all pseudotrace tests.

Compilers are cheap and hold no per-trace state, so most fixtures are
function-scoped; the tick clock makes every timestamp predictable.
"""

import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from pseudotrace.runtime.frames import TickClock
from pseudotrace.runtime.runtime import TraceCompiler
from pseudotrace.utils.config import MAX_LOOP_ITERATIONS_ENV_VAR


# =============================================================================
# Environment isolation
# =============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a developer's shell settings out of the tests."""
    monkeypatch.delenv(MAX_LOOP_ITERATIONS_ENV_VAR, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("PSEUDOTRACE_COLOR", raising=False)


# =============================================================================
# Compiler fixtures
# =============================================================================

@pytest.fixture
def tick_clock():
    """Timestamps 0, 1, 2, ... in emission order."""
    return TickClock()


@pytest.fixture
def compiler(tick_clock):
    """Trace compiler with a deterministic clock."""
    return TraceCompiler(clock=tick_clock)


@pytest.fixture
def trace(compiler):
    """
    Convenience fixture: trace(program) -> list of frame dicts.
    Accepts a statement list or a full `{"program": [...]}` document.
    """
    def _trace(program):
        document = program if isinstance(program, dict) else {"program": program}
        return compiler.generate(document).to_dict()["actionFrames"]

    return _trace


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
