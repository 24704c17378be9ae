"""
Configuration constants to replace magic numbers throughout pseudotrace
"""

# Loop guard: body executions allowed per loop before the trace is aborted
DEFAULT_MAX_LOOP_ITERATIONS = 10_000
MAX_LOOP_ITERATIONS_ENV_VAR = "PSEUDOTRACE_MAX_LOOP_ITERATIONS"

# Loop variable used when a from/to loop does not name one
DEFAULT_LOOP_VARIABLE = "i"

# String literal constants
BOOLEAN_TRUE_LITERAL = "true"
BOOLEAN_FALSE_LITERAL = "false"

# Substring composite tag stored in variable values
SUBSTRING_OPERATION = "substring"

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# JSON output
DEFAULT_JSON_INDENT = 2
