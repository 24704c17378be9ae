"""CLI entry point: run `pseudotrace program.json` or `python -m pseudotrace program.json`."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .ir.loader import load_program
    from .ir.serialization import serialize_ir
    from .runtime.runtime import TraceCompiler
    from .shared.errors import PseudotraceError, PseudotraceImplementationError, format_diagnostic
    from .utils.io_utils import read_ir_document

    parser = argparse.ArgumentParser(
        prog="pseudotrace", description="Generate the action-frame trace of an IR program."
    )
    parser.add_argument("file", type=Path, help="Path to a JSON IR document")
    parser.add_argument("--max-iterations", type=int, default=None,
                        help="Per-loop iteration cap (0 disables it)")
    parser.add_argument("--dump-ir", action="store_true",
                        help="Print the loaded IR as S-expressions instead of tracing it")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = args.file.resolve()
    if not path.is_file():
        sys.stderr.write(f"pseudotrace: error: file not found: {path}\n")
        return 1

    try:
        document = read_ir_document(path)
    except (OSError, json.JSONDecodeError) as e:
        sys.stderr.write(f"pseudotrace: error: could not read IR document: {e}\n")
        return 1

    try:
        program = load_program(document)
        if args.dump_ir:
            sys.stdout.write(serialize_ir(program, include_location=True) + "\n")
            return 0
        result = TraceCompiler(max_loop_iterations=args.max_iterations).generate(program)
    except (PseudotraceError, PseudotraceImplementationError) as e:
        sys.stderr.write(format_diagnostic(e, color=None if sys.stderr.isatty() else False) + "\n")
        return 1
    except ValueError as e:
        # Bad iteration cap from --max-iterations or the environment
        sys.stderr.write(f"pseudotrace: error: {e}\n")
        return 1

    sys.stdout.write(result.to_json() + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
