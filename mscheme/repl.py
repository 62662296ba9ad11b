"""
Line-based REPL for mscheme.

Protocol: one expression per input line, one output line per expression.
- Success: the printed form of the value, e.g. `6` or `(1 2 . 3)`
- Failure: `Syntax error: ...`, `Name error: ...` or `Runtime error: ...`

Definitions persist across lines; blank lines are skipped.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, TextIO

from mscheme.config import get_log_level
from mscheme.interpreter import Interpreter


def serve(lines: Iterable[str], out: TextIO, interp: Interpreter) -> None:
    for line in lines:
        line = line.rstrip("\n")
        if not line.strip():
            continue
        print(interp.execute(line), file=out, flush=True)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mscheme", description="Run the mscheme REPL.")
    parser.add_argument("source", nargs="?", help="file to read instead of standard input")
    args = parser.parse_args(argv)

    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")

    with Interpreter() as interp:
        if args.source is None:
            serve(sys.stdin, sys.stdout, interp)
        else:
            with open(args.source, encoding="utf-8") as f:
                serve(f, sys.stdout, interp)
    return 0
