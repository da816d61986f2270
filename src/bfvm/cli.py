from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from .engine import Engine
from .errors import ExecutionError, ParseError
from .parser import parse
from .program import TAPE_SIZE


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {text}")
    return value


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="bfvm",
        description="Run a Brainfuck program on a strict (non-wrapping) byte tape.",
    )
    parser.add_argument("file", nargs="?", help="Program file")
    parser.add_argument("-e", "--eval", dest="code", help="Program text given on the command line")
    parser.add_argument("--tape-size", type=_positive_int, default=TAPE_SIZE,
                        help=f"Number of tape cells (default {TAPE_SIZE})")
    parser.add_argument("--input", nargs="+", metavar="VALUE",
                        help="Values for ',' (0..255). Default: one value per line of stdin")
    parser.add_argument("--dump", type=int, default=0, metavar="N",
                        help="Print the first N tape cells to stderr after the run")
    parser.add_argument("--stats", action="store_true", help="Print timing and step count to stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if (args.file is None) == (args.code is None):
        parser.error("give exactly one of FILE or -e CODE")

    _configure_logging(args.verbose)

    if args.code is not None:
        code = args.code
    else:
        try:
            with open(args.file, 'r', encoding='utf-8', errors='replace') as f:
                code = f.read()
        except OSError as e:
            print(f"Couldn't read {args.file}: {e.strerror or e}", file=sys.stderr)
            return 1

    start = time.perf_counter()
    try:
        program = parse(code)
    except ParseError as e:
        print(e, file=sys.stderr)
        return 1
    parse_ms = (time.perf_counter() - start) * 1000

    stdout = getattr(sys.stdout, 'buffer', sys.stdout)
    engine = Engine(
        program,
        tape_size=args.tape_size,
        input_source=args.input if args.input is not None else sys.stdin,
        output=stdout,
    )

    status = 0
    start = time.perf_counter()
    try:
        state = engine.run()
    except ExecutionError as e:
        state = e.state
        print(f"\n{e}", file=sys.stderr)
        status = 2
    finally:
        stdout.flush()
    exec_ms = (time.perf_counter() - start) * 1000

    if args.stats:
        print(f"Parsing took {parse_ms:.2f} ms ({len(program)} instructions)", file=sys.stderr)
        print(f"Execution took {exec_ms:.2f} ms ({state.steps} steps, {state.status.value})", file=sys.stderr)
    if args.dump > 0:
        print(state.dump(0, args.dump), file=sys.stderr)
    return status


if __name__ == "__main__":
    raise SystemExit(main())
