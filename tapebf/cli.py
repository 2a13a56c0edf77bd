from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from .config import EofPolicy, InterpreterConfig
from .engine import ExecutionEngine
from .listing import format_program, format_state
from .tape import DEFAULT_SEGMENT_SIZE
from .translator import TranslationError, Translator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tapebf",
        description="Run a Brainfuck program",
    )
    parser.add_argument("source", help="Path to the Brainfuck source file")
    parser.add_argument(
        "--eof",
        choices=[policy.value for policy in EofPolicy],
        default=EofPolicy.MAX.value,
        help="Value stored by ',' at end of input (default: max, i.e. 255)",
    )
    parser.add_argument(
        "--segment-size",
        type=int,
        default=DEFAULT_SEGMENT_SIZE,
        help=f"Cells per tape segment (default: {DEFAULT_SEGMENT_SIZE})",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the translated instruction listing instead of running",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Write the interpreter state after every instruction to stderr",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    # Replaces handlers installed by earlier calls.
    package_logger = logging.getLogger("tapebf")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(name)s %(levelname)s %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _run(args: argparse.Namespace, config: InterpreterConfig) -> int:
    try:
        program = Translator().translate_file(args.source)
    except OSError as exc:
        print(f"Cannot open source file: {exc}", file=sys.stderr)
        return 1
    except TranslationError as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        return 1

    if args.dump:
        sys.stdout.write(format_program(program) + "\n")
        return 0

    engine = ExecutionEngine(config=config)
    if args.trace:
        for state in engine.step(program):
            print(format_state(state), file=sys.stderr)
    else:
        engine.run(program)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = InterpreterConfig(segment_size=args.segment_size, eof=args.eof)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        return _run(args, config)
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
