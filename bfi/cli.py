"""Command-line interface for the interpreter.

WHY: The everyday way to use the interpreter is ``bfi program.b``. The
CLI is the thin glue around the core: load the file, pick options from
flags and the environment, run, and report the result.

HOW: argparse builds the options (defaults come from load_settings()). The
source is loaded with load_source, compiled and run in a fresh Engine
that reads program input from stdin (or --input) and writes program
output to stdout as raw bytes. Status lines and the result message go
to stderr. With --emit, the compiled program is printed in the chosen
format instead of being run.

RULES:
- No file argument → print usage and exit 0
- Exit code is the ResultCode value (0 on success)
- Unreadable source → "[ERROR]   Source unavailable", exit 4
- Program output goes to stdout, everything else to stderr
- Configuration errors print "Error: ..." and exit 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, List, Optional

from bfi.config import Settings, load_settings
from bfi.core.compiler import CompileError, compile_source
from bfi.core.engine import Engine
from bfi.core.ir import CommandSequence, ResultCode
from bfi.core.source import SourceUnavailableError, load_source
from bfi.formatters import FORMATTERS
from bfi.report import describe_result


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected an integer, got {!r}".format(value))
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1, got {}".format(number))
    return number


def _configure_logging(verbose: bool, log_level: str) -> None:
    level = logging.DEBUG if verbose else getattr(logging, log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _emit(commands: CommandSequence, key: str) -> None:
    output = FORMATTERS[key]().format(commands)
    sys.stdout.write(output.content)
    if not output.content.endswith("\n"):
        sys.stdout.write("\n")
    sys.stdout.flush()


def run_file(
    path: str,
    args: argparse.Namespace,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> ResultCode:
    """Load, compile and run one program file.

    Returns the ResultCode; all failures are reported through it.
    """
    try:
        source = load_source(path)
    except SourceUnavailableError as exc:
        _status("  {}".format(exc))
        return exc.code

    try:
        commands = compile_source(
            source,
            optimize=args.optimize,
            cell_wraparound=not args.error_on_cell_boundary,
        )
    except CompileError as exc:
        _status("  {}".format(exc))
        return exc.code

    if args.emit:
        _emit(commands, args.emit)
        return ResultCode.SUCCESS

    _status("Executing...")
    engine = Engine(
        commands,
        error_on_cell_boundary=args.error_on_cell_boundary,
        tape_size=args.tape_size,
        stdin=stdin,
        stdout=stdout,
        max_steps=args.max_steps,
    )
    return engine.run()


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: file (optional; usage is printed when missing)
    - Defaults for every option come from settings (load_settings() when omitted)
    """
    if settings is None:
        settings = load_settings()

    parser = argparse.ArgumentParser(
        prog="bfi",
        description="Compile and run programs for the eight-command tape language.",
    )

    parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Path to the program source file.",
    )

    parser.add_argument(
        "--error-on-cell-boundary",
        action=argparse.BooleanOptionalAction,
        default=settings.error_on_cell_boundary,
        help="Fail with a buffer underflow when a cell would leave 0..255 "
             "instead of wrapping (default: %(default)s).",
    )

    parser.add_argument(
        "--optimize",
        action=argparse.BooleanOptionalAction,
        default=settings.optimize,
        help="Compile clear loops ('[-]') into a single set-to-zero command "
             "(default: %(default)s).",
    )

    parser.add_argument(
        "--tape-size",
        type=_positive_int,
        default=settings.tape_size,
        help="Number of tape cells (default: %(default)s).",
    )

    parser.add_argument(
        "--max-steps",
        type=_positive_int,
        default=settings.max_steps,
        help="Stop after this many executed commands (default: unlimited).",
    )

    parser.add_argument(
        "--emit",
        choices=sorted(FORMATTERS.keys()),
        default=None,
        help="Print the compiled program in this format instead of running it.",
    )

    parser.add_argument(
        "--input",
        default=None,
        help="Read program input from this file instead of stdin.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging on stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Always exits via sys.exit with the result code
    - Malformed BFI_* environment values print "Error: ..." and exit 1
    """
    try:
        settings = load_settings()
    except ValueError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(1)

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.file is None:
        parser.print_usage(sys.stdout)
        sys.exit(0)

    _configure_logging(args.verbose, settings.log_level)

    stdin = None
    input_file = None
    if args.input:
        try:
            input_file = open(args.input, "rb")
        except OSError as exc:
            print("Error: Cannot open input file {}: {}".format(args.input, exc), file=sys.stderr)
            sys.exit(1)
        stdin = input_file

    try:
        result = run_file(args.file, args, stdin=stdin)
    finally:
        if input_file is not None:
            input_file.close()

    if not args.emit or result is not ResultCode.SUCCESS:
        _status(describe_result(result))
    sys.exit(int(result))


if __name__ == "__main__":
    main()
