"""Core compiler, execution engine and intermediate representation.

WHY: The core package holds the only parts of the interpreter with real
design decisions: turning text into a compiled CommandSequence and
running it against a bounded tape.

HOW: ir.py defines the data structures, compiler.py builds them from
source text, engine.py executes them, source.py loads program files.

RULES:
- ir.py is the contract between compiler, engine and formatters
- The engine never raises for program failures; it returns a ResultCode
- No module-level mutable interpreter state anywhere in this package
"""

from bfi.core.compiler import CompileError, UnmatchedBracketsError, compile_source
from bfi.core.engine import TAPE_SIZE, Engine, RunConfig, compile_and_run
from bfi.core.ir import Command, CommandSequence, CommandType, ResultCode
from bfi.core.source import SourceUnavailableError, load_source

__all__ = [
    "TAPE_SIZE",
    "Command",
    "CommandSequence",
    "CommandType",
    "CompileError",
    "Engine",
    "ResultCode",
    "RunConfig",
    "SourceUnavailableError",
    "UnmatchedBracketsError",
    "compile_and_run",
    "compile_source",
    "load_source",
]
