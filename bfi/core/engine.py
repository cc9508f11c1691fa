"""Execution engine for compiled command sequences.

WHY: The compiled sequence is a flat list of counted operations with
pre-resolved jump targets, so execution is a simple program-counter
walk. The engine owns all mutable run state (tape, data pointer,
program counter) so independent runs never interfere.

HOW: Engine wraps one CommandSequence plus its tape and pointers. run()
resets state and steps through the sequence until the program counter
passes the end (SUCCESS) or a failure condition halts it. Failures are
returned as a ResultCode, never raised. compile_and_run() is the single
end-to-end operation: compile, then run in a fresh engine.

RULES:
- Movement never checks bounds; the data pointer is an unsigned 64-bit
  value, so moving left past 0 wraps to a very large index
- Mutating commands fail with BUFFER_OVERFLOW when the pointer is at or
  beyond the last valid index (tape_size - 1)
- Reading commands (Output, LoopBegin, LoopEnd) fail with
  BUFFER_OVERFLOW only when no cell exists (pointer >= tape_size)
- With error_on_cell_boundary, a cell leaving [0, 255] fails with
  BUFFER_UNDERFLOW before the cell is changed; otherwise values wrap
- Input reads raw bytes; at end of stream the cell is left unchanged
- Output is flushed before each Input and when the run halts
- LoopBegin jumps to its LoopEnd (which then falls through) when the
  cell is 0; LoopEnd jumps back to its LoopBegin when the cell is not 0
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import BinaryIO, Optional

from bfi.core.compiler import CompileError, compile_source
from bfi.core.ir import CommandSequence, CommandType, ResultCode

logger = logging.getLogger(__name__)

TAPE_SIZE = 30000
"""Canonical tape length."""

CELL_MODULUS = 256
POINTER_MASK = (1 << 64) - 1


@dataclass
class RunConfig:
    """Options for a single compile-and-run.

    RULES:
    - error_on_cell_boundary: report BUFFER_UNDERFLOW instead of wrapping
    - tape_size: number of cells, >= 1
    - optimize: enable the SetZero peephole in the compiler
    - max_steps: stop with STEP_LIMIT_EXCEEDED after this many executed
      commands; None means unlimited
    """

    error_on_cell_boundary: bool = False
    tape_size: int = TAPE_SIZE
    optimize: bool = False
    max_steps: Optional[int] = None


class Engine:
    """Interpreter state for one compiled program.

    Not thread-safe; build one engine per concurrent run.
    """

    def __init__(
        self,
        commands: CommandSequence,
        error_on_cell_boundary: bool = False,
        tape_size: int = TAPE_SIZE,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        max_steps: Optional[int] = None,
    ) -> None:
        if tape_size < 1:
            raise ValueError("tape_size must be at least 1, got {}".format(tape_size))
        if max_steps is not None and max_steps < 0:
            raise ValueError("max_steps must not be negative, got {}".format(max_steps))
        self.commands = commands
        self.error_on_cell_boundary = error_on_cell_boundary
        self.tape_size = tape_size
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.max_steps = max_steps

        self.tape = bytearray(tape_size)
        self.pointer = 0
        self.pc = 0
        self.steps = 0
        self.result: Optional[ResultCode] = None

    @property
    def halted(self) -> bool:
        return self.result is not None

    def reset(self) -> None:
        """Zero the tape and rewind all pointers for a fresh run."""
        self.tape = bytearray(self.tape_size)
        self.pointer = 0
        self.pc = 0
        self.steps = 0
        self.result = None

    def run(self) -> ResultCode:
        """Execute the program from the start and return its result.

        The engine is reset first, so calling run() twice gives two
        independent runs over the same compiled program.
        """
        self.reset()
        try:
            result = self._execute()
        finally:
            self.stdout.flush()
        self.result = result
        if result is ResultCode.SUCCESS:
            logger.debug("Run finished after %d steps", self.steps)
        else:
            logger.info(
                "Run halted with %s at pc=%d pointer=%d after %d steps",
                result.name, self.pc, self.pointer, self.steps,
            )
        return result

    def _execute(self) -> ResultCode:
        commands = self.commands
        tape = self.tape
        # Highest index a mutating command may write to.
        writable = self.tape_size - 1
        readable = self.tape_size
        checked = self.error_on_cell_boundary
        limit = self.max_steps
        end = len(commands)

        while self.pc < end:
            if limit is not None and self.steps >= limit:
                return ResultCode.STEP_LIMIT_EXCEEDED
            command = commands[self.pc]
            kind = command.type
            count = command.count
            ptr = self.pointer
            self.steps += 1

            if kind is CommandType.MOVE_RIGHT:
                self.pointer = (ptr + count) & POINTER_MASK

            elif kind is CommandType.MOVE_LEFT:
                self.pointer = (ptr - count) & POINTER_MASK

            elif kind is CommandType.INCREMENT:
                if ptr >= writable:
                    return ResultCode.BUFFER_OVERFLOW
                value = tape[ptr] + count
                if checked and value >= CELL_MODULUS:
                    return ResultCode.BUFFER_UNDERFLOW
                tape[ptr] = value % CELL_MODULUS

            elif kind is CommandType.DECREMENT:
                if ptr >= writable:
                    return ResultCode.BUFFER_OVERFLOW
                value = tape[ptr] - count
                if checked and value < 0:
                    return ResultCode.BUFFER_UNDERFLOW
                tape[ptr] = value % CELL_MODULUS

            elif kind is CommandType.LOOP_BEGIN:
                if ptr >= readable:
                    return ResultCode.BUFFER_OVERFLOW
                if tape[ptr] == 0:
                    self.pc = count

            elif kind is CommandType.LOOP_END:
                if ptr >= readable:
                    return ResultCode.BUFFER_OVERFLOW
                if tape[ptr] != 0:
                    self.pc = count

            elif kind is CommandType.OUTPUT:
                if ptr >= readable:
                    return ResultCode.BUFFER_OVERFLOW
                self.stdout.write(bytes((tape[ptr],)) * count)

            elif kind is CommandType.INPUT:
                if ptr >= writable:
                    return ResultCode.BUFFER_OVERFLOW
                self._read_input(ptr, count)

            elif kind is CommandType.SET_ZERO:
                if ptr >= readable:
                    return ResultCode.BUFFER_OVERFLOW
                # Clearing a zero cell mutates nothing, like a skipped "[-]"
                if tape[ptr] != 0:
                    if ptr >= writable:
                        return ResultCode.BUFFER_OVERFLOW
                    tape[ptr] = 0

            self.pc += 1

        return ResultCode.SUCCESS

    def _read_input(self, ptr: int, count: int) -> None:
        """Read ``count`` raw bytes into the current cell; stop at EOF."""
        self.stdout.flush()
        for _ in range(count):
            data = self.stdin.read(1)
            if not data:
                return
            self.tape[ptr] = data[0]


def compile_and_run(
    source: str,
    config: Optional[RunConfig] = None,
    stdin: Optional[BinaryIO] = None,
    stdout: Optional[BinaryIO] = None,
) -> ResultCode:
    """Compile source text and run it in a fresh engine.

    Compile errors are reported as their ResultCode before anything is
    executed, so no output has been produced when UNMATCHED_BRACKETS is
    returned.
    """
    if config is None:
        config = RunConfig()
    try:
        commands = compile_source(
            source,
            optimize=config.optimize,
            cell_wraparound=not config.error_on_cell_boundary,
        )
    except CompileError as exc:
        logger.info("Compilation failed: %s", exc)
        return exc.code

    engine = Engine(
        commands,
        error_on_cell_boundary=config.error_on_cell_boundary,
        tape_size=config.tape_size,
        stdin=stdin,
        stdout=stdout,
        max_steps=config.max_steps,
    )
    return engine.run()
