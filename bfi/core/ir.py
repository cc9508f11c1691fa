"""Compiled program representation and run result codes.

WHY: The compiler and the execution engine need a shared, well-typed
contract. The compiler folds raw command symbols into counted units and
resolves loop targets once; the engine then walks that structure without
re-scanning text. Result codes give every run a single enumerated
outcome instead of exceptions crossing the engine boundary.

HOW: Three types:
  CommandType: the nine instruction kinds (eight symbols + SetZero)
  Command:     one frozen instruction: a type plus a count
  ResultCode:  terminal outcome of a compile-and-run, doubling as the
               process exit code

RULES:
- For Increment/Decrement/MoveLeft/MoveRight/Input/Output, count is the
  fold (repeat) count, always >= 1
- For LoopBegin/LoopEnd, count is the index of the matching bracket
- For SetZero, count is always 1
- A CommandSequence is a tuple, immutable once the compiler returns it
- ResultCode values are stable: they are the CLI exit codes
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple


class CommandType(str, enum.Enum):
    """Instruction kinds understood by the execution engine.

    Inherits from str so values serialize cleanly to JSON listings.
    """

    INCREMENT = "increment"
    DECREMENT = "decrement"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    LOOP_BEGIN = "loop_begin"
    LOOP_END = "loop_end"
    INPUT = "input"
    OUTPUT = "output"
    SET_ZERO = "set_zero"


# Source symbol for each foldable or bracket command type.
SYMBOLS: dict[str, CommandType] = {
    "+": CommandType.INCREMENT,
    "-": CommandType.DECREMENT,
    "<": CommandType.MOVE_LEFT,
    ">": CommandType.MOVE_RIGHT,
    "[": CommandType.LOOP_BEGIN,
    "]": CommandType.LOOP_END,
    ",": CommandType.INPUT,
    ".": CommandType.OUTPUT,
}

JUMP_TYPES = frozenset({CommandType.LOOP_BEGIN, CommandType.LOOP_END})


@dataclass(frozen=True)
class Command:
    """One compiled instruction.

    RULES:
    - type: the CommandType
    - count: repeat count, or the matching bracket's index for jumps
    """

    type: CommandType
    count: int = 1

    @property
    def is_jump(self) -> bool:
        return self.type in JUMP_TYPES


CommandSequence = Tuple[Command, ...]


class ResultCode(enum.IntEnum):
    """Terminal outcome of compiling and running a program.

    WHY: Every failure is terminal for the run and is reported as one
    enumerated value, never as an exception thrown out of the engine.

    RULES:
    - SUCCESS: the program counter ran past the last command
    - BUFFER_OVERFLOW: a cell access at an out-of-range data pointer
    - BUFFER_UNDERFLOW: a cell would leave [0, 255] with boundary checks on
    - UNMATCHED_BRACKETS: compile-time structural error, nothing executed
    - SOURCE_UNAVAILABLE: the program text could not be loaded
    - STEP_LIMIT_EXCEEDED: only when a caller sets max_steps
    """

    SUCCESS = 0
    BUFFER_OVERFLOW = 1
    BUFFER_UNDERFLOW = 2
    UNMATCHED_BRACKETS = 3
    SOURCE_UNAVAILABLE = 4
    STEP_LIMIT_EXCEEDED = 5
