"""Single-pass compiler: tokenize, match brackets, fold repeated commands.

WHY: Interpreting raw symbols one character at a time wastes work on
long runs like "++++++++" and forces the engine to re-scan for matching
brackets every time a loop is entered or skipped. Compiling once up
front removes both costs.

HOW: One left-to-right scan over the text. Recognised symbols become
working entries; an explicit stack holds the indices of pending
LoopBegin entries. A closing bracket pops its partner and both entries
get each other's index in the same step. Any other symbol increments
the previous entry's count when the type matches, otherwise appends a
new entry with count 1. With optimize=True, a freshly closed "[-]" (and
"[+]" when cells wrap) collapses into one SetZero. The working entries
are frozen into a tuple of Command at the end.

RULES:
- Characters outside the eight command symbols are comments
- "]" with an empty stack fails immediately (UnmatchedBracketsError)
- A non-empty stack at end of text fails (UnmatchedBracketsError)
- Bracket targets are always set as a pair, never independently
- O(len(text)) time and space, no recursion
- Identical text and options always give an identical sequence
"""

from __future__ import annotations

import logging
from typing import List

from bfi.core.ir import SYMBOLS, Command, CommandSequence, CommandType, ResultCode

logger = logging.getLogger(__name__)


class CompileError(ValueError):
    """Structural error found while compiling source text.

    Attributes:
        code: The ResultCode a caller should report for this error.
        position: Character offset in the source text, or None.
    """

    code = ResultCode.UNMATCHED_BRACKETS

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnmatchedBracketsError(CompileError):
    """A "]" without an open "[", or a "[" never closed."""

    code = ResultCode.UNMATCHED_BRACKETS


def compile_source(
    text: str,
    optimize: bool = False,
    cell_wraparound: bool = True,
) -> CommandSequence:
    """Compile source text into an immutable CommandSequence.

    Args:
        text: Arbitrary text; non-command characters are ignored.
        optimize: Replace "[-]" (and "[+]", see cell_wraparound) with a
            single SetZero command.
        cell_wraparound: Whether the program will run with silent cell
            wraparound. "[+]" is only equivalent to SetZero when it is.

    Returns:
        Tuple of Command objects with folded counts and paired targets.

    Raises:
        UnmatchedBracketsError: On the first "]" without a partner, or
            at end of text when a "[" is still open.
    """
    # Working entries are [CommandType, count] lists, frozen at the end.
    entries: List[list] = []
    pending: List[int] = []
    # Source offset of each pending "[" for error reporting.
    pending_offsets: List[int] = []

    for offset, symbol in enumerate(text):
        kind = SYMBOLS.get(symbol)
        if kind is None:
            continue

        if kind is CommandType.LOOP_BEGIN:
            pending.append(len(entries))
            pending_offsets.append(offset)
            entries.append([CommandType.LOOP_BEGIN, 0])
            continue

        if kind is CommandType.LOOP_END:
            if not pending:
                raise UnmatchedBracketsError(
                    "Unmatched ']' at offset {}".format(offset), position=offset
                )
            begin = pending.pop()
            pending_offsets.pop()
            if optimize and _is_clear_loop(entries, begin, cell_wraparound):
                del entries[begin:]
                entries.append([CommandType.SET_ZERO, 1])
                continue
            end = len(entries)
            entries.append([CommandType.LOOP_END, begin])
            entries[begin][1] = end
            continue

        # Fold runs of the same unit command into one counted entry
        if entries and entries[-1][0] is kind:
            entries[-1][1] += 1
        else:
            entries.append([kind, 1])

    if pending:
        offset = pending_offsets[-1]
        raise UnmatchedBracketsError(
            "Unclosed '[' at offset {}".format(offset), position=offset
        )

    commands = tuple(Command(kind, count) for kind, count in entries)
    logger.debug("Compiled %d characters into %d commands", len(text), len(commands))
    return commands


def _is_clear_loop(entries: List[list], begin: int, cell_wraparound: bool) -> bool:
    """True when the loop opened at ``begin`` is exactly "[-]" or "[+]".

    The body must be one unit step: "[--]" never terminates on odd
    values, so only count 1 qualifies.
    """
    if len(entries) != begin + 2:
        return False
    kind, count = entries[begin + 1]
    if count != 1:
        return False
    if kind is CommandType.DECREMENT:
        return True
    return kind is CommandType.INCREMENT and cell_wraparound
