"""Canonical source formatter.

WHY: Regenerating source from the compiled form strips comments and
gives a minimal program that compiles back to the same sequence. Useful
as a minifier and as a check that compilation lost nothing.

RULES:
- Unit commands are repeated ``count`` times
- Brackets are emitted once each
- SetZero is emitted as "[-]", which recompiles to SetZero when
  optimization is enabled and behaves identically when it is not
"""

from __future__ import annotations

from bfi.core.ir import SYMBOLS, CommandSequence, CommandType
from bfi.formatters.base import BaseFormatter, FormatterOutput

_SYMBOL_FOR = {kind: symbol for symbol, kind in SYMBOLS.items()}
_SYMBOL_FOR[CommandType.SET_ZERO] = "[-]"


class CanonicalFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Canonical source"

    def format(self, commands: CommandSequence) -> FormatterOutput:
        parts = []
        for command in commands:
            symbol = _SYMBOL_FOR[command.type]
            if command.is_jump or command.type is CommandType.SET_ZERO:
                parts.append(symbol)
            else:
                parts.append(symbol * command.count)
        return FormatterOutput(
            suffix=".b",
            content="".join(parts),
            media_type="text/plain",
        )
