"""Plain-text listing of a compiled program.

One line per command: zero-padded index, command type, then either the
repeat count ("x3") or the jump target ("-> 0007"). Handy for checking
what the folding and bracket matching actually produced.
"""

from __future__ import annotations

from bfi.core.ir import CommandSequence, CommandType
from bfi.formatters.base import BaseFormatter, FormatterOutput


class TextListingFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Text listing"

    def format(self, commands: CommandSequence) -> FormatterOutput:
        width = max(4, len(str(len(commands))))
        lines = []
        for index, command in enumerate(commands):
            if command.is_jump:
                operand = "-> {:0{}d}".format(command.count, width)
            elif command.type is CommandType.SET_ZERO:
                operand = ""
            else:
                operand = "x{}".format(command.count)
            line = "{:0{}d}  {:<11} {}".format(index, width, command.type.value, operand)
            lines.append(line.rstrip())
        content = "\n".join(lines)
        if lines:
            content += "\n"
        return FormatterOutput(
            suffix="-listing.txt",
            content=content,
            media_type="text/plain",
        )
