"""bfi: compiler and interpreter for the eight-command tape language.

WHY: Programs in this language are plain text over eight single-character
commands that move a data pointer, change byte cells, do byte I/O and
loop. Interpreting the text directly is slow and re-scans for brackets
on every jump; compiling it first keeps the interpreter simple and fast.

HOW: Two-stage pipeline: compile (fold repeats, match brackets) and
execute (walk the compiled sequence against a bounded tape). The CLI,
HTTP API and formatters are thin layers over the core.

RULES:
- core.ir is the stable contract between compiler, engine and formatters
- Engine runs never share state; each run owns its tape and pointers
- Run failures are returned as ResultCode values, not raised
"""

__version__ = "0.1.0"
