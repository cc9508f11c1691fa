"""Shared test fixtures for the bfi test suite.

WHY: Engine, CLI and API tests all need to run small programs against
in-memory byte streams and to reuse the same sample programs.

HOW: A ``run_program`` fixture compiles and runs source text in a fresh
Engine and hands back the result, the output bytes and the engine so
tests can inspect the tape and pointers afterwards.

RULES:
- Every run uses a fresh Engine (no shared mutable state)
- stdin and stdout are always io.BytesIO, never the real process streams
"""

from __future__ import annotations

import io
from typing import Callable, Tuple

import pytest

from bfi.core.compiler import compile_source
from bfi.core.engine import TAPE_SIZE, Engine
from bfi.core.ir import ResultCode


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)
HELLO_WORLD_OUTPUT = b"Hello World!\n"

RunResult = Tuple[ResultCode, bytes, Engine]


def execute(
    source: str,
    stdin: bytes = b"",
    error_on_cell_boundary: bool = False,
    tape_size: int = TAPE_SIZE,
    optimize: bool = False,
    max_steps=None,
) -> RunResult:
    """Compile ``source`` and run it in a fresh engine over byte buffers."""
    commands = compile_source(
        source,
        optimize=optimize,
        cell_wraparound=not error_on_cell_boundary,
    )
    out = io.BytesIO()
    engine = Engine(
        commands,
        error_on_cell_boundary=error_on_cell_boundary,
        tape_size=tape_size,
        stdin=io.BytesIO(stdin),
        stdout=out,
        max_steps=max_steps,
    )
    result = engine.run()
    return result, out.getvalue(), engine


@pytest.fixture
def run_program() -> Callable[..., RunResult]:
    """Run source text in a fresh engine; returns (result, output, engine)."""
    return execute


@pytest.fixture
def program_file(tmp_path):
    """Write source text to a temporary .b file and return its path."""

    def _write(source: str, name: str = "program.b"):
        path = tmp_path / name
        path.write_text(source, encoding="latin-1")
        return path

    return _write


@pytest.fixture
def hello_world():
    """A classic hello-world program and the exact bytes it prints."""
    return HELLO_WORLD, HELLO_WORLD_OUTPUT
