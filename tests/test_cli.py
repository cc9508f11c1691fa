"""Tests for the command-line interface.

WHY: The CLI is what users run. Its exit codes are the result codes,
its stdout must carry only program output, and its messages must match
the wording users expect.

HOW: main() is called with an explicit argv and SystemExit is caught to
read the exit code. capsysbinary captures stdout as raw bytes because
program output is written straight to the binary stream.

RULES:
- Program files are written to tmp_path via the program_file fixture
- Status and result lines are asserted on stderr, never stdout
"""

from __future__ import annotations

import json

import pytest

from bfi.cli import build_parser, main
from bfi.core.ir import ResultCode


def _run_cli(argv):
    """Call main() and return its exit code."""
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestUsage:
    """Without a file argument the CLI prints usage and exits 0."""

    def test_no_arguments(self, capsys):
        assert _run_cli([]) == 0
        assert "usage: bfi" in capsys.readouterr().out

    def test_parser_defaults(self):
        args = build_parser().parse_args(["prog.b"])
        assert args.file == "prog.b"
        assert args.emit is None
        assert args.tape_size >= 1

    def test_rejects_zero_tape_size(self, capsys):
        assert _run_cli(["prog.b", "--tape-size", "0"]) == 2

    def test_rejects_unknown_emit_format(self, capsys):
        assert _run_cli(["prog.b", "--emit", "xml"]) == 2


class TestRunning:
    """Running a file writes program output to stdout and reports on stderr."""

    def test_hello_world(self, capsysbinary, program_file, hello_world):
        source, expected = hello_world
        path = program_file(source)
        assert _run_cli([str(path)]) == 0
        captured = capsysbinary.readouterr()
        assert captured.out == expected
        assert b"Executing..." in captured.err
        assert b"Program interpreted successfully!" in captured.err

    def test_missing_file(self, capsysbinary, tmp_path):
        code = _run_cli([str(tmp_path / "missing.b")])
        assert code == ResultCode.SOURCE_UNAVAILABLE
        assert b"[ERROR]   Source unavailable" in capsysbinary.readouterr().err

    def test_unmatched_brackets(self, capsysbinary, program_file):
        path = program_file("+[")
        assert _run_cli([str(path)]) == ResultCode.UNMATCHED_BRACKETS
        captured = capsysbinary.readouterr()
        assert b"[ERROR]   Unmatched brackets" in captured.err
        assert captured.out == b""

    def test_cell_boundary_flag(self, capsysbinary, program_file):
        path = program_file("+" * 256)
        assert _run_cli([str(path)]) == ResultCode.SUCCESS
        assert _run_cli([str(path), "--error-on-cell-boundary"]) == ResultCode.BUFFER_UNDERFLOW
        assert b"[ERROR]   Buffer underflow" in capsysbinary.readouterr().err

    def test_tape_size_flag(self, capsysbinary, program_file):
        path = program_file(">+")
        assert _run_cli([str(path), "--tape-size", "2"]) == ResultCode.BUFFER_OVERFLOW
        assert b"[ERROR]   Buffer overflow" in capsysbinary.readouterr().err

    def test_max_steps_flag(self, capsysbinary, program_file):
        path = program_file("+[]")
        assert _run_cli([str(path), "--max-steps", "50"]) == ResultCode.STEP_LIMIT_EXCEEDED
        assert b"Step limit exceeded" in capsysbinary.readouterr().err

    def test_input_file(self, capsysbinary, program_file, tmp_path):
        path = program_file(",.,.")
        data = tmp_path / "input.bin"
        data.write_bytes(b"\x00Z")
        assert _run_cli([str(path), "--input", str(data)]) == 0
        assert capsysbinary.readouterr().out == b"\x00Z"

    def test_missing_input_file(self, capsysbinary, program_file, tmp_path):
        path = program_file(",.")
        assert _run_cli([str(path), "--input", str(tmp_path / "nope.bin")]) == 1
        assert b"Cannot open input file" in capsysbinary.readouterr().err

    def test_comments_in_non_utf8_file(self, capsysbinary, tmp_path):
        path = tmp_path / "latin.b"
        path.write_bytes(b"\xff\xfe caf\xe9 +++.")
        assert _run_cli([str(path)]) == 0
        assert capsysbinary.readouterr().out == b"\x03"


class TestEmit:
    """--emit prints a listing instead of running the program."""

    def test_text_listing(self, capsysbinary, program_file):
        path = program_file("+++.")
        assert _run_cli([str(path), "--emit", "text_listing"]) == 0
        captured = capsysbinary.readouterr()
        lines = captured.out.decode().splitlines()
        assert lines[0].split() == ["0000", "increment", "x3"]
        assert lines[1].split() == ["0001", "output", "x1"]
        assert b"Executing..." not in captured.err

    def test_json_listing_respects_optimize(self, capsysbinary, program_file):
        path = program_file("+[-]")
        assert _run_cli([str(path), "--emit", "json_listing", "--optimize"]) == 0
        document = json.loads(capsysbinary.readouterr().out)
        assert [c["type"] for c in document["commands"]] == ["increment", "set_zero"]

        assert _run_cli([str(path), "--emit", "json_listing", "--no-optimize"]) == 0
        document = json.loads(capsysbinary.readouterr().out)
        assert document["command_count"] == 4

    def test_canonical(self, capsysbinary, program_file):
        path = program_file("print three: +++ .")
        assert _run_cli([str(path), "--emit", "canonical", "--no-optimize"]) == 0
        assert capsysbinary.readouterr().out == b"+++.\n"

    def test_emit_with_unmatched_brackets(self, capsysbinary, program_file):
        path = program_file("]")
        assert _run_cli([str(path), "--emit", "canonical"]) == ResultCode.UNMATCHED_BRACKETS
        captured = capsysbinary.readouterr()
        assert captured.out == b""
        assert b"Unmatched ']' at offset 0" in captured.err


class TestEnvironmentSettings:
    """BFI_* variables set defaults; malformed values are reported, not raised."""

    def test_bad_tape_size_prints_error(self, capsys, program_file, monkeypatch):
        monkeypatch.setenv("BFI_TAPE_SIZE", "big")
        path = program_file("+.")
        assert _run_cli([str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.err.startswith("Error: BFI_TAPE_SIZE must be an integer")
        assert "Traceback" not in captured.err
        assert captured.out == ""

    def test_bad_max_steps_prints_error(self, capsys, program_file, monkeypatch):
        monkeypatch.setenv("BFI_MAX_STEPS", "0")
        path = program_file("+.")
        assert _run_cli([str(path)]) == 1
        assert capsys.readouterr().err.startswith("Error: BFI_MAX_STEPS must be at least 1")

    def test_tape_size_from_environment(self, capsysbinary, program_file, monkeypatch):
        monkeypatch.setenv("BFI_TAPE_SIZE", "2")
        path = program_file(">+")
        assert _run_cli([str(path)]) == ResultCode.BUFFER_OVERFLOW

    def test_flag_overrides_environment(self, capsysbinary, program_file, monkeypatch):
        monkeypatch.setenv("BFI_TAPE_SIZE", "2")
        path = program_file(">+")
        assert _run_cli([str(path), "--tape-size", "3"]) == 0
