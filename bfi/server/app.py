"""FastAPI application exposing compile and run endpoints.

WHY: External clients need an HTTP way to run a program on some input
and get back its output and result, or to inspect what a program
compiles to. FastAPI provides request validation and OpenAPI docs.

HOW: Four endpoints. POST /runs compiles and runs a program in a fresh
Engine over in-memory byte streams and returns the result, output and
step count. POST /compile renders a compiled program with one of the
registered formatters. GET /formats and GET /health are metadata.

RULES:
- Run and compile endpoints are plain (sync) functions; FastAPI runs
  them in its threadpool so long programs don't block the event loop
- Every run is capped at BFI_SERVER_MAX_STEPS executed commands
- Sources longer than BFI_SERVER_MAX_SOURCE_CHARS are rejected with 413
- Settings are read on first use; run_api reads them before serving and
  exits with "Error: ..." when a BFI_* variable is malformed
- Program failures are 200 responses carrying the result; only invalid
  requests produce 4xx errors
- Input and output bytes travel as Latin-1 strings
"""

from __future__ import annotations

import io
import logging
import sys
from typing import List, Optional

from fastapi import FastAPI, HTTPException

from bfi import __version__
from bfi.config import Settings, load_settings
from bfi.core.compiler import CompileError, compile_source
from bfi.core.engine import Engine
from bfi.core.ir import ResultCode
from bfi.formatters import FORMATTERS
from bfi.report import describe_result
from bfi.server.models import (
    CompileRequest,
    CompileResponse,
    ErrorResponse,
    FormatInfo,
    HealthResponse,
    ResultName,
    RunRequest,
    RunResponse,
)

logger = logging.getLogger(__name__)

IO_ENCODING = "latin-1"

app = FastAPI(
    title="bfi API",
    description=(
        "Compile and run programs for the eight-command tape language. "
        "Submit source and input, get back the output and result code."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


_SETTINGS: Optional[Settings] = None


def _settings() -> Settings:
    """Return the environment settings, reading them once."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def _check_source_size(source: str) -> None:
    """Raise HTTPException 413 if the source exceeds the configured limit."""
    limit = _settings().server_max_source_chars
    if len(source) > limit:
        raise HTTPException(
            status_code=413,
            detail="Source too large ({} chars, max {})".format(
                len(source), limit
            ),
        )


def _encode_input(text: str) -> bytes:
    """Encode request input as Latin-1, raising 422 on wider characters."""
    try:
        return text.encode(IO_ENCODING)
    except UnicodeEncodeError as exc:
        raise HTTPException(
            status_code=422,
            detail="Input must only contain characters U+0000..U+00FF "
                   "(offending character at offset {})".format(exc.start),
        )


def _effective_max_steps(requested: Optional[int]) -> int:
    limit = _settings().server_max_steps
    if requested is None:
        return limit
    return min(requested, limit)


def _run_response(
    result: ResultCode,
    output: bytes,
    steps: int,
    error: Optional[str] = None,
) -> RunResponse:
    return RunResponse(
        result=ResultName(result.name),
        exit_code=int(result),
        message=describe_result(result),
        output=output.decode(IO_ENCODING),
        steps=steps,
        error=error,
    )


# ---------------------------------------------------------------------------
# Endpoints: Runs
# ---------------------------------------------------------------------------


@app.post(
    "/runs",
    response_model=RunResponse,
    tags=["runs"],
    summary="Compile and run a program",
    description=(
        "Compiles the source and runs it on the given input in a fresh "
        "interpreter. Program failures (buffer overflow, unmatched brackets, "
        "step limit) are reported in the response body, not as HTTP errors."
    ),
    responses={
        413: {"model": ErrorResponse, "description": "Source too large"},
        422: {"model": ErrorResponse, "description": "Invalid request"},
    },
)
def create_run(request: RunRequest) -> RunResponse:
    _check_source_size(request.source)
    stdin = io.BytesIO(_encode_input(request.input))
    stdout = io.BytesIO()

    try:
        commands = compile_source(
            request.source,
            optimize=request.optimize,
            cell_wraparound=not request.error_on_cell_boundary,
        )
    except CompileError as exc:
        logger.info("Rejected program: %s", exc)
        return _run_response(exc.code, b"", 0, error=str(exc))

    engine = Engine(
        commands,
        error_on_cell_boundary=request.error_on_cell_boundary,
        tape_size=request.tape_size,
        stdin=stdin,
        stdout=stdout,
        max_steps=_effective_max_steps(request.max_steps),
    )
    result = engine.run()
    logger.info(
        "Run of %d commands finished with %s after %d steps",
        len(commands), result.name, engine.steps,
    )
    return _run_response(result, stdout.getvalue(), engine.steps)


# ---------------------------------------------------------------------------
# Endpoints: Compile
# ---------------------------------------------------------------------------


@app.post(
    "/compile",
    response_model=CompileResponse,
    tags=["compile"],
    summary="Compile a program and render a listing",
    description=(
        "Compiles the source without running it and renders the compiled "
        "command sequence in the requested format."
    ),
    responses={
        413: {"model": ErrorResponse, "description": "Source too large"},
        422: {"model": ErrorResponse, "description": "Unmatched brackets or invalid request"},
    },
)
def compile_program(request: CompileRequest) -> CompileResponse:
    _check_source_size(request.source)
    try:
        commands = compile_source(
            request.source,
            optimize=request.optimize,
            cell_wraparound=not request.error_on_cell_boundary,
        )
    except CompileError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    output = FORMATTERS[request.format.value]().format(commands)
    return CompileResponse(
        format=request.format,
        command_count=len(commands),
        media_type=output.media_type,
        content=output.content,
    )


# ---------------------------------------------------------------------------
# Endpoints: Formats
# ---------------------------------------------------------------------------


@app.get(
    "/formats",
    response_model=List[FormatInfo],
    tags=["formats"],
    summary="List available listing formats",
)
async def list_formats() -> List[FormatInfo]:
    result = []
    for key, formatter_cls in sorted(FORMATTERS.items()):
        formatter = formatter_cls()
        result.append(FormatInfo(
            key=key,
            name=formatter.name,
            suffix=formatter.format(()).suffix,
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the bfi-api console script."""
    import uvicorn

    try:
        _settings()
    except ValueError as exc:
        print("Error: {}".format(exc), file=sys.stderr)
        sys.exit(1)
    uvicorn.run(app, host="0.0.0.0", port=8000)
