"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: Each endpoint has its own request and response model. Enums
represent closed sets like result names and listing formats. All models
include Field descriptions for the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match internal names exactly (ResultCode names, FORMATTERS keys)
- Program input and output are Latin-1 strings: one character per byte
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from bfi.core.engine import TAPE_SIZE


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResultName(str, Enum):
    """Run result identifiers; values match bfi.core.ir.ResultCode names."""

    SUCCESS = "SUCCESS"
    BUFFER_OVERFLOW = "BUFFER_OVERFLOW"
    BUFFER_UNDERFLOW = "BUFFER_UNDERFLOW"
    UNMATCHED_BRACKETS = "UNMATCHED_BRACKETS"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    STEP_LIMIT_EXCEEDED = "STEP_LIMIT_EXCEEDED"


class ListingFormat(str, Enum):
    """Compiled-program formats; values match keys in bfi.formatters.FORMATTERS."""

    text_listing = "text_listing"
    json_listing = "json_listing"
    canonical = "canonical"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RunRequest(BaseModel):
    """Program and options for a single run.

    RULES:
    - input is consumed one byte per Input command (Latin-1 encoded)
    - max_steps is capped by the server's configured limit
    """

    source: str = Field(description="Program source text; non-command characters are comments.")
    input: str = Field(
        default="",
        description="Bytes available to Input commands, as a Latin-1 string.",
    )
    error_on_cell_boundary: bool = Field(
        default=False,
        description="Fail with BUFFER_UNDERFLOW instead of wrapping cell values.",
    )
    optimize: bool = Field(
        default=True,
        description="Compile clear loops ('[-]') into a single set-to-zero command.",
    )
    tape_size: int = Field(
        default=TAPE_SIZE,
        ge=1,
        le=1_000_000,
        description="Number of tape cells.",
    )
    max_steps: Optional[int] = Field(
        default=None,
        ge=1,
        description="Stop after this many executed commands. Capped by the server limit.",
    )


class CompileRequest(BaseModel):
    """Program and options for a compile-only request."""

    source: str = Field(description="Program source text.")
    optimize: bool = Field(
        default=True,
        description="Compile clear loops ('[-]') into a single set-to-zero command.",
    )
    error_on_cell_boundary: bool = Field(
        default=False,
        description="Compile as a run with cell boundary checks would: "
                    "'[+]' stays a loop.",
    )
    format: ListingFormat = Field(
        default=ListingFormat.text_listing,
        description="Listing format to render.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RunResponse(BaseModel):
    """Outcome of a run.

    RULES:
    - exit_code equals the CLI exit code for the same result
    - output holds everything the program wrote before halting
    """

    result: ResultName = Field(description="Terminal result of the run.")
    exit_code: int = Field(description="Numeric result code (0 on success).")
    message: str = Field(description="Human-readable result message.")
    output: str = Field(description="Program output bytes as a Latin-1 string.")
    steps: int = Field(description="Number of commands executed.")
    error: Optional[str] = Field(
        default=None,
        description="Compiler diagnostic, only present for UNMATCHED_BRACKETS.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "result": "SUCCESS",
                "exit_code": 0,
                "message": "Program interpreted successfully!",
                "output": "\u0003",
                "steps": 2,
                "error": None,
            }
        ]
    }}


class CompileResponse(BaseModel):
    """A rendered compiled program."""

    format: ListingFormat = Field(description="Listing format used.")
    command_count: int = Field(description="Number of compiled commands.")
    media_type: str = Field(description="MIME type of the listing content.")
    content: str = Field(description="Rendered listing.")


class FormatInfo(BaseModel):
    """Metadata for one listing format."""

    key: str = Field(description="Format identifier used in requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix used when the listing is saved.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service status, 'ok' when healthy.")
    version: str = Field(description="Package version.")


class ErrorResponse(BaseModel):
    """Consistent error response body."""

    detail: str = Field(description="Human-readable error description.")


