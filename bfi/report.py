"""Human-readable text for run results.

WHY: The CLI and the HTTP API both need the same wording for each
ResultCode. Keeping it in one table keeps the two in sync.

RULES:
- Every ResultCode has exactly one message
- Failures are prefixed with "[ERROR]" followed by three spaces
"""

from __future__ import annotations

from bfi.core.ir import ResultCode

RESULT_MESSAGES: dict[ResultCode, str] = {
    ResultCode.SUCCESS: "Program interpreted successfully!",
    ResultCode.BUFFER_OVERFLOW: "[ERROR]   Buffer overflow",
    ResultCode.BUFFER_UNDERFLOW: "[ERROR]   Buffer underflow",
    ResultCode.UNMATCHED_BRACKETS: "[ERROR]   Unmatched brackets",
    ResultCode.SOURCE_UNAVAILABLE: "[ERROR]   Source unavailable",
    ResultCode.STEP_LIMIT_EXCEEDED: "[ERROR]   Step limit exceeded",
}


def describe_result(code: ResultCode) -> str:
    """Return the message for ``code``."""
    return RESULT_MESSAGES[ResultCode(code)]
