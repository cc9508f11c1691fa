"""Configuration defaults and .env loading.

WHY: Tape size, boundary policy, optimization and server limits are
plain values that operators want to change without editing code. They
are collected into one Settings object so the CLI and the HTTP API read
the same defaults.

HOW: python-dotenv loads the .env file on import. load_settings() reads
each value with os.getenv and parses it with a small helper that raises
a clear ValueError on malformed input.

RULES:
- BFI_TAPE_SIZE: number of tape cells (default 30000)
- BFI_ERROR_ON_CELL_BOUNDARY: report cell overflow instead of wrapping
- BFI_OPTIMIZE: enable the SetZero peephole (default true)
- BFI_MAX_STEPS: CLI step limit, unset or empty means unlimited
- BFI_SERVER_MAX_STEPS: step limit applied to every HTTP run
- BFI_SERVER_MAX_SOURCE_CHARS: largest program accepted over HTTP
- BFI_LOG_LEVEL: logging level name for the CLI (default WARNING)
- CLI flags override all of these
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def parse_bool_env(name: str, default: bool) -> bool:
    """Read a boolean environment variable ("1", "true", "yes", "on")."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


def parse_int_env(name: str, default: Optional[int], minimum: int = 0) -> Optional[int]:
    """Read an integer environment variable.

    RULES:
    - Unset or blank → default
    - Non-integer or below minimum → ValueError naming the variable
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(
            "{} must be an integer, got {!r}".format(name, raw)
        ) from None
    if value < minimum:
        raise ValueError("{} must be at least {}, got {}".format(name, minimum, value))
    return value


@dataclass(frozen=True)
class Settings:
    """Environment-derived defaults shared by the CLI and the HTTP API."""

    tape_size: int = 30000
    error_on_cell_boundary: bool = False
    optimize: bool = True
    max_steps: Optional[int] = None
    server_max_steps: int = 10_000_000
    server_max_source_chars: int = 100_000
    log_level: str = "WARNING"


def load_settings() -> Settings:
    """Read every BFI_* variable from the environment.

    Called when a command or request needs the values, not at import,
    so callers can catch the ValueError a malformed variable raises.
    """
    return Settings(
        tape_size=parse_int_env("BFI_TAPE_SIZE", 30000, minimum=1),
        error_on_cell_boundary=parse_bool_env("BFI_ERROR_ON_CELL_BOUNDARY", False),
        optimize=parse_bool_env("BFI_OPTIMIZE", True),
        max_steps=parse_int_env("BFI_MAX_STEPS", None, minimum=1),
        server_max_steps=parse_int_env("BFI_SERVER_MAX_STEPS", 10_000_000, minimum=1),
        server_max_source_chars=parse_int_env(
            "BFI_SERVER_MAX_SOURCE_CHARS", 100_000, minimum=1
        ),
        log_level=os.getenv("BFI_LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
    )
