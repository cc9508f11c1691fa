"""Compiled-program formatter registry.

WHY: The CLI (--emit) and the HTTP API (/compile, /formats) need a
single lookup to find a formatter by key.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json_listing"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API requests)
- Values are BaseFormatter subclasses (not instances)
- Every formatter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bfi.formatters.canonical import CanonicalFormatter
from bfi.formatters.json_listing import JsonListingFormatter
from bfi.formatters.text_listing import TextListingFormatter

if TYPE_CHECKING:
    from bfi.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "text_listing": TextListingFormatter,
    "json_listing": JsonListingFormatter,
    "canonical": CanonicalFormatter,
}
