"""JSON listing of a compiled program, validated against a schema.

WHY: Tools that inspect compiled programs (editors, visualizers, the
HTTP API) need a stable machine-readable form rather than parsing the
text listing.

HOW: Each command becomes an object with its index and type, plus
either ``count`` (unit commands) or ``target`` (brackets). The document
is validated with jsonschema against listing_schema.json before it is
returned.

RULES:
- version is "1.0.0"
- Jump commands carry ``target``, every other command carries ``count``
- Validation failure raises jsonschema.ValidationError
- Output suffix: "-listing.json"
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from bfi.core.ir import CommandSequence
from bfi.formatters.base import BaseFormatter, FormatterOutput

LISTING_VERSION = "1.0.0"

_SCHEMA_PATH = Path(__file__).resolve().parent / "listing_schema.json"


def _load_schema() -> dict[str, Any]:
    """Load the listing JSON schema from disk.

    Cached at module level after first call to avoid repeated I/O.
    """
    with open(_SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


_CACHED_SCHEMA: dict[str, Any] | None = None


def _get_schema() -> dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        _CACHED_SCHEMA = _load_schema()
    return _CACHED_SCHEMA


def build_listing(commands: CommandSequence) -> dict[str, Any]:
    """Build the listing document for ``commands`` without validating it."""
    entries = []
    for index, command in enumerate(commands):
        entry: dict[str, Any] = {"index": index, "type": command.type.value}
        if command.is_jump:
            entry["target"] = command.count
        else:
            entry["count"] = command.count
        entries.append(entry)
    return {
        "version": LISTING_VERSION,
        "command_count": len(entries),
        "commands": entries,
    }


class JsonListingFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "JSON listing"

    def format(self, commands: CommandSequence) -> FormatterOutput:
        document = build_listing(commands)
        jsonschema.validate(instance=document, schema=_get_schema())
        return FormatterOutput(
            suffix="-listing.json",
            content=json.dumps(document, indent=2) + "\n",
            media_type="application/json",
        )
