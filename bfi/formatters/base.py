"""Abstract base formatter and output container.

WHY: A compiled program can be shown several ways (a readable listing,
machine-readable JSON, minimal source). The CLI and the HTTP API treat
them all the same, so each formatter shares one small interface.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles a file suffix with the rendered content
and its MIME type.

RULES:
- Subclasses MUST implement ``name`` and ``format()``
- ``format()`` must be deterministic for a given CommandSequence
- ``suffix`` starts with a hyphen or dot, e.g. ``"-listing.txt"``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from bfi.core.ir import CommandSequence


@dataclass
class FormatterOutput:
    """One rendered view of a compiled program.

    Attributes:
        suffix: File suffix appended to the source stem when saved,
                e.g. ``"-listing.json"`` → ``"hello-listing.json"``.
        content: The rendered text.
        media_type: MIME type for the content.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all compiled-program formatters.

    To add a new format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Text listing'."""

    @abstractmethod
    def format(self, commands: CommandSequence) -> FormatterOutput:
        """Render a compiled program."""
