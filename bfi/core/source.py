"""Program source loading.

WHY: The compiler only ever sees well-formed text. Everything that can
go wrong before that (missing file, permissions, a directory instead of
a file) is a loader problem and is reported as SOURCE_UNAVAILABLE.

HOW: Read the whole file as bytes and decode it as Latin-1, which maps
every byte to one character and therefore never fails. Command symbols
are ASCII, so comments in any encoding pass through harmlessly.

RULES:
- Raises SourceUnavailableError (an OSError) for any read failure
- Never raises UnicodeDecodeError
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from bfi.core.ir import ResultCode

SOURCE_ENCODING = "latin-1"


class SourceUnavailableError(OSError):
    """The program text could not be obtained."""

    code = ResultCode.SOURCE_UNAVAILABLE


def load_source(path: Union[str, Path]) -> str:
    """Load program text from ``path``.

    Raises:
        SourceUnavailableError: If the file is missing or unreadable.
    """
    source_path = Path(path)
    try:
        data = source_path.read_bytes()
    except OSError as exc:
        raise SourceUnavailableError(
            "Cannot read program source {}: {}".format(
                source_path, exc.strerror or exc
            )
        ) from exc
    return data.decode(SOURCE_ENCODING)
