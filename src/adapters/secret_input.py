"""Secret input readers.

Streams are read as bytes so a malformed line reaches the digest computer
untouched and is reported as an `EncodingError` for that item only.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Iterator


def iter_secret_lines(stream: BinaryIO) -> Iterator[bytes]:
    """Yield one secret per line, lazily.

    Only the line terminator is removed; other whitespace belongs to the
    secret. Empty lines are skipped.
    """

    for raw in stream:
        line = raw.rstrip(b"\n").rstrip(b"\r")
        if line:
            yield line


def iter_secret_file(path: Path) -> Iterator[bytes]:
    with path.open("rb") as handle:
        yield from iter_secret_lines(handle)
