"""Bounded reads from the end of append-only log files.

Claude Code's logs grow without limit, so nothing here reads a whole file:
``read_tail`` does one read of the last N bytes and ``iter_lines_reversed``
walks backward a chunk at a time.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from .limits import HISTORY_CHUNK_BYTES


def read_tail(filepath: str | Path, max_bytes: int) -> str | None:
    """Return the last ``max_bytes`` of a file as text, or None if it is missing."""
    filepath = Path(filepath)
    if not filepath.is_file():
        return None

    with open(filepath, "rb") as f:
        size = f.seek(0, os.SEEK_END)
        f.seek(max(0, size - max_bytes))
        data = f.read(max_bytes)
    return data.decode("utf-8", errors="replace")


def iter_lines_reversed(filepath: str | Path,
                        chunk_size: int = HISTORY_CHUNK_BYTES) -> Iterator[str]:
    """Yield the lines of a file newest-first, reading backward in chunks.

    The first line of each chunk may be cut off, so it is carried over and
    joined to the end of the next (older) chunk. Splitting happens on bytes,
    which keeps multi-byte characters intact at chunk edges. Missing files
    yield nothing.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        return

    with open(filepath, "rb") as f:
        pos = f.seek(0, os.SEEK_END)
        remainder = b""
        while pos > 0:
            read_size = min(chunk_size, pos)
            pos -= read_size
            f.seek(pos)
            lines = (f.read(read_size) + remainder).split(b"\n")

            # Bytes before pos still belong to lines[0]
            remainder = lines.pop(0) if pos > 0 else b""

            for raw in reversed(lines):
                yield raw.decode("utf-8", errors="replace")
