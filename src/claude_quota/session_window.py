"""Count quota-consuming messages in the trailing session window."""

from __future__ import annotations

import logging
from pathlib import Path

from .limits import HISTORY_CHUNK_BYTES
from .log_parser import entry_timestamp_ms, is_quota_consuming, parse_entry
from .models import SessionWindow
from .tail_reader import iter_lines_reversed

logger = logging.getLogger(__name__)


def aggregate_session_window(history_path: str | Path, now_ms: int, window_ms: int,
                             chunk_size: int = HISTORY_CHUNK_BYTES) -> SessionWindow:
    """Scan history.jsonl backward and count messages newer than now - window.

    History is append-only and roughly time-ordered, so the first entry at or
    before the window start ends the scan. Entries without a usable timestamp
    are ignored and never end it.
    """
    window = SessionWindow(window_start_ms=now_ms - window_ms, window_ms=window_ms)

    try:
        for line in iter_lines_reversed(history_path, chunk_size):
            entry = parse_entry(line)
            if entry is None:
                continue

            ts = entry_timestamp_ms(entry)
            if not ts:
                continue
            if ts <= window.window_start_ms:
                break

            if is_quota_consuming(entry):
                window.message_count += 1
                if window.message_count == 1 or ts < window.oldest_timestamp_ms:
                    window.oldest_timestamp_ms = ts
    except OSError as e:
        logger.warning("Error reading %s: %s", history_path, e)
        return SessionWindow(window_start_ms=now_ms - window_ms, window_ms=window_ms)

    return window
