"""Parse Claude Code JSONL log lines into the fields quota estimation needs."""

from __future__ import annotations

import json
import logging
import math
import re
from datetime import datetime, timezone

from .model_names import normalize_model_name

logger = logging.getLogger(__name__)

MAX_TIMESTAMP_MS = int(datetime(9000, 1, 1, tzinfo=timezone.utc).timestamp() * 1000)

# Regex patterns for log parsing
RE_ANSI = re.compile(r"[\u001b\u009b][\[()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]")
# e.g. "<local-command-stdout>Set model to opus (claude-opus-4-5-20251101)</local-command-stdout>"
RE_SET_MODEL = re.compile(r"Set model to\s+([^()<]+)(?:\(([^)]+)\))?", re.IGNORECASE)
MODEL_MARKER = "Set model to"


def parse_entry(line: str) -> dict | None:
    """Parse one JSONL line. Returns None for blank, partial or non-object lines."""
    line = line.strip()
    if not line:
        return None
    try:
        entry = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("Skipping unparseable log line: %.80s", line)
        return None
    if not isinstance(entry, dict):
        return None
    return entry


def entry_timestamp_ms(entry: dict) -> int:
    """Return the entry's timestamp as epoch millis, or 0 if absent/unparseable.

    ISO strings without an offset are read as local time. Non-finite,
    non-positive and far-future values count as unparseable.
    """
    value = entry.get("timestamp")
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        ms = int(value)
    elif isinstance(value, str):
        try:
            ms = int(datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp() * 1000)
        except (ValueError, OverflowError, OSError):
            return 0
    else:
        return 0
    # Out of range values (e.g. microseconds) cannot become a reset time
    if not 0 < ms <= MAX_TIMESTAMP_MS:
        return 0
    return ms


def extract_user_content(entry: dict) -> tuple[bool, str]:
    """Return (is_user_message, text) for a history entry."""
    display = entry.get("display")
    if isinstance(display, str):
        return True, display

    if entry.get("type") != "user_message" and entry.get("role") != "user":
        return False, ""

    content = entry.get("content")
    if isinstance(content, str):
        return True, content

    message = entry.get("message")
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return True, message["content"]

    if isinstance(content, list):
        for item in content:
            if not isinstance(item, dict):
                continue
            if item.get("type") == "text" or isinstance(item.get("text"), str):
                text = item.get("text") or item.get("content") or ""
                return True, text if isinstance(text, str) else ""

    return True, ""


def is_quota_consuming(entry: dict) -> bool:
    """True if the entry is a user message that counts against the quota.

    Slash commands (``/compact``, ``/model`` ...) are handled locally and
    never count.
    """
    is_user, content = extract_user_content(entry)
    if not is_user:
        return False
    return not content.strip().startswith("/")


def strip_ansi(text: str) -> str:
    """Remove terminal escape sequences."""
    return RE_ANSI.sub("", text)


def extract_model_marker(entry: dict) -> str | None:
    """Return the display name from a "Set model to ..." entry, if this is one.

    The parenthesized detail is the exact model id and wins over the bare
    alias before it.
    """
    message = entry.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None

    clean = strip_ansi(content)
    if MODEL_MARKER not in clean:
        return None

    match = RE_SET_MODEL.search(clean)
    if not match:
        return None

    alias = match.group(1).strip()
    detail = (match.group(2) or "").strip()
    target = detail or alias
    if not target:
        return None
    return normalize_model_name(target)
