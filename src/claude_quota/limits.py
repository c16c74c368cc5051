"""Heuristic quota limits and fixed display defaults.

None of these numbers come from Anthropic. They are estimates observed from
usage (a message sent at 21:04 became available again around 01:00) and can
be overridden from the config file.
"""

from __future__ import annotations

from dataclasses import dataclass

PRODUCT_NAME = "Claude Code"

# ── Estimated limits ────────────────────────────────────────────────────────

SESSION_WINDOW_HOURS = 4
SESSION_MESSAGE_LIMIT = 55
WEEKLY_MESSAGE_LIMIT = 4000
WEEKLY_LOOKBACK_DAYS = 7

# ── Models ──────────────────────────────────────────────────────────────────

DEFAULT_MODELS: list[str] = ["Sonnet 4.5", "Opus 4.5", "Haiku 4.5"]
DEFAULT_ACTIVE_MODEL = "Sonnet 4.5"

# ── Health thresholds (remaining %) ─────────────────────────────────────────

CRITICAL_BELOW = 10
WARNING_BELOW = 30

# ── Tail read caps ──────────────────────────────────────────────────────────

HISTORY_TAIL_BYTES = 1024
PROJECT_LOG_TAIL_BYTES = 100 * 1024
HISTORY_CHUNK_BYTES = 64 * 1024


@dataclass
class QuotaLimits:
    """Capacity assumptions used when projecting quota."""

    session_window_hours: float = SESSION_WINDOW_HOURS
    session_message_limit: int = SESSION_MESSAGE_LIMIT
    weekly_message_limit: int = WEEKLY_MESSAGE_LIMIT

    @property
    def session_window_ms(self) -> int:
        return int(self.session_window_hours * 60 * 60 * 1000)
