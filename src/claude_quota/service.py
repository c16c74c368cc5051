"""Top-level quota service: reads Claude Code's local files and projects quota."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from .active_model import resolve_active_model
from .calculator import project_quota
from .config import get_default_claude_dir
from .limits import HISTORY_CHUNK_BYTES, QuotaLimits
from .models import QuotaGroup, QuotaStats, SessionWindow
from .session_window import aggregate_session_window

logger = logging.getLogger(__name__)


class QuotaService:
    """Estimate remaining Claude Code quota from files under ~/.claude.

    Every call rereads the files; nothing is cached between calls. Failures
    in one step are logged and replaced by that step's empty result so a
    caller always gets a quota group back.
    """

    def __init__(self, claude_dir: str | Path | None = None,
                 workspace_root: str | None = None,
                 limits: QuotaLimits | None = None):
        self.claude_dir = Path(claude_dir) if claude_dir else Path(get_default_claude_dir())
        self.stats_path = self.claude_dir / "stats-cache.json"
        self.history_path = self.claude_dir / "history.jsonl"
        self.projects_dir = self.claude_dir / "projects"
        self.workspace_root = workspace_root
        self.limits = limits or QuotaLimits()

    def get_local_stats(self) -> QuotaStats | None:
        """Return the cached stats snapshot, or None if missing or malformed."""
        data = self._read_stats_json()
        if data is None:
            return None
        return QuotaStats.from_dict(data)

    def get_raw_stats(self) -> dict | None:
        """Return stats-cache.json exactly as Claude Code wrote it."""
        return self._read_stats_json()

    def get_active_model(self) -> str | None:
        try:
            return resolve_active_model(self.claude_dir, self.workspace_root)
        except Exception:
            logger.exception("Error finding active model")
            return None

    def get_session_window(self, now_ms: int) -> SessionWindow:
        window_ms = self.limits.session_window_ms
        try:
            return aggregate_session_window(self.history_path, now_ms, window_ms,
                                            HISTORY_CHUNK_BYTES)
        except Exception:
            logger.exception("Error reading %s", self.history_path)
            return SessionWindow(window_start_ms=now_ms - window_ms, window_ms=window_ms)

    def get_realtime_quota(self, now_ms: int | None = None) -> list[QuotaGroup]:
        """Compute the current quota groups (currently always one)."""
        if now_ms is None:
            now_ms = int(time.time() * 1000)

        stats = self.get_local_stats()
        active_model = self.get_active_model()
        window = self.get_session_window(now_ms)

        return [project_quota(window, stats, active_model, now_ms, self.limits)]

    def _read_stats_json(self) -> dict | None:
        if not self.stats_path.is_file():
            return None
        try:
            data = json.loads(self.stats_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Error reading %s: %s", self.stats_path, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.stats_path)
            return None
        return data
