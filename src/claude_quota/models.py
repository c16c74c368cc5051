"""Data models for Claude Code quota estimation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

STATUS_HEALTHY = "Healthy"
STATUS_WARNING = "Warning"
STATUS_CRITICAL = "Critical"


@dataclass
class DailyActivity:
    """One day of activity from the stats cache."""

    date: str  # ISO day, e.g. "2026-02-10"
    message_count: int = 0
    session_count: int = 0


@dataclass
class QuotaStats:
    """Read-only snapshot of Claude Code's stats-cache.json."""

    total_messages: int = 0
    total_sessions: int = 0
    model_usage: dict = field(default_factory=dict)  # raw model id -> usage info
    daily_activity: list[DailyActivity] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> QuotaStats:
        """Build from the cache JSON, skipping fields of the wrong shape."""
        model_usage = data.get("modelUsage")
        if not isinstance(model_usage, dict):
            model_usage = {}

        daily: list[DailyActivity] = []
        raw_daily = data.get("dailyActivity")
        if isinstance(raw_daily, list):
            for row in raw_daily:
                if not isinstance(row, dict) or not isinstance(row.get("date"), str):
                    continue
                daily.append(DailyActivity(
                    date=row["date"],
                    message_count=_as_int(row.get("messageCount")),
                    session_count=_as_int(row.get("sessionCount")),
                ))

        return cls(
            total_messages=_as_int(data.get("totalMessages")),
            total_sessions=_as_int(data.get("totalSessions")),
            model_usage=model_usage,
            daily_activity=daily,
        )

    def to_dict(self) -> dict:
        return {
            "totalMessages": self.total_messages,
            "totalSessions": self.total_sessions,
            "modelUsage": self.model_usage,
            "dailyActivity": [
                {"date": d.date, "messageCount": d.message_count, "sessionCount": d.session_count}
                for d in self.daily_activity
            ],
        }


@dataclass
class SessionWindow:
    """Quota-consuming messages found in the trailing session window."""

    window_start_ms: int
    window_ms: int
    message_count: int = 0
    oldest_timestamp_ms: int = 0  # only meaningful when message_count > 0

    @property
    def found(self) -> bool:
        return self.message_count > 0


@dataclass
class QuotaDetails:
    """Secondary figure shown under a quota group (weekly rollup)."""

    label: str
    percentage: int
    value_str: str

    def to_dict(self) -> dict:
        return {"label": self.label, "percentage": self.percentage, "valueStr": self.value_str}


@dataclass
class QuotaGroup:
    """Projected quota for one product, handed to the renderers."""

    name: str
    percentage: int  # remaining, not used
    reset_time: str
    reset_countdown: str
    status: str
    included_models: list[str] = field(default_factory=list)
    active_model: str = ""
    used_count: int = 0
    limit_count: int = 0
    details: Optional[QuotaDetails] = None

    @property
    def used_percentage(self) -> int:
        return 100 - self.percentage

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "percentage": self.percentage,
            "resetTime": self.reset_time,
            "resetCountdown": self.reset_countdown,
            "status": self.status,
            "includedModels": list(self.included_models),
            "activeModel": self.active_model,
            "usedCount": self.used_count,
            "limitCount": self.limit_count,
        }
        if self.details is not None:
            data["details"] = self.details.to_dict()
        return data


def _as_int(value) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0
