"""Quota projection engine: turn a session window and stats into a QuotaGroup."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone

from .limits import (
    CRITICAL_BELOW,
    DEFAULT_ACTIVE_MODEL,
    DEFAULT_MODELS,
    PRODUCT_NAME,
    WARNING_BELOW,
    WEEKLY_LOOKBACK_DAYS,
    QuotaLimits,
)
from .model_names import normalize_model_name
from .models import (
    STATUS_CRITICAL,
    STATUS_HEALTHY,
    STATUS_WARNING,
    QuotaDetails,
    QuotaGroup,
    QuotaStats,
    SessionWindow,
)

RESET_NOW = "Now"
FULLY_CHARGED = "Fully Charged"
WEEKLY_LABEL = "Weekly Activity (Local)"


def project_quota(window: SessionWindow, stats: QuotaStats | None,
                  active_model: str | None, now_ms: int,
                  limits: QuotaLimits | None = None) -> QuotaGroup:
    """Project remaining session quota from the messages in the window.

    The reset instant is when the oldest message in the window ages out. With
    no messages the quota is full and the reset fields show sentinels instead
    of a time.
    """
    limits = limits or QuotaLimits()
    count = window.message_count

    used_pct = usage_percent(count, limits.session_message_limit)
    remaining = 100 - used_pct

    if count == 0:
        reset_time, countdown = RESET_NOW, FULLY_CHARGED
    else:
        reset_ms = window.oldest_timestamp_ms + window.window_ms
        reset_time = format_reset_time(reset_ms)
        countdown = format_countdown(reset_ms - now_ms)

    now = datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc)
    weekly_pct = weekly_usage_percent(stats, now.date(), limits.weekly_message_limit)

    return QuotaGroup(
        name=PRODUCT_NAME,
        percentage=remaining,
        reset_time=reset_time,
        reset_countdown=countdown,
        status=quota_status(remaining),
        included_models=included_models(stats, active_model),
        active_model=active_model or DEFAULT_ACTIVE_MODEL,
        used_count=count,
        limit_count=limits.session_message_limit,
        details=QuotaDetails(
            label=WEEKLY_LABEL,
            percentage=weekly_pct,
            value_str=f"{weekly_pct}% Used",
        ),
    )


def usage_percent(used: int, limit: int) -> int:
    """Percent of ``limit`` used, capped at 100 and rounded half up."""
    if limit <= 0:
        return 100
    return _round_half_up(min(100.0, used / limit * 100))


def quota_status(remaining_pct: int) -> str:
    if remaining_pct < CRITICAL_BELOW:
        return STATUS_CRITICAL
    if remaining_pct < WARNING_BELOW:
        return STATUS_WARNING
    return STATUS_HEALTHY


def format_reset_time(reset_ms: int) -> str:
    """Local wall-clock ``HH:MM`` of the reset, or "Now" if it can't be shown."""
    try:
        return datetime.fromtimestamp(reset_ms / 1000).strftime("%H:%M")
    except (OverflowError, OSError, ValueError):
        return RESET_NOW


def format_countdown(diff_ms: int) -> str:
    """Format a duration as ``"Xh Ym"``, truncating partial minutes."""
    diff_ms = max(0, diff_ms)
    hours = diff_ms // (60 * 60 * 1000)
    minutes = (diff_ms % (60 * 60 * 1000)) // (60 * 1000)
    return f"{int(hours)}h {int(minutes)}m"


def weekly_usage_percent(stats: QuotaStats | None, today,
                         weekly_limit: int) -> int:
    """Percent of the weekly estimate used over the last seven days.

    Days are compared as ISO ``YYYY-MM-DD`` strings, which sort in calendar
    order.
    """
    if stats is None:
        return 0
    cutoff = (today - timedelta(days=WEEKLY_LOOKBACK_DAYS)).isoformat()
    weekly_count = sum(d.message_count for d in stats.daily_activity if d.date >= cutoff)
    return usage_percent(weekly_count, weekly_limit)


def included_models(stats: QuotaStats | None, active_model: str | None) -> list[str]:
    """Known models first, then models seen in stats, then the active one."""
    names = list(DEFAULT_MODELS)
    if stats is not None:
        names.extend(normalize_model_name(raw_id) for raw_id in stats.model_usage)
    if active_model:
        names.append(active_model)
    return list(dict.fromkeys(names))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
