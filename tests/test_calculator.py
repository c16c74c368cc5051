"""Tests for the quota projection engine."""

from datetime import date, datetime, timezone

import pytest

from claude_quota.calculator import (
    format_countdown,
    format_reset_time,
    included_models,
    project_quota,
    quota_status,
    usage_percent,
    weekly_usage_percent,
)
from claude_quota.limits import QuotaLimits
from claude_quota.models import DailyActivity, QuotaStats, SessionWindow

NOW_MS = int(datetime(2026, 2, 10, 12, 0, tzinfo=timezone.utc).timestamp() * 1000)
HOUR_MS = 60 * 60 * 1000
WINDOW_MS = 4 * HOUR_MS


def _window(count=0, oldest=0):
    return SessionWindow(window_start_ms=NOW_MS - WINDOW_MS, window_ms=WINDOW_MS,
                         message_count=count, oldest_timestamp_ms=oldest)


def _stats(**kwargs):
    defaults = dict(
        total_messages=500,
        total_sessions=20,
        model_usage={"claude-sonnet-4-5-20250929": {}, "claude-opus-4-1-20250805": {}},
        daily_activity=[
            DailyActivity(date="2026-02-09", message_count=1200, session_count=5),
            DailyActivity(date="2026-02-01", message_count=900, session_count=3),
            DailyActivity(date="2026-02-03", message_count=800, session_count=2),
        ],
    )
    defaults.update(kwargs)
    return QuotaStats(**defaults)


class TestProjectQuota:
    def test_empty_window_is_fully_charged(self):
        g = project_quota(_window(), None, None, NOW_MS)
        assert g.name == "Claude Code"
        assert g.percentage == 100
        assert g.status == "Healthy"
        assert g.reset_time == "Now"
        assert g.reset_countdown == "Fully Charged"
        assert g.used_count == 0
        assert g.limit_count == 55
        assert g.active_model == "Sonnet 4.5"

    def test_reset_from_oldest_message(self):
        oldest = NOW_MS - HOUR_MS
        g = project_quota(_window(11, oldest), None, None, NOW_MS)
        assert g.percentage == 80
        assert g.reset_countdown == "3h 0m"
        expected = datetime.fromtimestamp((oldest + WINDOW_MS) / 1000).strftime("%H:%M")
        assert g.reset_time == expected

    def test_countdown_truncates(self):
        oldest = NOW_MS - 3 * HOUR_MS - 30 * 60 * 1000 - 59_999
        g = project_quota(_window(1, oldest), None, None, NOW_MS)
        assert g.reset_countdown == "0h 29m"

    def test_sixty_messages_is_critical(self):
        g = project_quota(_window(60, NOW_MS - HOUR_MS), None, None, NOW_MS)
        assert g.used_count == 60
        assert g.used_percentage == 100
        assert g.percentage == 0
        assert g.status == "Critical"

    def test_active_model_included(self):
        g = project_quota(_window(), None, "Opus 4.1", NOW_MS)
        assert g.active_model == "Opus 4.1"
        assert g.included_models == ["Sonnet 4.5", "Opus 4.5", "Haiku 4.5", "Opus 4.1"]

    def test_weekly_details(self):
        g = project_quota(_window(), _stats(), None, NOW_MS)
        assert g.details.label == "Weekly Activity (Local)"
        assert g.details.percentage == 50
        assert g.details.value_str == "50% Used"

    def test_custom_limits(self):
        limits = QuotaLimits(session_window_hours=5, session_message_limit=10, weekly_message_limit=100)
        window = SessionWindow(window_start_ms=NOW_MS - 5 * HOUR_MS, window_ms=5 * HOUR_MS,
                               message_count=5, oldest_timestamp_ms=NOW_MS - HOUR_MS)
        g = project_quota(window, None, None, NOW_MS, limits)
        assert g.percentage == 50
        assert g.limit_count == 10
        assert g.reset_countdown == "4h 0m"

    def test_sentinels_only_when_empty(self):
        g = project_quota(_window(1, NOW_MS - 4 * HOUR_MS + 1), None, None, NOW_MS)
        assert g.reset_time != "Now"
        assert g.reset_countdown == "0h 0m"


class TestUsagePercent:
    def test_basic(self):
        assert usage_percent(11, 55) == 20

    def test_rounds_half_up(self):
        # 1/8 = 12.5%
        assert usage_percent(1, 8) == 13
        # 5/8 = 62.5%
        assert usage_percent(5, 8) == 63

    def test_capped(self):
        assert usage_percent(500, 55) == 100

    def test_zero_limit(self):
        assert usage_percent(1, 0) == 100


class TestQuotaStatus:
    def test_thresholds(self):
        assert quota_status(0) == "Critical"
        assert quota_status(9) == "Critical"
        assert quota_status(10) == "Warning"
        assert quota_status(29) == "Warning"
        assert quota_status(30) == "Healthy"
        assert quota_status(100) == "Healthy"

    @pytest.mark.parametrize("count", range(0, 70))
    def test_status_matches_remaining(self, count):
        g = project_quota(_window(count, NOW_MS - HOUR_MS), None, None, NOW_MS)
        assert 0 <= g.percentage <= 100
        if g.status == "Critical":
            assert g.percentage < 10
        elif g.status == "Warning":
            assert 10 <= g.percentage < 30
        else:
            assert g.status == "Healthy"
            assert g.percentage >= 30


class TestFormatCountdown:
    def test_hours_minutes(self):
        assert format_countdown(2 * HOUR_MS + 15 * 60 * 1000) == "2h 15m"

    def test_negative_is_zero(self):
        assert format_countdown(-5000) == "0h 0m"


class TestFormatResetTime:
    def test_local_clock(self):
        expected = datetime.fromtimestamp(NOW_MS / 1000).strftime("%H:%M")
        assert format_reset_time(NOW_MS) == expected

    def test_unrepresentable_is_now(self):
        assert format_reset_time(NOW_MS * 1_000_000) == "Now"

    def test_projection_survives_unrepresentable_reset(self):
        g = project_quota(_window(1, NOW_MS * 1_000_000), None, None, NOW_MS)
        assert g.used_count == 1
        assert g.reset_time == "Now"


class TestWeeklyUsage:
    def test_sums_last_seven_days(self):
        # cutoff 2026-02-03 is included, 2026-02-01 is not
        assert weekly_usage_percent(_stats(), date(2026, 2, 10), 4000) == 50

    def test_no_stats(self):
        assert weekly_usage_percent(None, date(2026, 2, 10), 4000) == 0

    def test_capped(self):
        stats = _stats(daily_activity=[DailyActivity(date="2026-02-10", message_count=9000)])
        assert weekly_usage_percent(stats, date(2026, 2, 10), 4000) == 100


class TestIncludedModels:
    def test_defaults_always_present(self):
        assert included_models(None, None) == ["Sonnet 4.5", "Opus 4.5", "Haiku 4.5"]
        assert included_models(_stats(model_usage={}), None) == ["Sonnet 4.5", "Opus 4.5", "Haiku 4.5"]

    def test_merges_stats_models(self):
        models = included_models(_stats(), None)
        assert models == ["Sonnet 4.5", "Opus 4.5", "Haiku 4.5", "Opus 4.1"]

    def test_no_duplicates(self):
        models = included_models(_stats(), "Sonnet 4.5")
        assert len(models) == len(set(models))
        assert models.count("Sonnet 4.5") == 1
