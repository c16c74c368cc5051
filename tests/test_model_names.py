"""Tests for model name normalization."""

import re

import pytest

from claude_quota.model_names import normalize_model_name


class TestNormalizeModelName:
    def test_sonnet_with_date(self):
        assert normalize_model_name("claude-sonnet-4-5-20250929") == "Sonnet 4.5"

    def test_opus_with_date(self):
        assert normalize_model_name("claude-opus-4-5-20251101") == "Opus 4.5"

    def test_haiku_without_date(self):
        assert normalize_model_name("claude-haiku-4-5") == "Haiku 4.5"

    def test_version_is_dotted(self):
        result = normalize_model_name("claude-sonnet-4-5")
        assert result != "Sonnet 4 5"
        assert result == "Sonnet 4.5"

    def test_removes_marketing_suffix(self):
        assert normalize_model_name("claude-sonnet-4-5 · Best For Everyday Tasks") == "Sonnet 4.5"

    def test_picker_label(self):
        assert normalize_model_name("Sonnet 4.5 · Best for everyday tasks") == "Sonnet 4.5"

    def test_version_before_name(self):
        assert normalize_model_name("claude-3-5-sonnet-20241022") == "3.5 Sonnet"

    def test_bare_alias(self):
        assert normalize_model_name("opus") == "Opus"

    def test_already_display_name(self):
        assert normalize_model_name("Opus 4.5") == "Opus 4.5"

    def test_preserves_inner_case(self):
        assert normalize_model_name("claude-opus-4-6-1M") == "Opus 4.6.1M"

    def test_underscore_separator(self):
        assert normalize_model_name("claude_haiku_4_5") == "Claude Haiku 4.5"

    def test_empty(self):
        assert normalize_model_name("") == ""


@pytest.mark.parametrize("name", ["sonnet", "opus", "haiku", "mythos"])
@pytest.mark.parametrize("major,minor", [(3, 5), (4, 0), (4, 5), (9, 9)])
@pytest.mark.parametrize("date", ["", "-20250929"])
def test_versioned_ids(name, major, minor, date):
    result = normalize_model_name(f"claude-{name}-{major}-{minor}{date}")
    assert result == f"{name.capitalize()} {major}.{minor}"
    assert not re.search(r"\d\s+\d", result)


@pytest.mark.parametrize("raw_id", [
    "claude-sonnet-4-5-20250929",
    "claude-haiku-4-5",
    "claude-3-7-sonnet-20250219",
    "claude-sonnet-4-5 · Best For Everyday Tasks",
    "claude-opus-4-1-2-20250805",
    "gpt_4_turbo",
    "opus",
    "Default",
    "",
])
def test_idempotent(raw_id):
    once = normalize_model_name(raw_id)
    assert normalize_model_name(once) == once
