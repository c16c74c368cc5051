"""Load, save, and read user configuration."""

from __future__ import annotations

from pathlib import Path

import yaml

from .limits import (
    SESSION_MESSAGE_LIMIT,
    SESSION_WINDOW_HOURS,
    WEEKLY_MESSAGE_LIMIT,
    QuotaLimits,
)

CONFIG_DIR = Path.home() / ".claude-quota"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

STATUS_FORMATS = (
    "percentage",
    "percentage-with-icon",
    "percentage-with-progress",
    "countdown",
    "full",
)
THEMES = ("dark", "light")

DEFAULT_UPDATE_INTERVAL_MS = 30000
DEFAULT_NOTIFICATION_THRESHOLD = 30
DEFAULT_STATUS_FORMAT = "percentage-with-progress"
DEFAULT_THEME = "dark"


def get_default_claude_dir() -> str:
    """Return the directory Claude Code keeps its logs and stats in."""
    return str(Path.home() / ".claude")


def config_exists() -> bool:
    return CONFIG_FILE.exists()


def load_config() -> dict:
    """Load config from YAML file. Returns empty dict if not found."""
    if not CONFIG_FILE.exists():
        return {}
    with open(CONFIG_FILE, "r") as f:
        return yaml.safe_load(f) or {}


def save_config(config: dict) -> None:
    """Save config to YAML file, creating directory if needed."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    with open(CONFIG_FILE, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def get_claude_dir(config: dict) -> str:
    """Get the Claude Code data directory, falling back to ~/.claude."""
    return config.get("claude_dir") or get_default_claude_dir()


def get_update_interval(config: dict) -> int:
    """Polling interval in milliseconds."""
    return config.get("update_interval", DEFAULT_UPDATE_INTERVAL_MS)


def get_notification_threshold(config: dict) -> int:
    """Remaining % below which a low-quota warning is shown."""
    return config.get("notification_threshold", DEFAULT_NOTIFICATION_THRESHOLD)


def notifications_enabled(config: dict) -> bool:
    return bool(config.get("enable_notifications", True))


def get_status_format(config: dict) -> str:
    fmt = config.get("status_bar_format", DEFAULT_STATUS_FORMAT)
    return fmt if fmt in STATUS_FORMATS else DEFAULT_STATUS_FORMAT


def get_theme(config: dict) -> str:
    theme = config.get("theme", DEFAULT_THEME)
    return theme if theme in THEMES else DEFAULT_THEME


def get_limits_from_config(config: dict) -> QuotaLimits:
    """Build quota limits, applying any overrides from config."""
    return QuotaLimits(
        session_window_hours=config.get("session_window_hours", SESSION_WINDOW_HOURS),
        session_message_limit=config.get("session_message_limit", SESSION_MESSAGE_LIMIT),
        weekly_message_limit=config.get("weekly_message_limit", WEEKLY_MESSAGE_LIMIT),
    )


def build_default_config(claude_dir: str | None = None) -> dict:
    """Build a default config dict."""
    return {
        "claude_dir": claude_dir or get_default_claude_dir(),
        "update_interval": DEFAULT_UPDATE_INTERVAL_MS,
        "notification_threshold": DEFAULT_NOTIFICATION_THRESHOLD,
        "enable_notifications": True,
        "status_bar_format": DEFAULT_STATUS_FORMAT,
        "theme": DEFAULT_THEME,
        "session_window_hours": SESSION_WINDOW_HOURS,
        "session_message_limit": SESSION_MESSAGE_LIMIT,
        "weekly_message_limit": WEEKLY_MESSAGE_LIMIT,
    }
