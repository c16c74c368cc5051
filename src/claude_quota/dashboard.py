"""Rich terminal dashboard and status line for Claude Code quota."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .models import STATUS_CRITICAL, STATUS_WARNING, QuotaGroup, QuotaStats
from .service import QuotaService

console = Console()

THEME_STYLES: dict[str, dict[str, str]] = {
    "dark": {
        "accent": "bold white",
        "border": "bright_black",
        "healthy": "green",
        "warning": "yellow",
        "critical": "red",
        "muted": "dim",
    },
    "light": {
        "accent": "bold black",
        "border": "blue",
        "healthy": "dark_green",
        "warning": "dark_orange",
        "critical": "red3",
        "muted": "grey42",
    },
}

STATUS_ICON = "●"


def progress_bar(percentage: int, width: int = 10) -> str:
    filled = round(width * max(0, min(percentage, 100)) / 100)
    return "█" * filled + "░" * (width - filled)


def format_status_text(group: QuotaGroup, display_format: str) -> str:
    """Build the one-line status text for the given display format."""
    if display_format == "percentage":
        return f"{group.percentage}%"
    if display_format == "percentage-with-icon":
        return f"{STATUS_ICON} {group.percentage}%"
    if display_format == "countdown":
        return f"{STATUS_ICON} {group.reset_countdown}"
    if display_format == "full":
        return f"{STATUS_ICON} {group.percentage}% → {group.reset_countdown}"
    return f"{STATUS_ICON} {group.name}: {group.percentage}%"


def should_notify(previous_warned: bool, percentage: int, threshold: int,
                  enabled: bool = True) -> tuple[bool, bool]:
    """Decide whether to warn about low quota.

    Warns once when remaining quota drops below ``threshold`` and re-arms once
    it recovers. Returns (notify, warned).
    """
    if enabled and percentage < threshold:
        if previous_warned:
            return False, True
        return True, True
    return False, False


def _status_style(status: str, theme: str) -> str:
    styles = THEME_STYLES.get(theme, THEME_STYLES["dark"])
    if status == STATUS_CRITICAL:
        return styles["critical"]
    if status == STATUS_WARNING:
        return styles["warning"]
    return styles["healthy"]


def render_dashboard(groups: list[QuotaGroup], stats: QuotaStats | None = None,
                     theme: str = "dark") -> None:
    """Render every quota group, then the cached activity summary."""
    console.print()
    for group in groups:
        _render_group_panel(group, theme)
        console.print()
    if stats is not None:
        _render_activity_table(stats, theme)
        console.print()


def render_status_line(group: QuotaGroup, display_format: str,
                       theme: str = "dark") -> None:
    """Render a single-line status summary."""
    color = _status_style(group.status, theme)
    text = format_status_text(group, display_format)
    console.print(
        f"[{color}]{text}[/{color}] │ "
        f"{progress_bar(group.percentage)} │ "
        f"Used: {group.used_count} msgs ({group.used_percentage}%) │ "
        f"Reset: {group.reset_time} ({group.reset_countdown})",
        highlight=False,
    )


def _render_group_panel(group: QuotaGroup, theme: str) -> None:
    styles = THEME_STYLES.get(theme, THEME_STYLES["dark"])
    color = _status_style(group.status, theme)
    accent = styles["accent"]
    muted = styles["muted"]

    lines = []
    lines.append(f"[{accent}]Remaining:[/{accent}] [{color}]{group.percentage}%[/{color}] ({group.status})")
    lines.append(f"  [{color}]{progress_bar(group.percentage, 40)}[/{color}]")
    lines.append("")
    # The limit is an estimate, only the used count is certain
    lines.append(f"[{accent}]Used:[/{accent}] {group.used_count} msgs, {group.used_percentage}% "
                 f"[{muted}](est. limit {group.limit_count})[/{muted}]")
    lines.append(f"[{accent}]Resets:[/{accent}] {group.reset_time} [{muted}]({group.reset_countdown})[/{muted}]")
    lines.append(f"[{accent}]Active Model:[/{accent}] {escape(group.active_model)}")

    models = ", ".join(
        f"[{accent}]{escape(m)}[/{accent}]" if m == group.active_model else escape(m)
        for m in group.included_models
    )
    lines.append(f"[{accent}]Models:[/{accent}] {models}")

    if group.details is not None:
        d = group.details
        lines.append("")
        lines.append(f"[{accent}]{d.label}:[/{accent}] {d.value_str}")
        lines.append(f"  [{muted}]{progress_bar(d.percentage, 40)}[/{muted}]")

    panel = Panel(
        "\n".join(lines),
        title=f"[{accent}]{group.name} Quota[/{accent}]",
        border_style=styles["border"],
    )
    console.print(panel)


def _render_activity_table(stats: QuotaStats, theme: str) -> None:
    """Render totals and the last seven days of cached activity."""
    styles = THEME_STYLES.get(theme, THEME_STYLES["dark"])

    table = Table(
        title=f"Local Activity ({stats.total_messages} msgs, {stats.total_sessions} sessions)",
        show_lines=True,
        border_style=styles["border"],
    )
    table.add_column("Date", style=styles["accent"])
    table.add_column("Messages", justify="right")
    table.add_column("Sessions", justify="right")

    recent = sorted(stats.daily_activity, key=lambda d: d.date)[-7:]
    for d in recent:
        table.add_row(d.date, str(d.message_count), str(d.session_count))

    console.print(table)


class QuotaMonitor:
    """Holds presentation state between refreshes: last status text and warned flag."""

    def __init__(self, service: QuotaService, display_format: str,
                 notification_threshold: int, notifications: bool = True):
        self.service = service
        self.display_format = display_format
        self.notification_threshold = notification_threshold
        self.notifications = notifications
        self.status_text = ""
        self.warned = False

    def refresh(self) -> tuple[QuotaGroup, bool]:
        """Recompute quota. Returns the group and whether to show a warning."""
        group = self.service.get_realtime_quota()[0]
        self.status_text = format_status_text(group, self.display_format)
        notify, self.warned = should_notify(
            self.warned, group.percentage, self.notification_threshold, self.notifications,
        )
        return group, notify
