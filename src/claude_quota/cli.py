"""CLI entry point for claude-quota."""

from __future__ import annotations

import json
import logging
import os
import time

import click
from rich.console import Console
from rich.logging import RichHandler

from .config import (
    build_default_config,
    config_exists,
    get_claude_dir,
    get_limits_from_config,
    get_notification_threshold,
    get_status_format,
    get_theme,
    get_update_interval,
    load_config,
    notifications_enabled,
    save_config,
    STATUS_FORMATS,
    THEMES,
)
from .dashboard import QuotaMonitor, render_dashboard, render_status_line
from .service import QuotaService

console = Console()


def _build_service(ctx: click.Context) -> QuotaService:
    config = ctx.obj["config"]
    return QuotaService(
        claude_dir=ctx.obj["claude_dir"] or get_claude_dir(config),
        workspace_root=ctx.obj["workspace"],
        limits=get_limits_from_config(config),
    )


@click.group(invoke_without_command=True)
@click.option("--claude-dir", type=click.Path(file_okay=False), default=None,
              help="Claude Code data directory (default: ~/.claude)")
@click.option("--workspace", type=click.Path(file_okay=False), default=None,
              help="Project root to use when history names no project (default: cwd)")
@click.option("-v", "--verbose", is_flag=True, help="Log diagnostics to stderr")
@click.pass_context
def main(ctx, claude_dir, workspace, verbose):
    """Claude Code Quota: estimate remaining quota from local Claude Code logs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config()
    ctx.obj["claude_dir"] = claude_dir
    ctx.obj["workspace"] = workspace or os.getcwd()

    if ctx.invoked_subcommand is None:
        ctx.invoke(dashboard)


@main.command()
@click.option("--theme", type=click.Choice(THEMES), default=None, help="Color theme")
@click.pass_context
def dashboard(ctx, theme):
    """Show the quota dashboard (default command)."""
    service = _build_service(ctx)
    groups = service.get_realtime_quota()
    stats = service.get_local_stats()
    if stats is None:
        console.print(f"[yellow]No stats cache found in {service.claude_dir}; weekly figures are empty.[/yellow]")
    render_dashboard(groups, stats, theme or get_theme(ctx.obj["config"]))


@main.command()
@click.option("--format", "display_format", type=click.Choice(STATUS_FORMATS), default=None,
              help="Status text format")
@click.pass_context
def status(ctx, display_format):
    """Show a quick one-line quota status."""
    config = ctx.obj["config"]
    group = _build_service(ctx).get_realtime_quota()[0]
    render_status_line(group, display_format or get_status_format(config), get_theme(config))


@main.command()
@click.option("--interval", type=int, default=None, help="Refresh interval in milliseconds")
@click.pass_context
def watch(ctx, interval):
    """Refresh the status line on a timer and warn when quota runs low."""
    config = ctx.obj["config"]
    interval_ms = interval or get_update_interval(config)
    monitor = QuotaMonitor(
        _build_service(ctx),
        get_status_format(config),
        get_notification_threshold(config),
        notifications_enabled(config),
    )
    theme = get_theme(config)

    try:
        while True:
            group, notify = monitor.refresh()
            render_status_line(group, monitor.display_format, theme)
            if notify:
                console.bell()
                console.print(f"[bold red]Claude Code quota is low ({group.percentage}%).[/bold red]")
            time.sleep(interval_ms / 1000)
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@main.command("json")
@click.pass_context
def json_command(ctx):
    """Print cached stats and the realtime quota as JSON."""
    service = _build_service(ctx)
    payload = {
        "stats": service.get_raw_stats(),
        "realtime": [g.to_dict() for g in service.get_realtime_quota()],
    }
    click.echo(json.dumps(payload, indent=2))


@main.command()
@click.pass_context
def stats(ctx):
    """Print the cached Claude Code stats only."""
    service = _build_service(ctx)
    local = service.get_local_stats()
    if local is None:
        console.print(f"[red]No stats cache found in {service.claude_dir}[/red]")
        return
    click.echo(json.dumps(local.to_dict(), indent=2))


@main.command("config")
@click.pass_context
def config_command(ctx):
    """Write a default config file if missing and show the settings in effect."""
    config = ctx.obj["config"]
    if not config_exists():
        config = build_default_config(ctx.obj["claude_dir"])
        save_config(config)
        console.print("[green]✓ Wrote default config[/green]")

    limits = get_limits_from_config(config)
    console.print(f"  Claude dir: [cyan]{ctx.obj['claude_dir'] or get_claude_dir(config)}[/cyan]")
    console.print(f"  Update interval: [cyan]{get_update_interval(config)} ms[/cyan]")
    console.print(f"  Status format: [cyan]{get_status_format(config)}[/cyan]")
    console.print(f"  Theme: [cyan]{get_theme(config)}[/cyan]")
    console.print(f"  Notifications: [cyan]{'on' if notifications_enabled(config) else 'off'}[/cyan]"
                  f" below [cyan]{get_notification_threshold(config)}%[/cyan]")
    console.print(f"  Session window: [cyan]{limits.session_window_hours}h[/cyan],"
                  f" est. limit [cyan]{limits.session_message_limit}[/cyan] msgs")
    console.print(f"  Weekly est. limit: [cyan]{limits.weekly_message_limit}[/cyan] msgs")


if __name__ == "__main__":
    main()
