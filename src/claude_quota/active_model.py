"""Find which model the user last switched to in their active project."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .limits import HISTORY_TAIL_BYTES, PROJECT_LOG_TAIL_BYTES
from .log_parser import extract_model_marker, parse_entry
from .tail_reader import read_tail

logger = logging.getLogger(__name__)

RE_PATH_SEPARATOR = re.compile(r"[\\/]")


def normalize_project_path(project_root: str) -> str:
    """Convert a project path into Claude Code's per-project directory name.

    ``/Users/foo/bar`` -> ``-Users-foo-bar``; ``C:\\Users\\foo`` ->
    ``-C:-Users-foo``. Only slashes are replaced, the drive colon stays.
    """
    safe_name = RE_PATH_SEPARATOR.sub("-", project_root)
    if not safe_name.startswith("-"):
        safe_name = "-" + safe_name
    return safe_name


def get_last_active_project(history_path: str | Path) -> str | None:
    """Return the project path of the newest complete line in history.jsonl."""
    content = read_tail(history_path, HISTORY_TAIL_BYTES)
    if not content:
        return None

    for line in reversed(content.strip().splitlines()):
        entry = parse_entry(line)
        if entry is None:
            continue
        project = entry.get("project")
        return project if isinstance(project, str) and project else None
    return None


def find_latest_project_log(project_dir: str | Path) -> Path | None:
    """Return the most recently modified .jsonl log in a project directory."""
    project_dir = Path(project_dir)
    if not project_dir.is_dir():
        return None

    logs = [p for p in project_dir.glob("*.jsonl") if p.is_file()]
    if not logs:
        return None
    return max(logs, key=lambda p: p.stat().st_mtime)


def find_model_in_log(log_path: str | Path) -> str | None:
    """Scan a project log tail newest-first for the last "Set model to" marker."""
    content = read_tail(log_path, PROJECT_LOG_TAIL_BYTES)
    if not content:
        return None

    for line in reversed(content.split("\n")):
        entry = parse_entry(line)
        if entry is None:
            continue
        model = extract_model_marker(entry)
        if model:
            return model
    return None


def resolve_active_model(claude_dir: str | Path,
                         workspace_root: str | None = None) -> str | None:
    """Resolve the display name of the active model, or None if unknown.

    The active project comes from the last history entry, falling back to
    ``workspace_root`` when history has none.
    """
    claude_dir = Path(claude_dir)
    project_root = get_last_active_project(claude_dir / "history.jsonl") or workspace_root
    if not project_root:
        return None

    project_dir = claude_dir / "projects" / normalize_project_path(project_root)
    latest_log = find_latest_project_log(project_dir)
    if latest_log is None:
        logger.debug("No project logs in %s", project_dir)
        return None

    return find_model_in_log(latest_log)
