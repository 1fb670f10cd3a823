"""Operation log for install, update and uninstall runs.

Writes one JSON object per line with size-based rotation. Logging is
best effort: a failed write never fails the operation being logged.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path

OPLOG_MAX_SIZE_MB = 5
OPLOG_MAX_FILES = 3


class OpEvent:
    """Operation log event type constants."""

    RUN_START = "run.start"
    RUN_END = "run.end"

    DEPENDENCY_CHECK = "dependency.check"
    DEPENDENCY_INSTALL = "dependency.install"

    RELEASE_FETCH = "release.fetch"
    VERSION_DETECT = "version.detect"
    VERSION_COMPARE = "version.compare"

    INSTALL_START = "install.start"
    INSTALL_DONE = "install.done"
    UPDATE_SKIPPED = "update.skipped"
    DOWNLOAD = "download"
    UNINSTALL = "uninstall"

    DESKTOP_ENTRY = "desktop.entry"
    SHELL_INTEGRATION = "shell.integration"
    CONFIG_WRITE = "config.write"


_oplog_enabled = False
_oplog_path: Path | None = None


def enable_op_log(log_path: Path) -> None:
    """Enable the operation log.

    Args:
        log_path: File to append entries to. Its directory is created if missing.
    """
    global _oplog_enabled, _oplog_path

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return
    _oplog_enabled = True
    _oplog_path = log_path


def disable_op_log() -> None:
    """Disable the operation log."""
    global _oplog_enabled, _oplog_path
    _oplog_enabled = False
    _oplog_path = None


def _rotate_logs() -> None:
    if _oplog_path is None or not _oplog_path.exists():
        return

    try:
        size_mb = _oplog_path.stat().st_size / (1024 * 1024)
        if size_mb < OPLOG_MAX_SIZE_MB:
            return

        for i in range(OPLOG_MAX_FILES - 1, 0, -1):
            old_path = _oplog_path.with_name(f"{_oplog_path.name}.{i}")
            new_path = _oplog_path.with_name(f"{_oplog_path.name}.{i + 1}")
            if old_path.exists():
                if i + 1 >= OPLOG_MAX_FILES:
                    old_path.unlink()  # Delete oldest
                else:
                    old_path.rename(new_path)

        _oplog_path.rename(_oplog_path.with_name(f"{_oplog_path.name}.1"))

    except OSError:
        pass  # Best effort rotation


def log_event(
    event_type: str,
    message: str,
    details: dict | None = None,
    success: bool = True,
) -> None:
    """Append an event to the operation log.

    Args:
        event_type: Type of event (use OpEvent constants).
        message: Human-readable description of the event.
        details: Optional additional structured data.
        success: Whether the operation was successful.
    """
    if not _oplog_enabled or _oplog_path is None:
        return

    record = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event_type,
        "message": message,
        "success": success,
        "pid": os.getpid(),
    }
    if details:
        record["details"] = {k: (str(v) if isinstance(v, Path) else v) for k, v in details.items()}

    _rotate_logs()

    try:
        with open(_oplog_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")
    except OSError:
        pass  # Best effort logging


def read_op_log(
    log_path: Path,
    limit: int = 50,
    event_filter: str | None = None,
) -> list[dict]:
    """Read recent operation log entries.

    Args:
        log_path: Log file to read.
        limit: Maximum number of entries to return.
        event_filter: Optional event type prefix to filter by.

    Returns:
        List of log entries (most recent first).
    """
    if not log_path.exists():
        return []

    entries = []
    try:
        with open(log_path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if event_filter is None or entry.get("event", "").startswith(event_filter):
                    entries.append(entry)
    except OSError:
        return []

    return entries[-limit:][::-1]


__all__ = [
    "OpEvent",
    "OPLOG_MAX_SIZE_MB",
    "OPLOG_MAX_FILES",
    "enable_op_log",
    "disable_op_log",
    "log_event",
    "read_op_log",
]
