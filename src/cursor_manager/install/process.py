"""Advisory check for a running Cursor process.

The check is a point-in-time scan, not a lock.
"""

import os
import subprocess
from pathlib import Path


def _scan_proc(pattern: str, proc_dir: Path = Path("/proc")) -> bool:
    """Search /proc/<pid>/cmdline for pattern, like ``pgrep -f``."""
    own_pid = str(os.getpid())
    try:
        entries = list(proc_dir.iterdir())
    except OSError:
        return False
    for entry in entries:
        if not entry.name.isdigit() or entry.name == own_pid:
            continue
        try:
            cmdline = (entry / "cmdline").read_bytes()
        except OSError:
            continue
        if pattern.encode() in cmdline.replace(b"\0", b" "):
            return True
    return False


def is_process_running(pattern: str) -> bool:
    """Check whether any process command line contains pattern.

    Uses ``pgrep -f`` and falls back to scanning /proc when pgrep is
    unavailable.
    """
    try:
        result = subprocess.run(
            ["pgrep", "-f", pattern],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, OSError, subprocess.SubprocessError):
        return _scan_proc(pattern)
    # pgrep: 0 = match, 1 = no match, anything else = error
    if result.returncode == 0:
        return True
    if result.returncode == 1:
        return False
    return _scan_proc(pattern)


__all__ = ["is_process_running"]
