"""Version detection and update decisions.

Modules:
    version: Version triple, sentinels and parsing
    probe: Installed version detection
    release: Cursor download API client
    checker: Version comparison and update decision
"""

from cursor_manager.update.checker import (
    Comparison,
    UpdateDecision,
    compare_versions,
    decide_update,
)
from cursor_manager.update.probe import detect_installed_version
from cursor_manager.update.release import ReleaseInfo, fetch_latest, parse_release
from cursor_manager.update.version import InstalledVersion, Version, VersionStatus, parse_version

__all__ = [
    "Version",
    "VersionStatus",
    "InstalledVersion",
    "parse_version",
    "detect_installed_version",
    "ReleaseInfo",
    "fetch_latest",
    "parse_release",
    "Comparison",
    "UpdateDecision",
    "compare_versions",
    "decide_update",
]
