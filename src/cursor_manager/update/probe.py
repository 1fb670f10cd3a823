"""Detection of the installed Cursor version.

Tries, in order: the sidecar version file, the ``file`` command's view of
the AppImage, and a raw scan of the AppImage bytes. Never raises.
"""

import re
import subprocess
from pathlib import Path
from typing import Optional

from cursor_manager.update.version import InstalledVersion, Version, VersionStatus, parse_version

# AppImages embed their build name, e.g. "Cursor-0.42.0-x86_64"
VERSION_PATTERN = r"Cursor-(\d+\.\d+\.\d+)"
_TEXT_PATTERN = re.compile(VERSION_PATTERN)
_BYTES_PATTERN = re.compile(VERSION_PATTERN.encode())

SCAN_CHUNK_SIZE = 1024 * 1024
# Overlap between chunks so a match straddling a boundary is not lost
SCAN_OVERLAP = 64


def read_version_file(version_file: Path) -> Optional[Version]:
    """Read and parse the sidecar version file.

    Returns:
        Version, or None if the file is missing, empty, unreadable or unparseable.
    """
    try:
        content = version_file.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError):
        return None
    return parse_version(content) if content else None


def version_from_file_command(app_path: Path) -> Optional[Version]:
    """Extract the version from the output of ``file <appimage>``."""
    try:
        result = subprocess.run(
            ["file", str(app_path)],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return None
    if result.returncode != 0:
        return None
    match = _TEXT_PATTERN.search(result.stdout)
    return parse_version(match.group(1)) if match else None


def version_from_binary(app_path: Path, chunk_size: int = SCAN_CHUNK_SIZE) -> Optional[Version]:
    """Scan the AppImage bytes for the first embedded build name."""
    tail = b""
    try:
        with open(app_path, "rb") as f:
            while True:
                chunk = f.read(chunk_size)
                if not chunk:
                    return None
                window = tail + chunk
                match = _BYTES_PATTERN.search(window)
                if match:
                    return parse_version(match.group(1).decode("ascii"))
                tail = window[-SCAN_OVERLAP:]
    except OSError:
        return None


def detect_installed_version(app_path: Path, version_file: Path) -> InstalledVersion:
    """Detect the installed version.

    Args:
        app_path: Path to the installed AppImage.
        version_file: Path to the sidecar version file.

    Returns:
        Version if detected, VersionStatus.NOT_INSTALLED if the AppImage is
        missing, VersionStatus.UNKNOWN if it exists but no method succeeded.
    """
    if not app_path.is_file():
        return VersionStatus.NOT_INSTALLED

    for method in (
        lambda: read_version_file(version_file),
        lambda: version_from_file_command(app_path),
        lambda: version_from_binary(app_path),
    ):
        version = method()
        if version is not None:
            return version

    return VersionStatus.UNKNOWN


__all__ = [
    "VERSION_PATTERN",
    "read_version_file",
    "version_from_file_command",
    "version_from_binary",
    "detect_installed_version",
]
