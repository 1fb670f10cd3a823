"""Cursor Manager - install, update and remove the Cursor AI IDE on Linux.

This package detects the installed Cursor AppImage version, queries the
Cursor download API for the latest release, and drives installation,
updates and removal together with desktop and shell integration.
"""

from cursor_manager._version import __version__
from cursor_manager.cli import create_parser, main, print_version

__all__ = [
    "__version__",
    "create_parser",
    "main",
    "print_version",
]
