"""Display components for terminal output.

Modules:
    colors: Terminal color handling, icons and status messages
    spinner: Animated loading spinner
    progress: Download progress bar rendering
"""

from cursor_manager.display.colors import (
    Colors,
    Icons,
    disable_colors,
    error,
    info,
    init_colors,
    success,
    supports_color,
    warning,
)
from cursor_manager.display.progress import format_size, make_progress_bar, print_download_progress
from cursor_manager.display.spinner import Spinner

__all__ = [
    "Colors",
    "Icons",
    "supports_color",
    "disable_colors",
    "init_colors",
    "success",
    "info",
    "warning",
    "error",
    "Spinner",
    "make_progress_bar",
    "format_size",
    "print_download_progress",
]
