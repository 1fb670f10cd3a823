"""Terminal color handling and detection.

Provides ANSI color codes and status icons for terminal output with
automatic detection of color support.
"""

import os
import sys


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    MAGENTA = "\033[95m"
    BAR_FILL = "\033[94m"
    BAR_EMPTY = "\033[90m"


class Icons:
    """Status icons used in front of messages."""

    CHECK = "✓"
    CROSS = "✖"
    ARROW = "→"
    GEAR = "⚙"
    DOWNLOAD = "↓"
    LIGHTNING = "⚡"
    INFO = "ℹ"


def supports_color() -> bool:
    """Check if the terminal supports color output.

    Returns:
        True if colors should be displayed, False otherwise.
    """
    # Any non-empty value disables color
    if os.environ.get("CURSOR_MANAGER_NO_COLOR") or os.environ.get("NO_COLOR"):
        return False
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return os.environ.get("TERM") != "dumb"


def disable_colors() -> None:
    """Blank out every color code."""
    for attr in dir(Colors):
        if not attr.startswith("_"):
            setattr(Colors, attr, "")


def init_colors() -> None:
    """Initialize colors based on terminal support.

    Disables all color codes if the terminal doesn't support colors.
    """
    if not supports_color():
        disable_colors()


def success(message: str) -> None:
    print(f"{Colors.GREEN}{Icons.CHECK} {message}{Colors.RESET}")


def info(message: str) -> None:
    print(f"{Colors.BLUE}{Icons.INFO} {message}{Colors.RESET}")


def warning(message: str) -> None:
    print(f"{Colors.YELLOW}{Icons.INFO} {message}{Colors.RESET}")


def error(message: str) -> None:
    print(f"{Colors.RED}{Icons.CROSS} {message}{Colors.RESET}", file=sys.stderr)


# Auto-initialize on import
init_colors()

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
]
