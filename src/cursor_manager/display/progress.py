"""Progress bar rendering for downloads."""

import sys

from cursor_manager.display.colors import Colors


def make_progress_bar(percentage: float, width: int = 25) -> str:
    """Create a visual progress bar with block characters.

    Args:
        percentage: Completion percentage (0-100).
        width: Width of the progress bar in characters.

    Returns:
        Colored string representation of the progress bar.
    """
    percentage = max(0.0, min(percentage, 100.0))
    filled = int(width * percentage / 100)
    empty = width - filled
    return f"{Colors.BAR_FILL}{'█' * filled}{Colors.BAR_EMPTY}{'░' * empty}{Colors.RESET}"


def format_size(num_bytes: int) -> str:
    """Format a byte count as a short human-readable string.

    Args:
        num_bytes: Size in bytes.

    Returns:
        String like "12.3 MB".
    """
    size = float(num_bytes)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1024
    return f"{size:.1f} GB"


def print_download_progress(downloaded: int, total: int | None) -> None:
    """Redraw the download progress line in place.

    Only draws when stdout is a terminal; total may be None when the
    server omits Content-Length.
    """
    if not sys.stdout.isatty():
        return
    if total:
        pct = downloaded * 100 / total
        line = f"  {make_progress_bar(pct)} {pct:5.1f}% ({format_size(downloaded)} / {format_size(total)})"
    else:
        line = f"  {format_size(downloaded)} downloaded"
    sys.stdout.write(f"\r{line}")
    if total and downloaded >= total:
        sys.stdout.write("\n")
    sys.stdout.flush()


__all__ = ["make_progress_bar", "format_size", "print_download_progress"]
