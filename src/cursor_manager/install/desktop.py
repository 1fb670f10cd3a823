"""Desktop menu integration for the installed AppImage."""

from pathlib import Path

from cursor_manager.config.oplog import OpEvent, log_event
from cursor_manager.errors import InstallError

MIME_TYPES = [
    "text/plain",
    "application/x-shellscript",
    "application/javascript",
    "application/json",
    "text/css",
    "text/html",
    "text/x-c",
    "text/x-csrc",
    "text/x-c++src",
    "text/x-python",
]


def render_desktop_entry(app_path: Path, icon_path: Path) -> str:
    """Render the .desktop file contents for the AppImage."""
    return f"""[Desktop Entry]
Name=Cursor AI IDE
Comment=Modern AI-powered code editor
Exec={app_path} --no-sandbox %F
Icon={icon_path}
Terminal=false
Type=Application
StartupWMClass=Cursor
Categories=Development;IDE;TextEditor;
MimeType={';'.join(MIME_TYPES)};
Keywords=Text;Editor;Development;IDE;AI;
"""


def write_desktop_entry(entry_path: Path, app_path: Path, icon_path: Path) -> Path:
    """Write the desktop entry, replacing any previous one.

    Raises:
        InstallError: If the file cannot be written.
    """
    try:
        entry_path.parent.mkdir(parents=True, exist_ok=True)
        entry_path.write_text(render_desktop_entry(app_path, icon_path), encoding="utf-8")
    except OSError as e:
        log_event(OpEvent.DESKTOP_ENTRY, "Failed to write desktop entry", {"path": entry_path}, success=False)
        raise InstallError(f"Failed to create desktop entry at {entry_path}: {e}") from e
    log_event(OpEvent.DESKTOP_ENTRY, "Wrote desktop entry", {"path": entry_path})
    return entry_path


def remove_desktop_entry(entry_path: Path) -> bool:
    """Remove the desktop entry if present.

    Returns:
        True if a file was removed.
    """
    if not entry_path.exists():
        return False
    try:
        entry_path.unlink()
    except OSError as e:
        raise InstallError(f"Failed to remove desktop entry {entry_path}: {e}") from e
    log_event(OpEvent.DESKTOP_ENTRY, "Removed desktop entry", {"path": entry_path})
    return True


__all__ = ["MIME_TYPES", "render_desktop_entry", "write_desktop_entry", "remove_desktop_entry"]
