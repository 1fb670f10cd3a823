"""Shell integration: the ``cursor`` launcher function in the user's profile.

The launcher is rendered from a versioned template and written between
marker lines, so applying it is idempotent and removing it is exact.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from cursor_manager.config.oplog import OpEvent, log_event
from cursor_manager.errors import InstallError
from cursor_manager.utils.platform import InvokingUser

TEMPLATE_VERSION = 1
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
EXECUTABLE_PLACEHOLDER = "@EXECUTABLE@"

BEGIN_MARKER = f"# >>> cursor-manager launcher v{TEMPLATE_VERSION} >>>"
END_MARKER = "# <<< cursor-manager launcher <<<"
# Written by the original shell installer without markers
LEGACY_HEADER = "# Cursor AI IDE launcher function"
LEGACY_SIGNATURE = "function cursor()"


class ShellKind(Enum):
    """Shells with a known profile location."""

    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    UNKNOWN = "unknown"


def detect_shell_kind(shell: str) -> ShellKind:
    """Map a shell path such as /usr/bin/zsh to a ShellKind."""
    name = os.path.basename(shell.strip()) if shell else ""
    try:
        return ShellKind(name)
    except ValueError:
        return ShellKind.UNKNOWN


def profile_path_for(
    kind: ShellKind,
    home: Path,
    exists: Callable[[Path], bool] = Path.exists,
) -> Path:
    """Profile file that should hold the launcher for a shell.

    Args:
        kind: Shell kind.
        home: User's home directory.
        exists: Existence check, injectable for tests.

    Returns:
        Path to the profile file. It may not exist yet.
    """
    if kind is ShellKind.BASH:
        bashrc = home / ".bashrc"
        return bashrc if exists(bashrc) else home / ".bash_profile"
    if kind is ShellKind.ZSH:
        return home / ".zshrc"
    if kind is ShellKind.FISH:
        return home / ".config" / "fish" / "config.fish"
    return home / ".bashrc"


def render_launcher(kind: ShellKind, executable: Path, templates_dir: Optional[Path] = None) -> str:
    """Render the launcher block for a shell, including marker lines."""
    if templates_dir is None:
        templates_dir = TEMPLATES_DIR
    suffix = "fish" if kind is ShellKind.FISH else "sh"
    template = (templates_dir / f"launcher.v{TEMPLATE_VERSION}.{suffix}").read_text(encoding="utf-8")
    body = template.replace(EXECUTABLE_PLACEHOLDER, str(executable)).rstrip("\n")
    return f"{BEGIN_MARKER}\n{body}\n{END_MARKER}\n"


@dataclass(frozen=True)
class ShellIntegration:
    """Desired launcher block for one profile file."""

    kind: ShellKind
    profile: Path
    block: str
    owner_uid: Optional[int] = None
    owner_gid: Optional[int] = None


def build_shell_integration(user: InvokingUser, executable: Path) -> ShellIntegration:
    """Build the desired shell integration for a user."""
    kind = detect_shell_kind(user.shell)
    return ShellIntegration(
        kind=kind,
        profile=profile_path_for(kind, user.home),
        block=render_launcher(kind, executable),
        owner_uid=user.uid,
        owner_gid=user.gid,
    )


def has_launcher(content: str) -> bool:
    """Check profile content for a launcher from any version."""
    return "# >>> cursor-manager launcher" in content or LEGACY_SIGNATURE in content


def _chown(path: Path, integration: ShellIntegration) -> None:
    if integration.owner_uid is None or integration.owner_gid is None:
        return
    try:
        os.chown(path, integration.owner_uid, integration.owner_gid)
    except OSError:
        pass  # not root


def apply_shell_integration(integration: ShellIntegration) -> bool:
    """Append the launcher block to the profile unless one is already there.

    Returns:
        True if the profile was modified, False if it already had a launcher.

    Raises:
        InstallError: If the profile cannot be read or written.
    """
    profile = integration.profile
    try:
        created = not profile.exists()
        if created:
            profile.parent.mkdir(parents=True, exist_ok=True)
            profile.touch()
        content = profile.read_text(encoding="utf-8")
        if has_launcher(content):
            log_event(OpEvent.SHELL_INTEGRATION, "Launcher already present", {"profile": profile})
            return False
        with open(profile, "a", encoding="utf-8") as f:
            f.write("\n" + integration.block)
    except OSError as e:
        raise InstallError(f"Failed to add cursor function to {profile}: {e}") from e

    if created:
        _chown(profile, integration)
    log_event(OpEvent.SHELL_INTEGRATION, "Added launcher", {"profile": profile})
    return True


def strip_launcher(content: str) -> str:
    """Remove marked and legacy launcher blocks from profile content."""
    lines = content.splitlines(keepends=True)
    kept = []
    skipping = None
    for line in lines:
        stripped = line.rstrip("\n")
        if skipping is None:
            if stripped.startswith("# >>> cursor-manager launcher"):
                skipping = "marked"
            elif stripped == LEGACY_HEADER:
                skipping = "legacy"
            else:
                kept.append(line)
                continue
            # Drop the blank separator line written before the block
            if kept and not kept[-1].strip():
                kept.pop()
        elif skipping == "marked" and stripped == END_MARKER:
            skipping = None
        elif skipping == "legacy" and stripped == "}":
            skipping = None
    return "".join(kept)


def remove_shell_integration(integration: ShellIntegration) -> bool:
    """Remove any launcher block from the profile.

    Returns:
        True if the profile was modified.

    Raises:
        InstallError: If the profile cannot be rewritten.
    """
    profile = integration.profile
    if not profile.exists():
        return False
    try:
        content = profile.read_text(encoding="utf-8")
        updated = strip_launcher(content)
        if updated == content:
            return False
        profile.write_text(updated, encoding="utf-8")
    except OSError as e:
        raise InstallError(f"Failed to remove cursor function from {profile}: {e}") from e
    log_event(OpEvent.SHELL_INTEGRATION, "Removed launcher", {"profile": profile})
    return True


__all__ = [
    "TEMPLATE_VERSION",
    "BEGIN_MARKER",
    "END_MARKER",
    "ShellKind",
    "ShellIntegration",
    "detect_shell_kind",
    "profile_path_for",
    "render_launcher",
    "build_shell_integration",
    "has_launcher",
    "apply_shell_integration",
    "strip_launcher",
    "remove_shell_integration",
]
