"""Installation workflows and system integration.

Modules:
    installer: Install/update/uninstall state machine
    dependencies: apt-based dependency installation
    download: Atomic HTTP downloads
    process: Running-process check
    desktop: Desktop entry management
    shell: Shell launcher function management
"""

from cursor_manager.install.installer import InstallationState, Installer, VersionReport
from cursor_manager.install.shell import ShellIntegration, ShellKind

__all__ = [
    "Installer",
    "InstallationState",
    "VersionReport",
    "ShellIntegration",
    "ShellKind",
]
