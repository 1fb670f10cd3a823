"""Install, update and uninstall workflows.

The Installer owns the installation directory. It records the installed
version in the sidecar file only after the AppImage was replaced, so a
failed download never changes the recorded version.
"""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from cursor_manager.config.oplog import OpEvent, log_event
from cursor_manager.config.settings import app_path, dependency_list, icon_path, release_url, version_file
from cursor_manager.display.colors import Colors, Icons, info, success, warning
from cursor_manager.display.progress import print_download_progress
from cursor_manager.display.spinner import Spinner
from cursor_manager.errors import (
    CursorManagerError,
    InstallError,
    PermissionRequiredError,
    RunningConflictError,
)
from cursor_manager.install.dependencies import ensure_dependencies
from cursor_manager.install.desktop import remove_desktop_entry, write_desktop_entry
from cursor_manager.install.download import download_file
from cursor_manager.install.process import is_process_running
from cursor_manager.install.shell import (
    ShellIntegration,
    apply_shell_integration,
    build_shell_integration,
    remove_shell_integration,
)
from cursor_manager.update.checker import UpdateDecision, decide_update
from cursor_manager.update.probe import detect_installed_version
from cursor_manager.update.release import ReleaseInfo, fetch_latest
from cursor_manager.update.version import InstalledVersion, VersionStatus
from cursor_manager.utils.platform import get_invoking_user


@dataclass(frozen=True)
class InstallationState:
    """What is installed right now."""

    app_path: Path
    version: InstalledVersion
    version_file: Optional[Path]

    @property
    def is_installed(self) -> bool:
        return self.version is not VersionStatus.NOT_INSTALLED


@dataclass(frozen=True)
class VersionReport:
    """Result of the version subcommand."""

    current: InstalledVersion
    release: Optional[ReleaseInfo]
    decision: Optional[UpdateDecision]


def _writable(path: Path) -> bool:
    """Check write access to path, or to its nearest existing ancestor."""
    for candidate in (path, *path.parents):
        if candidate.exists():
            return os.access(candidate, os.W_OK)
    return False


class Installer:
    """Drives install, update, uninstall and version checks.

    Collaborators default to the real implementations and can be replaced
    for testing.
    """

    def __init__(
        self,
        config: dict,
        fetch_release: Callable[..., ReleaseInfo] = fetch_latest,
        download: Callable[..., Path] = download_file,
        ensure_deps: Callable[..., list] = ensure_dependencies,
        is_running: Callable[[str], bool] = is_process_running,
        shell_integration: Optional[ShellIntegration] = None,
        show_progress: bool = True,
    ):
        self.config = config
        self.fetch_release = fetch_release
        self.download = download
        self.ensure_deps = ensure_deps
        self.is_running = is_running
        self.show_progress = show_progress

        self.install_dir = Path(config["install_dir"])
        self.app_path = app_path(config)
        self.version_file = version_file(config)
        self.icon_path = icon_path(config)
        self.desktop_entry_path = Path(config["desktop_entry_path"])

        if shell_integration is None:
            shell_integration = build_shell_integration(get_invoking_user(), self.app_path)
        self.shell_integration = shell_integration

    # ─────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────

    def state(self) -> InstallationState:
        """Detect the current installation state."""
        version = detect_installed_version(self.app_path, self.version_file)
        return InstallationState(
            app_path=self.app_path,
            version=version,
            version_file=self.version_file if self.version_file.exists() else None,
        )

    # ─────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────

    def _require_write_access(self) -> None:
        targets = [self.install_dir, self.desktop_entry_path.parent]
        denied = [p for p in targets if not _writable(p)]
        if denied:
            raise PermissionRequiredError(
                "This operation requires root privileges.",
                details="No write access to " + ", ".join(str(p) for p in denied),
            )

    def _ensure_not_running(self, action: str) -> None:
        if self.is_running(self.config["process_name"]):
            log_event(OpEvent.RUN_END, f"Refused {action}: Cursor is running", success=False)
            raise RunningConflictError(f"Cursor is currently running. Please close it before {action}.")

    def _fetch_release(self) -> ReleaseInfo:
        url = release_url(self.config)
        spinner = Spinner("Fetching latest version information").start()
        try:
            release = self.fetch_release(url, timeout=self.config["timeout"])
        except CursorManagerError as e:
            spinner.stop("Failed to fetch version information from the Cursor API.", ok=False)
            log_event(OpEvent.RELEASE_FETCH, e.message, {"url": url}, success=False)
            raise
        spinner.stop(f"Latest version available: {release.version}")
        log_event(
            OpEvent.RELEASE_FETCH,
            f"Latest version {release.version}",
            {"url": url, "version": str(release.version)},
        )
        return release

    def _download_and_install(self, release: ReleaseInfo) -> None:
        print(f"{Colors.BLUE}{Icons.LIGHTNING} Installing Cursor AI IDE version {release.version}...{Colors.RESET}")
        try:
            self.install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"Failed to create installation directory {self.install_dir}: {e}") from e

        print(f"{Colors.BLUE}{Icons.DOWNLOAD} Downloading Cursor AppImage...{Colors.RESET}")
        try:
            self.download(
                release.download_url,
                self.app_path,
                timeout=self.config["timeout"],
                mode=0o755,
                on_progress=print_download_progress if self.show_progress else None,
            )
        except CursorManagerError as e:
            log_event(OpEvent.DOWNLOAD, e.message, {"url": release.download_url}, success=False)
            raise
        log_event(OpEvent.DOWNLOAD, "Downloaded AppImage", {"url": release.download_url, "path": self.app_path})

        # The binary is in place; only now record its version
        try:
            self.version_file.write_text(f"{release.version}\n", encoding="utf-8")
        except OSError as e:
            warning(f"Failed to create {self.version_file.name}: {e}")
            # A stale file would shadow the new binary's embedded version
            try:
                self.version_file.unlink(missing_ok=True)
            except OSError as unlink_error:
                warning(f"Could not remove stale {self.version_file.name}: {unlink_error}")

        self._install_icon()

        try:
            write_desktop_entry(self.desktop_entry_path, self.app_path, self.icon_path)
        except InstallError as e:
            warning(e.message)

        log_event(OpEvent.INSTALL_DONE, f"Installed version {release.version}", {"version": str(release.version)})

    def _install_icon(self) -> None:
        icon_url = self.config.get("icon_url")
        if not icon_url:
            return
        try:
            self.download(icon_url, self.icon_path, timeout=self.config["timeout"], mode=0o644)
        except CursorManagerError as e:
            warning(f"Failed to download Cursor icon. Using default. ({e.message})")

    def _apply_shell_integration(self) -> None:
        try:
            added = apply_shell_integration(self.shell_integration)
        except InstallError as e:
            warning(e.message)
            return
        profile = self.shell_integration.profile
        if added:
            success(f"Added 'cursor' function to {profile}.")
            info(f"Restart your terminal or run 'source {profile}' to use the cursor command.")
        else:
            info(f"Cursor function already exists in {profile}.")

    # ─────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────

    def install(self) -> InstallationState:
        """Install Cursor unless it is already installed.

        Returns:
            Installation state after the operation.

        Raises:
            CursorManagerError: On dependency, network, parse, conflict or filesystem failure.
        """
        current = self.state()
        if current.is_installed:
            warning("Cursor is already installed.")
            log_event(OpEvent.INSTALL_START, "Install skipped: already installed", {"version": str(current.version)})
            return current

        log_event(OpEvent.INSTALL_START, "Starting installation")
        self._require_write_access()
        self.ensure_deps(dependency_list(self.config))
        release = self._fetch_release()
        self._ensure_not_running("installing")
        self._download_and_install(release)
        self._apply_shell_integration()

        success("Cursor AI IDE has been successfully installed.")
        info("Run Cursor by typing 'cursor' in a new terminal or from your applications menu.")
        return self.state()

    def update(self) -> InstallationState:
        """Update Cursor, installing it first if it is missing.

        Returns:
            Installation state after the operation.

        Raises:
            CursorManagerError: On dependency, network, parse, conflict or filesystem failure.
        """
        current = self.state()
        log_event(OpEvent.VERSION_DETECT, f"Installed version: {current.version}")
        if not current.is_installed:
            warning("Cursor is not installed. Installing...")
            return self.install()

        info(f"Current installed version: {current.version}")
        self._require_write_access()
        self.ensure_deps(dependency_list(self.config))
        release = self._fetch_release()

        decision = decide_update(current.version, release.version)
        log_event(
            OpEvent.VERSION_COMPARE,
            f"{current.version} -> {release.version}: {decision.value}",
            {"current": str(current.version), "latest": str(release.version), "decision": decision.value},
        )

        if not decision.requires_download:
            success(f"Cursor is already up to date (version {current.version}).")
            log_event(OpEvent.UPDATE_SKIPPED, "Already up to date", {"version": str(current.version)})
            self._apply_shell_integration()
            return current

        if decision is UpdateDecision.UNKNOWN:
            warning("Installed version could not be detected; reinstalling the latest release.")
        info(f"Updating from version {current.version} to {release.version}...")
        self._ensure_not_running("updating")
        self._download_and_install(release)
        self._apply_shell_integration()

        success(f"Cursor AI IDE has been successfully updated to version {release.version}.")
        return self.state()

    def uninstall(
        self,
        remove_shell: Optional[bool] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> InstallationState:
        """Remove Cursor, its desktop entry and optionally the shell function.

        Args:
            remove_shell: Remove the launcher from the shell profile. When
                None, ask through confirm (default: keep it).
            confirm: Yes/no prompt used when remove_shell is None.

        Raises:
            RunningConflictError: If Cursor is running. Nothing is removed.
            PermissionRequiredError: If the files cannot be removed.
        """
        current = self.state()
        if not current.is_installed and not self.install_dir.exists():
            warning("Cursor is not installed.")
            return current

        if self.is_running(self.config["process_name"]):
            log_event(OpEvent.UNINSTALL, "Refused uninstall: Cursor is running", success=False)
            raise RunningConflictError("Cursor is currently running. Please close it first.")

        self._require_write_access()
        print(f"{Colors.BLUE}{Icons.LIGHTNING} Uninstalling Cursor AI IDE...{Colors.RESET}")

        if remove_desktop_entry(self.desktop_entry_path):
            success("Removed desktop entry.")

        if self.install_dir.exists():
            try:
                shutil.rmtree(self.install_dir)
            except OSError as e:
                log_event(OpEvent.UNINSTALL, f"Failed to remove {self.install_dir}", success=False)
                raise InstallError(f"Failed to remove installation directory {self.install_dir}: {e}") from e
            success("Removed installation directory.")

        log_event(OpEvent.UNINSTALL, "Uninstalled Cursor", {"install_dir": self.install_dir})
        success("Cursor AI IDE has been uninstalled.")

        if remove_shell is None:
            remove_shell = bool(confirm and confirm(
                "Do you want to remove the 'cursor' shell function from your config files?"
            ))
        if remove_shell:
            try:
                if remove_shell_integration(self.shell_integration):
                    success(f"Removed 'cursor' function from {self.shell_integration.profile}.")
            except InstallError as e:
                warning(e.message)

        return self.state()

    def check_version(self) -> VersionReport:
        """Report the installed version and whether a newer one exists.

        The release API is only queried when Cursor is installed.

        Raises:
            NetworkError: If the release API cannot be reached.
            ParseError: If the release API response is unusable.
        """
        current = self.state()
        if not current.is_installed:
            info("Cursor AI IDE is not currently installed.")
            return VersionReport(current=current.version, release=None, decision=None)

        if current.version is VersionStatus.UNKNOWN:
            warning("Cursor is installed but version detection failed.")
        else:
            info(f"Current installed version: {current.version}")

        release = self._fetch_release()
        decision = decide_update(current.version, release.version)
        if decision.requires_download:
            print(f"{Colors.YELLOW}{Icons.ARROW} A newer version ({release.version}) is available!{Colors.RESET}")
        else:
            success("You have the latest version installed.")
        return VersionReport(current=current.version, release=release, decision=decision)


__all__ = ["InstallationState", "VersionReport", "Installer"]
