"""
Tests for system dependency handling and the running-process check.
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from cursor_manager.errors import DependencyMissingError, ExitCode
from cursor_manager.install.dependencies import (
    ensure_dependencies,
    find_missing,
    install_packages,
    is_package_installed,
)
from cursor_manager.install.process import _scan_proc, is_process_running


# ═══════════════════════════════════════════════════════════════════════════════
# Test package checks
# ═══════════════════════════════════════════════════════════════════════════════


class TestPackageChecks:
    """Tests for is_package_installed() and find_missing()."""

    def test_installed(self):
        """Test a package dpkg reports as installed."""
        result = MagicMock(returncode=0, stdout="install ok installed")
        with patch("cursor_manager.install.dependencies.subprocess.run", return_value=result) as mock_run:
            assert is_package_installed("libfuse2") is True
        assert mock_run.call_args[0][0][:2] == ["dpkg-query", "-W"]

    def test_removed_but_configured(self):
        """Test that a deinstalled package with config files is missing."""
        result = MagicMock(returncode=0, stdout="deinstall ok config-files")
        with patch("cursor_manager.install.dependencies.subprocess.run", return_value=result):
            assert is_package_installed("libfuse2") is False

    def test_unknown_package(self):
        """Test a package dpkg does not know."""
        result = MagicMock(returncode=1, stdout="")
        with patch("cursor_manager.install.dependencies.subprocess.run", return_value=result):
            assert is_package_installed("libfuse2") is False

    def test_no_dpkg(self):
        """Test a system without dpkg."""
        with patch("cursor_manager.install.dependencies.subprocess.run", side_effect=FileNotFoundError()):
            assert is_package_installed("libfuse2") is False

    def test_find_missing(self):
        """Test filtering installed packages."""
        with patch(
            "cursor_manager.install.dependencies.is_package_installed",
            side_effect=lambda p: p == "file",
        ):
            assert find_missing(["libfuse2", "file"]) == ["libfuse2"]


# ═══════════════════════════════════════════════════════════════════════════════
# Test install_packages()
# ═══════════════════════════════════════════════════════════════════════════════


class TestInstallPackages:
    """Tests for install_packages() function."""

    def test_runs_update_then_install(self):
        """Test the apt-get command sequence."""
        ok = MagicMock(returncode=0, stdout="", stderr="")
        with patch("cursor_manager.install.dependencies.subprocess.run", return_value=ok) as mock_run:
            install_packages(["libfuse2", "file"])
        commands = [c[0][0] for c in mock_run.call_args_list]
        assert commands == [
            ["apt-get", "update", "-qq"],
            ["apt-get", "install", "-y", "libfuse2", "file"],
        ]

    def test_apt_failure(self):
        """Test that a failing apt-get raises with its stderr as details."""
        ok = MagicMock(returncode=0, stdout="", stderr="")
        failed = MagicMock(returncode=100, stdout="", stderr="E: Unable to locate package libfuse2")
        with patch("cursor_manager.install.dependencies.subprocess.run", side_effect=[ok, failed]):
            with pytest.raises(DependencyMissingError) as exc_info:
                install_packages(["libfuse2"])
        assert exc_info.value.code == ExitCode.DEPENDENCY_MISSING
        assert "Unable to locate" in exc_info.value.details

    def test_no_apt(self):
        """Test a system without apt-get."""
        with patch("cursor_manager.install.dependencies.subprocess.run", side_effect=FileNotFoundError("apt-get")):
            with pytest.raises(DependencyMissingError) as exc_info:
                install_packages(["libfuse2"])
        assert "libfuse2" in exc_info.value.get_suggestion()

    def test_timeout(self):
        """Test a hanging apt-get."""
        with patch(
            "cursor_manager.install.dependencies.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="apt-get", timeout=600),
        ):
            with pytest.raises(DependencyMissingError, match="timed out"):
                install_packages(["libfuse2"])


# ═══════════════════════════════════════════════════════════════════════════════
# Test ensure_dependencies()
# ═══════════════════════════════════════════════════════════════════════════════


class TestEnsureDependencies:
    """Tests for ensure_dependencies() function."""

    def test_nothing_missing(self):
        """Test that nothing is installed when all packages are present."""
        installer = MagicMock()
        assert ensure_dependencies(["libfuse2", "file"], finder=lambda p: [], installer=installer) == []
        installer.assert_not_called()

    def test_installs_missing(self):
        """Test installing missing packages once."""
        installed = set()
        installer = MagicMock(side_effect=lambda pkgs: installed.update(pkgs))

        def finder(pkgs):
            return [p for p in pkgs if p == "libfuse2" and p not in installed]

        assert ensure_dependencies(["libfuse2", "file"], finder=finder, installer=installer) == ["libfuse2"]
        installer.assert_called_once_with(["libfuse2"])

    def test_still_missing_after_install(self):
        """Test failure when packages remain missing after installation."""
        installer = MagicMock()
        with pytest.raises(DependencyMissingError, match="still missing: libfuse2"):
            ensure_dependencies(["libfuse2"], finder=lambda p: ["libfuse2"], installer=installer)
        installer.assert_called_once()

    def test_installer_failure_propagates(self):
        """Test that an apt failure propagates."""
        installer = MagicMock(side_effect=DependencyMissingError("apt-get install failed"))
        with pytest.raises(DependencyMissingError, match="apt-get install failed"):
            ensure_dependencies(["libfuse2"], finder=lambda p: list(p), installer=installer)


# ═══════════════════════════════════════════════════════════════════════════════
# Test is_process_running()
# ═══════════════════════════════════════════════════════════════════════════════


class TestProcessRunning:
    """Tests for is_process_running() function."""

    def test_match(self):
        """Test pgrep finding a process."""
        with patch("cursor_manager.install.process.subprocess.run", return_value=MagicMock(returncode=0)) as mock_run:
            assert is_process_running("cursor.AppImage") is True
        assert mock_run.call_args[0][0] == ["pgrep", "-f", "cursor.AppImage"]

    def test_no_match(self):
        """Test pgrep finding nothing."""
        with patch("cursor_manager.install.process.subprocess.run", return_value=MagicMock(returncode=1)):
            assert is_process_running("cursor.AppImage") is False

    def test_no_pgrep_falls_back_to_proc(self):
        """Test /proc fallback when pgrep is missing."""
        with patch("cursor_manager.install.process.subprocess.run", side_effect=FileNotFoundError()):
            with patch("cursor_manager.install.process._scan_proc", return_value=True) as mock_scan:
                assert is_process_running("cursor.AppImage") is True
        mock_scan.assert_called_once_with("cursor.AppImage")

    def test_pgrep_error_falls_back_to_proc(self):
        """Test /proc fallback when pgrep itself fails."""
        with patch("cursor_manager.install.process.subprocess.run", return_value=MagicMock(returncode=3)):
            with patch("cursor_manager.install.process._scan_proc", return_value=False):
                assert is_process_running("cursor.AppImage") is False

    def test_scan_proc(self, tmp_path):
        """Test scanning a fake /proc tree."""
        (tmp_path / "1234").mkdir()
        (tmp_path / "1234" / "cmdline").write_bytes(b"/opt/cursor/cursor.AppImage\0--no-sandbox\0")
        (tmp_path / "99").mkdir()
        (tmp_path / "99" / "cmdline").write_bytes(b"/usr/bin/bash\0")
        (tmp_path / "self").mkdir()

        assert _scan_proc("cursor.AppImage", proc_dir=tmp_path) is True
        assert _scan_proc("code-insiders", proc_dir=tmp_path) is False

    def test_scan_proc_missing_dir(self, tmp_path):
        """Test scanning when /proc is unavailable."""
        assert _scan_proc("cursor.AppImage", proc_dir=tmp_path / "nope") is False
