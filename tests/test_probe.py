"""
Tests for installed-version detection.

Tests cover:
- read_version_file() - sidecar file parsing
- version_from_file_command() - `file` output parsing
- version_from_binary() - raw AppImage scan
- detect_installed_version() - fallback order and sentinels
"""

import subprocess
from unittest.mock import MagicMock, patch

from cursor_manager.update.probe import (
    detect_installed_version,
    read_version_file,
    version_from_binary,
    version_from_file_command,
)
from cursor_manager.update.version import Version, VersionStatus


class TestReadVersionFile:
    """Tests for read_version_file() function."""

    def test_valid_file(self, tmp_path):
        """Test reading a version with trailing newline."""
        path = tmp_path / "version.txt"
        path.write_text("0.42.0\n")
        assert read_version_file(path) == Version(0, 42, 0)

    def test_missing_file(self, tmp_path):
        """Test that a missing file yields None."""
        assert read_version_file(tmp_path / "version.txt") is None

    def test_empty_file(self, tmp_path):
        """Test that an empty file yields None."""
        path = tmp_path / "version.txt"
        path.write_text("\n")
        assert read_version_file(path) is None

    def test_garbage_file(self, tmp_path):
        """Test that unparseable content yields None."""
        path = tmp_path / "version.txt"
        path.write_text("not a version")
        assert read_version_file(path) is None


class TestVersionFromFileCommand:
    """Tests for version_from_file_command() function."""

    def test_parses_output(self, tmp_path):
        """Test extracting the version from `file` output."""
        result = MagicMock(
            returncode=0,
            stdout="/opt/cursor/cursor.AppImage: ELF 64-bit LSB executable, Cursor-0.42.3-x86_64\n",
        )
        with patch("cursor_manager.update.probe.subprocess.run", return_value=result) as mock_run:
            assert version_from_file_command(tmp_path / "cursor.AppImage") == Version(0, 42, 3)
        assert mock_run.call_args[0][0][0] == "file"

    def test_no_match(self, tmp_path):
        """Test output without a build name."""
        result = MagicMock(returncode=0, stdout="cursor.AppImage: ELF 64-bit LSB executable\n")
        with patch("cursor_manager.update.probe.subprocess.run", return_value=result):
            assert version_from_file_command(tmp_path / "cursor.AppImage") is None

    def test_command_missing(self, tmp_path):
        """Test that a missing `file` binary yields None."""
        with patch("cursor_manager.update.probe.subprocess.run", side_effect=FileNotFoundError()):
            assert version_from_file_command(tmp_path / "cursor.AppImage") is None

    def test_command_timeout(self, tmp_path):
        """Test that a hanging `file` yields None."""
        with patch(
            "cursor_manager.update.probe.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="file", timeout=10),
        ):
            assert version_from_file_command(tmp_path / "cursor.AppImage") is None

    def test_nonzero_exit(self, tmp_path):
        """Test that a failing `file` yields None."""
        result = MagicMock(returncode=1, stdout="Cursor-0.42.3")
        with patch("cursor_manager.update.probe.subprocess.run", return_value=result):
            assert version_from_file_command(tmp_path / "cursor.AppImage") is None


class TestVersionFromBinary:
    """Tests for version_from_binary() function."""

    def test_finds_embedded_name(self, tmp_path):
        """Test scanning the AppImage bytes."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"\x7fELF\x00\x01" + b"\x00" * 500 + b"Cursor-0.45.11-x86_64.AppImage" + b"\x00" * 10)
        assert version_from_binary(app) == Version(0, 45, 11)

    def test_match_across_chunk_boundary(self, tmp_path):
        """Test that a match split between two reads is still found."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"x" * 100 + b"Cursor-0.42.3-x86_64")
        assert version_from_binary(app, chunk_size=105) == Version(0, 42, 3)

    def test_first_match_wins(self, tmp_path):
        """Test that the first embedded name is used."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"Cursor-1.0.0-x86_64 ... Cursor-2.0.0-x86_64")
        assert version_from_binary(app) == Version(1, 0, 0)

    def test_no_match(self, tmp_path):
        """Test a binary without a build name."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"\x00" * 2048)
        assert version_from_binary(app, chunk_size=256) is None

    def test_missing_file(self, tmp_path):
        """Test that an unreadable file yields None."""
        assert version_from_binary(tmp_path / "missing") is None


class TestDetectInstalledVersion:
    """Tests for detect_installed_version() function."""

    def test_not_installed(self, tmp_path):
        """Test that a missing AppImage is NOT_INSTALLED even with a version file."""
        version_file = tmp_path / "version.txt"
        version_file.write_text("0.42.0\n")
        assert detect_installed_version(tmp_path / "cursor.AppImage", version_file) is VersionStatus.NOT_INSTALLED

    def test_version_file_wins(self, tmp_path):
        """Test that the sidecar file is preferred over other methods."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"Cursor-0.1.0-x86_64")
        version_file = tmp_path / "version.txt"
        version_file.write_text("0.42.0\n")
        with patch("cursor_manager.update.probe.version_from_file_command") as mock_file:
            assert detect_installed_version(app, version_file) == Version(0, 42, 0)
        mock_file.assert_not_called()

    def test_falls_back_to_file_command(self, tmp_path):
        """Test fallback to `file` when the sidecar is missing."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"binary")
        with patch("cursor_manager.update.probe.version_from_file_command", return_value=Version(0, 40, 1)):
            assert detect_installed_version(app, tmp_path / "version.txt") == Version(0, 40, 1)

    def test_falls_back_to_binary_scan(self, tmp_path):
        """Test fallback to scanning bytes when `file` finds nothing."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"header Cursor-0.39.2-x86_64 trailer")
        with patch("cursor_manager.update.probe.version_from_file_command", return_value=None):
            assert detect_installed_version(app, tmp_path / "version.txt") == Version(0, 39, 2)

    def test_unknown(self, tmp_path):
        """Test UNKNOWN when the AppImage exists but every method fails."""
        app = tmp_path / "cursor.AppImage"
        app.write_bytes(b"opaque")
        version_file = tmp_path / "version.txt"
        version_file.write_text("garbage")
        with patch("cursor_manager.update.probe.version_from_file_command", return_value=None):
            assert detect_installed_version(app, version_file) is VersionStatus.UNKNOWN
