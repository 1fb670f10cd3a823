"""
Pytest fixtures for cursor-manager tests.

Test imports use the src/cursor_manager/ package via --import-mode=importlib (see pyproject.toml).
Nothing here touches /opt, /usr/share or the network: every path lives under tmp_path
and every collaborator that would reach the system is replaced with a fake.
"""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cursor_manager.config.oplog import disable_op_log
from cursor_manager.config.settings import DEFAULT_CONFIG
from cursor_manager.errors import DownloadError
from cursor_manager.install.installer import Installer
from cursor_manager.install.shell import ShellIntegration, ShellKind, render_launcher
from cursor_manager.update.release import ReleaseInfo
from cursor_manager.update.version import Version


# ═══════════════════════════════════════════════════════════════════════════════
# Path Constants
# ═══════════════════════════════════════════════════════════════════════════════

PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"

# Load fixtures data
FIXTURES_DIR = Path(__file__).parent / "fixtures"
with open(FIXTURES_DIR / "api_responses.json") as f:
    FIXTURES = json.load(f)

DOWNLOAD_URL = FIXTURES["release_stable"]["downloadUrl"]


def _response(body=b"", status=200, headers=None, chunks=None):
    """Build a urlopen() context-manager response mock."""
    response = MagicMock()
    response.status = status
    response.reason = "OK"
    response.headers = headers or {}
    if chunks is not None:
        response.read.side_effect = list(chunks) + [b""]
    else:
        response.read.return_value = body
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


# ═══════════════════════════════════════════════════════════════════════════════
# Global State
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture(autouse=True)
def reset_op_log():
    """Keep the module-level operation log disabled between tests."""
    disable_op_log()
    yield
    disable_op_log()


# ═══════════════════════════════════════════════════════════════════════════════
# API Response Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def make_response():
    """Factory for urlopen() response mocks."""
    return _response


@pytest.fixture
def release_stable():
    """Flat API response for version 1.2.3."""
    return FIXTURES["release_stable"].copy()


@pytest.fixture
def release_nested():
    """API response with the release under a nested key (0.45.1)."""
    return json.loads(json.dumps(FIXTURES["release_nested"]))


@pytest.fixture
def release_missing_url():
    """API response without a downloadUrl."""
    return FIXTURES["release_missing_url"].copy()


@pytest.fixture
def release_bad_version():
    """API response whose version is not a dotted triple."""
    return FIXTURES["release_bad_version"].copy()


# ═══════════════════════════════════════════════════════════════════════════════
# Config Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def config(tmp_path):
    """Default configuration with every path redirected into tmp_path."""
    cfg = DEFAULT_CONFIG.copy()
    cfg["install_dir"] = str(tmp_path / "opt" / "cursor")
    cfg["desktop_entry_path"] = str(tmp_path / "applications" / "cursor.desktop")
    cfg["log_file"] = str(tmp_path / "cursor_linux_installer.log")
    return cfg


@pytest.fixture
def tmp_config_file(tmp_path, config):
    """Config file on disk holding the tmp_path configuration."""
    config_file = tmp_path / "config" / "config.json"
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps(config))
    return config_file


# ═══════════════════════════════════════════════════════════════════════════════
# Installer Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


class FakeDownloader:
    """Stand-in for download_file that writes a payload to the destination."""

    def __init__(self, payload=b"\x7fELF AppImage Cursor-1.2.3-x86_64", fail_urls=()):
        self.payload = payload
        self.fail_urls = set(fail_urls)
        self.calls = []

    def __call__(self, url, dest, timeout=60, mode=0o644, on_progress=None):
        self.calls.append((url, Path(dest)))
        if url in self.fail_urls:
            raise DownloadError("Download failed: HTTP 503 Service Unavailable", details=url)
        Path(dest).write_bytes(self.payload)
        return dest

    @property
    def urls(self):
        return [url for url, _ in self.calls]


@pytest.fixture
def release():
    """Latest release reported by the fake API (1.2.3)."""
    return ReleaseInfo(version=Version(1, 2, 3), download_url=DOWNLOAD_URL)


@pytest.fixture
def shell_integration(tmp_path, config):
    """Bash launcher integration writing to a .bashrc under tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    executable = Path(config["install_dir"]) / "cursor.AppImage"
    return ShellIntegration(
        kind=ShellKind.BASH,
        profile=home / ".bashrc",
        block=render_launcher(ShellKind.BASH, executable),
    )


@pytest.fixture
def fake_download():
    """Downloader that always succeeds."""
    return FakeDownloader()


@pytest.fixture
def make_installer(config, release, shell_integration, fake_download):
    """Factory for Installers wired to fakes. Keyword arguments override collaborators."""

    def factory(**overrides):
        kwargs = {
            "fetch_release": MagicMock(return_value=release),
            "download": fake_download,
            "ensure_deps": MagicMock(return_value=[]),
            "is_running": MagicMock(return_value=False),
            "shell_integration": shell_integration,
            "show_progress": False,
        }
        kwargs.update(overrides)
        return Installer(config, **kwargs)

    return factory


@pytest.fixture
def installed(config):
    """Factory that lays out an existing installation with a recorded version."""

    def factory(version="0.42.0", payload=b"old appimage"):
        install_dir = Path(config["install_dir"])
        install_dir.mkdir(parents=True, exist_ok=True)
        app = install_dir / "cursor.AppImage"
        app.write_bytes(payload)
        if version is not None:
            (install_dir / "version.txt").write_text(f"{version}\n")
        return app

    return factory


@pytest.fixture
def download_url():
    """AppImage URL of the fake release."""
    return DOWNLOAD_URL


@pytest.fixture
def downloader_factory():
    """Factory for FakeDownloader instances with custom failures."""
    return FakeDownloader
