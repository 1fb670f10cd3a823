"""Client for the Cursor download API.

Performs a single GET and extracts the latest version and its download URL.
Retries are left to the caller.
"""

from __future__ import annotations

import http.client
import json
import socket
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from cursor_manager._version import __version__
from cursor_manager.errors import (
    NetworkTimeoutError,
    ParseError,
    categorize_http_error,
    categorize_network_error,
)
from cursor_manager.update.version import Version, parse_version

DEFAULT_TIMEOUT = 30  # seconds


@dataclass(frozen=True)
class ReleaseInfo:
    """Latest release as reported by the download API."""

    version: Version
    download_url: str


def _find_string(data: Any, key: str) -> str | None:
    """Depth-first search for the first non-empty string stored under key."""
    if isinstance(data, dict):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        children = data.values()
    elif isinstance(data, list):
        children = data
    else:
        return None

    for child in children:
        found = _find_string(child, key)
        if found:
            return found
    return None


def parse_release(body: bytes | str) -> ReleaseInfo:
    """Parse a download API response body.

    Args:
        body: Raw response body.

    Returns:
        ReleaseInfo with both fields populated.

    Raises:
        ParseError: If the body is not JSON or lacks a usable version or downloadUrl.
    """
    try:
        if isinstance(body, bytes):
            body = body.decode("utf-8")
        data = json.loads(body)
        raw_version = _find_string(data, "version")
        download_url = _find_string(data, "downloadUrl")
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        # ValueError covers JSONDecodeError and over-long integer literals
        raise ParseError("Release API returned malformed JSON", details=str(e)) from e

    missing = [name for name, value in (("version", raw_version), ("downloadUrl", download_url)) if not value]
    if missing:
        raise ParseError(f"Release API response is missing {', '.join(missing)}")

    version = parse_version(raw_version)
    if version is None:
        raise ParseError(f"Release API returned an invalid version: {raw_version!r}")

    return ReleaseInfo(version=version, download_url=download_url)


def fetch_latest(api_url: str, timeout: int = DEFAULT_TIMEOUT) -> ReleaseInfo:
    """Fetch the latest release from the download API.

    Args:
        api_url: Full API URL including platform and releaseTrack parameters.
        timeout: Request timeout in seconds.

    Returns:
        ReleaseInfo for the latest release.

    Raises:
        NetworkError: If the request fails or returns a non-success status.
        ParseError: If the response does not contain a version and download URL.
    """
    req = Request(
        api_url,
        headers={
            "Accept": "application/json",
            "User-Agent": f"cursor-manager/{__version__}",
        },
    )

    try:
        with urlopen(req, timeout=timeout) as response:
            status = getattr(response, "status", None)
            if isinstance(status, int) and not 200 <= status < 300:
                raise categorize_http_error(status, getattr(response, "reason", ""), api_url)
            body = response.read()
    except HTTPError as e:
        raise categorize_http_error(e.code, str(e.reason), api_url) from e
    except URLError as e:
        raise categorize_network_error(str(e.reason)) from e
    except http.client.HTTPException as e:
        raise categorize_network_error(f"{type(e).__name__}: {e}") from e
    except (socket.timeout, TimeoutError) as e:
        raise NetworkTimeoutError(f"Connection timed out after {timeout}s") from e
    except OSError as e:
        raise categorize_network_error(str(e)) from e

    return parse_release(body)


__all__ = ["DEFAULT_TIMEOUT", "ReleaseInfo", "parse_release", "fetch_latest"]
