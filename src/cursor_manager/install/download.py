"""HTTP download of the AppImage and icon.

Files are streamed into a temporary file next to the destination and
moved into place only after the transfer completed.
"""

from __future__ import annotations

import http.client
import os
import socket
import tempfile
from pathlib import Path
from typing import Callable
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from cursor_manager._version import __version__
from cursor_manager.errors import DownloadError, InstallError

CHUNK_SIZE = 64 * 1024

ProgressCallback = Callable[[int, "int | None"], None]


def _content_length(response) -> int | None:
    value = response.headers.get("Content-Length") if response.headers else None
    try:
        return int(value) if value else None
    except (TypeError, ValueError):
        return None


def download_file(
    url: str,
    dest: Path,
    timeout: int = 60,
    mode: int = 0o644,
    on_progress: ProgressCallback | None = None,
) -> Path:
    """Download url to dest, replacing dest atomically.

    Args:
        url: URL to fetch.
        dest: Destination path. Its parent directory must exist.
        timeout: Socket timeout in seconds.
        mode: Permission bits applied to the downloaded file.
        on_progress: Optional callback receiving (bytes_done, total_or_None).

    Returns:
        The destination path.

    Raises:
        DownloadError: If the transfer fails or is incomplete. dest is left untouched.
        InstallError: If the file cannot be written or moved into place.
    """
    req = Request(url, headers={"User-Agent": f"cursor-manager/{__version__}"})

    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
    except OSError as e:
        raise InstallError(f"Cannot write to {dest.parent}: {e}") from e
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as out:
            try:
                with urlopen(req, timeout=timeout) as response:
                    total = _content_length(response)
                    done = 0
                    while True:
                        chunk = response.read(CHUNK_SIZE)
                        if not chunk:
                            break
                        out.write(chunk)
                        done += len(chunk)
                        if on_progress:
                            on_progress(done, total)
            except HTTPError as e:
                raise DownloadError(f"Download failed: HTTP {e.code} {e.reason}", details=url) from e
            except URLError as e:
                raise DownloadError(f"Download failed: {e.reason}", details=url) from e
            except http.client.HTTPException as e:
                raise DownloadError(f"Download failed: {type(e).__name__}: {e}", details=url) from e
            except (socket.timeout, TimeoutError) as e:
                raise DownloadError(f"Download timed out after {timeout}s", details=url) from e
            except OSError as e:
                raise DownloadError(f"Download failed: {e}", details=url) from e

        if total is not None and done < total:
            raise DownloadError(f"Download incomplete: received {done} of {total} bytes", details=url)
        if done == 0:
            raise DownloadError("Download failed: empty response", details=url)

        os.chmod(tmp_path, mode)
        os.replace(tmp_path, dest)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise InstallError(f"Could not write {dest}: {e}") from e
    except DownloadError:
        tmp_path.unlink(missing_ok=True)
        raise

    return dest


__all__ = ["CHUNK_SIZE", "download_file"]
