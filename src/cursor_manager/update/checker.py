"""Version comparison and update decisions.

Maps the installed version and the latest release onto a decision that
tells the installer whether a download is needed.
"""

from enum import Enum
from typing import Union

from cursor_manager.update.version import InstalledVersion, Version, VersionStatus, parse_version


class Comparison(Enum):
    """Outcome of comparing the installed version with the latest one.

    Equal versions and an installed version ahead of the latest release
    are deliberately not distinguished.
    """

    CURRENT_IS_NEWER_OR_EQUAL = "current_is_newer_or_equal"
    LATEST_IS_NEWER = "latest_is_newer"


class UpdateDecision(Enum):
    """What the installer should do after checking versions."""

    NOT_INSTALLED = "not_installed"
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"
    UNKNOWN = "unknown"

    @property
    def requires_download(self) -> bool:
        return self is not UpdateDecision.UP_TO_DATE


def _coerce(value: Union[InstalledVersion, str]) -> InstalledVersion:
    if isinstance(value, str):
        return parse_version(value) or VersionStatus.UNKNOWN
    return value


def compare_versions(
    current: Union[InstalledVersion, str],
    latest: Union[Version, str],
) -> Comparison:
    """Compare the installed version with the latest release.

    Args:
        current: Installed version, sentinel, or version string.
        latest: Latest release version or version string.

    Returns:
        LATEST_IS_NEWER when current is a sentinel or lower on the first
        differing component of major, minor, patch; otherwise
        CURRENT_IS_NEWER_OR_EQUAL.

    Raises:
        ValueError: If latest is a string that does not parse as a version.
    """
    current = _coerce(current)
    if isinstance(latest, str):
        parsed = parse_version(latest)
        if parsed is None:
            raise ValueError(f"Invalid latest version: {latest!r}")
        latest = parsed

    if isinstance(current, VersionStatus):
        return Comparison.LATEST_IS_NEWER

    c = current.as_tuple()
    n = latest.as_tuple()
    for i in range(3):
        if n[i] > c[i]:
            return Comparison.LATEST_IS_NEWER
        if n[i] < c[i]:
            return Comparison.CURRENT_IS_NEWER_OR_EQUAL

    return Comparison.CURRENT_IS_NEWER_OR_EQUAL


def decide_update(current: InstalledVersion, latest: Version) -> UpdateDecision:
    """Map the installed version and latest release onto an UpdateDecision."""
    if current is VersionStatus.NOT_INSTALLED:
        return UpdateDecision.NOT_INSTALLED
    if current is VersionStatus.UNKNOWN:
        return UpdateDecision.UNKNOWN
    if compare_versions(current, latest) is Comparison.LATEST_IS_NEWER:
        return UpdateDecision.UPDATE_AVAILABLE
    return UpdateDecision.UP_TO_DATE


__all__ = [
    "Comparison",
    "UpdateDecision",
    "compare_versions",
    "decide_update",
]
