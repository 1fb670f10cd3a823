"""Version values and parsing.

A detected version is either a fully resolved ``Version`` triple or one of
the ``VersionStatus`` sentinels.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

# Leading "v" and anything after the third component are ignored
_VERSION_RE = re.compile(r"^\s*v?(\d+)\.(\d+)\.(\d+)(?:[.\-+].*)?\s*$")


@dataclass(frozen=True)
class Version:
    """Semantic version triple."""

    major: int
    minor: int
    patch: int

    def as_tuple(self) -> tuple:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class VersionStatus(Enum):
    """Sentinels used when no version triple is available."""

    NOT_INSTALLED = "not installed"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


InstalledVersion = Union[Version, VersionStatus]


def parse_version(version_str: Optional[str]) -> Optional[Version]:
    """Parse a dotted version string into a Version.

    Args:
        version_str: Version string (e.g., "0.42.0", "v1.2.3", "1.2.3.4").

    Returns:
        Version, or None when fewer than three numeric components are present.
    """
    if not version_str:
        return None
    match = _VERSION_RE.match(version_str)
    if not match:
        return None
    return Version(int(match.group(1)), int(match.group(2)), int(match.group(3)))


__all__ = ["Version", "VersionStatus", "InstalledVersion", "parse_version"]
