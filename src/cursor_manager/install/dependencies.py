"""System dependency checks and installation via apt.

Missing packages are installed once; if they are still missing afterwards
the run fails with DependencyMissingError.
"""

import subprocess
from typing import Callable, List, Sequence

from cursor_manager.config.oplog import OpEvent, log_event
from cursor_manager.display.colors import info, success, warning
from cursor_manager.errors import DependencyMissingError

APT_TIMEOUT = 600  # seconds


def is_package_installed(package: str) -> bool:
    """Check whether a Debian package is installed according to dpkg."""
    try:
        result = subprocess.run(
            ["dpkg-query", "-W", "-f=${Status}", package],
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False
    return result.returncode == 0 and "install ok installed" in result.stdout


def find_missing(packages: Sequence[str]) -> List[str]:
    """Return the packages from the list that are not installed."""
    return [p for p in packages if not is_package_installed(p)]


def install_packages(packages: Sequence[str]) -> None:
    """Install packages with apt-get.

    Raises:
        DependencyMissingError: If apt-get cannot be run or fails.
    """
    commands = [
        ["apt-get", "update", "-qq"],
        ["apt-get", "install", "-y", *packages],
    ]
    for cmd in commands:
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=APT_TIMEOUT,
            )
        except subprocess.TimeoutExpired as e:
            raise DependencyMissingError(
                f"'{' '.join(cmd[:2])}' timed out after {APT_TIMEOUT} seconds"
            ) from e
        except (FileNotFoundError, OSError) as e:
            raise DependencyMissingError(
                f"Could not run {cmd[0]}: {e}",
                suggestion="Install the packages with your distribution's package manager: "
                + " ".join(packages),
            ) from e
        if result.returncode != 0:
            error_msg = result.stderr.strip() or result.stdout.strip() or "Unknown error"
            raise DependencyMissingError(
                f"'{' '.join(cmd[:2])}' failed while installing {', '.join(packages)}",
                details=error_msg,
            )


def ensure_dependencies(
    packages: Sequence[str],
    finder: Callable[[Sequence[str]], List[str]] = find_missing,
    installer: Callable[[Sequence[str]], None] = install_packages,
) -> List[str]:
    """Make sure every package is installed, installing missing ones once.

    Args:
        packages: Package names to check.
        finder: Returns the missing subset of a package list.
        installer: Installs a list of packages.

    Returns:
        Packages that were installed during this call.

    Raises:
        DependencyMissingError: If installation fails or packages remain missing.
    """
    info("Checking required dependencies...")
    missing = finder(packages)
    log_event(OpEvent.DEPENDENCY_CHECK, "Checked dependencies", {"missing": missing})
    if not missing:
        success("All required dependencies are already installed.")
        return []

    warning(f"Missing dependencies: {', '.join(missing)}")
    info("Installing dependencies...")
    try:
        installer(missing)
    except DependencyMissingError as e:
        log_event(OpEvent.DEPENDENCY_INSTALL, e.message, {"packages": missing}, success=False)
        raise

    still_missing = finder(missing)
    if still_missing:
        log_event(
            OpEvent.DEPENDENCY_INSTALL,
            "Dependencies still missing after install",
            {"packages": still_missing},
            success=False,
        )
        raise DependencyMissingError(f"Dependencies still missing: {', '.join(still_missing)}")

    log_event(OpEvent.DEPENDENCY_INSTALL, "Installed dependencies", {"packages": missing})
    success("Dependencies installed successfully.")
    return list(missing)


__all__ = [
    "is_package_installed",
    "find_missing",
    "install_packages",
    "ensure_dependencies",
]
