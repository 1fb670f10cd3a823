"""Categorized error handling with actionable messages.

Provides structured error types with exit codes and recovery suggestions
for better user experience and scripting integration.
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class ExitCode(IntEnum):
    """Exit codes for scripting integration.

    Standard categories:
    - 0: Success
    - 1-9: Usage/config/privilege errors (user can fix)
    - 10-19: Dependency errors
    - 20-29: Network errors
    - 30-39: Release API errors
    - 40-49: Installation errors
    """

    SUCCESS = 0

    # Usage/config errors (1-9)
    USAGE_ERROR = 1
    CONFIG_ERROR = 2
    PERMISSION_REQUIRED = 3

    # Dependency errors (10-19)
    DEPENDENCY_MISSING = 10

    # Network errors (20-29)
    NETWORK_ERROR = 20
    NETWORK_TIMEOUT = 21
    DOWNLOAD_FAILED = 22

    # Release API errors (30-39)
    PARSE_ERROR = 30

    # Installation errors (40-49)
    RUNNING_CONFLICT = 40
    INSTALL_FAILED = 41
    SYSTEM_ERROR = 49


class CursorManagerError(Exception):
    """Base exception for cursor-manager with structured error info.

    Attributes:
        message: Human-readable error message.
        code: Exit code for scripting.
        suggestion: Actionable recovery suggestion.
        details: Optional additional context.
    """

    code: ClassVar[ExitCode] = ExitCode.USAGE_ERROR
    suggestion: ClassVar[str] = ""

    def __init__(
        self,
        message: str,
        suggestion: str | None = None,
        details: str | None = None,
    ):
        self.message = message
        self._suggestion = suggestion
        self.details = details
        super().__init__(message)

    def get_suggestion(self) -> str:
        """Get the recovery suggestion."""
        return self._suggestion or self.suggestion

    def format_full(self) -> str:
        """Format the complete error message with suggestion."""
        parts = [f"Error: {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        suggestion = self.get_suggestion()
        if suggestion:
            parts.append(f"Suggestion: {suggestion}")
        return "\n".join(parts)


# Usage/Config Errors


class UsageError(CursorManagerError):
    """Invalid command or argument."""

    code = ExitCode.USAGE_ERROR
    suggestion = "Run 'cursor-manager help' to see the available commands."


class ConfigError(CursorManagerError):
    """Configuration file error."""

    code = ExitCode.CONFIG_ERROR
    suggestion = "Run 'cursor-manager config reset' to reset configuration to defaults."


class PermissionRequiredError(CursorManagerError):
    """Operation needs write access to system directories."""

    code = ExitCode.PERMISSION_REQUIRED
    suggestion = "Re-run the command with sudo, e.g. 'sudo cursor-manager install'."


# Dependency Errors


class DependencyMissingError(CursorManagerError):
    """System dependencies could not be installed."""

    code = ExitCode.DEPENDENCY_MISSING
    suggestion = "Install the missing packages manually, e.g. 'sudo apt-get install libfuse2'."


# Network Errors


class NetworkError(CursorManagerError):
    """Transport failure or non-success HTTP status."""

    code = ExitCode.NETWORK_ERROR
    suggestion = "Check your internet connection and try again."


class NetworkTimeoutError(NetworkError):
    """Request timed out."""

    code = ExitCode.NETWORK_TIMEOUT
    suggestion = "The request timed out. Try again, or raise 'timeout' with 'cursor-manager config set'."


class DownloadError(NetworkError):
    """Downloading the AppImage failed."""

    code = ExitCode.DOWNLOAD_FAILED
    suggestion = "The existing installation was left untouched. Try again later."


# Release API Errors


class ParseError(CursorManagerError):
    """Release API response did not match the expected shape."""

    code = ExitCode.PARSE_ERROR
    suggestion = (
        "The Cursor download API returned an unexpected response. "
        "Try again later or check 'api_url' in your configuration."
    )


# Installation Errors


class RunningConflictError(CursorManagerError):
    """Cursor is running and the operation would replace or remove it."""

    code = ExitCode.RUNNING_CONFLICT
    suggestion = "Close all Cursor windows and run the command again."


class InstallError(CursorManagerError):
    """Filesystem failure while installing or removing files."""

    code = ExitCode.INSTALL_FAILED
    suggestion = "Check free disk space and permissions of the installation directory."


def categorize_http_error(status_code: int, reason: str = "", url: str = "") -> NetworkError:
    """Convert an HTTP status code to a network error.

    Args:
        status_code: HTTP status code.
        reason: Optional reason phrase.
        url: Optional URL that was requested.

    Returns:
        NetworkError instance describing the failure.
    """
    message = f"HTTP {status_code}"
    if reason:
        message += f" {reason}"
    if status_code >= 500:
        return NetworkError(
            f"Server error: {message}",
            suggestion="The Cursor servers are having trouble. Try again later.",
            details=url or None,
        )
    return NetworkError(f"Request failed: {message}", details=url or None)


def categorize_network_error(error_reason: str) -> NetworkError:
    """Convert a transport error reason to a network error.

    Args:
        error_reason: Error reason string from URLError or OSError.

    Returns:
        NetworkError or NetworkTimeoutError instance.
    """
    reason_lower = error_reason.lower()

    if "timed out" in reason_lower or "timeout" in reason_lower:
        return NetworkTimeoutError(f"Connection timed out: {error_reason}")
    elif "name or service not known" in reason_lower or "getaddrinfo" in reason_lower:
        return NetworkError(
            f"DNS resolution failed: {error_reason}",
            suggestion="DNS lookup failed. Check your network configuration.",
        )
    elif "proxy" in reason_lower or "tunnel" in reason_lower:
        return NetworkError(
            f"Proxy error: {error_reason}",
            suggestion="Check your proxy settings (HTTP_PROXY, HTTPS_PROXY environment variables).",
        )
    return NetworkError(f"Network error: {error_reason}")


def format_error_for_user(error: Exception, verbose: bool = False) -> str:
    """Format any exception for user display.

    Args:
        error: Exception to format.
        verbose: If True, include details and suggestions.

    Returns:
        Formatted error message string.
    """
    if isinstance(error, CursorManagerError):
        if verbose:
            return error.format_full()
        return f"Error: {error.message}"
    else:
        return f"Error: {error}"


def get_exit_code(error: Exception) -> int:
    """Get the exit code for an exception.

    Args:
        error: Exception to get code for.

    Returns:
        Integer exit code.
    """
    if isinstance(error, CursorManagerError):
        return error.code
    elif isinstance(error, PermissionError):
        return ExitCode.PERMISSION_REQUIRED
    elif isinstance(error, OSError):
        return ExitCode.INSTALL_FAILED
    else:
        return ExitCode.SYSTEM_ERROR


__all__ = [
    "ExitCode",
    "CursorManagerError",
    "UsageError",
    "ConfigError",
    "PermissionRequiredError",
    "DependencyMissingError",
    "NetworkError",
    "NetworkTimeoutError",
    "DownloadError",
    "ParseError",
    "RunningConflictError",
    "InstallError",
    "categorize_http_error",
    "categorize_network_error",
    "format_error_for_user",
    "get_exit_code",
]
