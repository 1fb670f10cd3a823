"""Configuration management for cursor-manager.

Provides functions for loading, saving and validating the configuration
file, plus helpers that derive installation paths from it.
"""

import json
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union
from urllib.parse import urlencode

# File paths
CONFIG_FILE = Path(
    os.environ.get("CURSOR_MANAGER_CONFIG")
    or Path.home() / ".config" / "cursor-manager" / "config.json"
)

# Default configuration values
DEFAULT_CONFIG = {
    "install_dir": "/opt/cursor",
    "api_url": "https://www.cursor.com/api/download",
    "platform": "linux-x64",
    "release_track": "stable",  # stable, latest
    "desktop_entry_path": "/usr/share/applications/cursor.desktop",
    "icon_url": "https://raw.githubusercontent.com/rahuljangirwork/copmany-logos/refs/heads/main/cursor.png",
    "process_name": "cursor.AppImage",
    "dependencies": "libfuse2,file",
    "timeout": 60,
    "log_file": "/tmp/cursor_linux_installer.log",
}

# Files inside install_dir
APPIMAGE_NAME = "cursor.AppImage"
VERSION_FILE_NAME = "version.txt"
ICON_NAME = "cursor.png"

# Config schema for validation
# Format: key -> (expected_types, required, validator_func or None)
# validator_func takes value and returns (is_valid, error_message)
ValidatorFunc = Callable[[Union[str, int, float, bool, None]], Tuple[bool, str]]


def _non_empty(v) -> Tuple[bool, str]:
    return (True, "") if isinstance(v, str) and v.strip() else (False, "must be a non-empty string")


def _absolute_path(v) -> Tuple[bool, str]:
    return (True, "") if isinstance(v, str) and v.startswith("/") else (False, "must be an absolute path")


CONFIG_SCHEMA: dict[str, tuple[tuple, bool, Optional[ValidatorFunc]]] = {
    "install_dir": ((str,), False, _absolute_path),
    "api_url": (
        (str,),
        False,
        lambda v: (True, "")
        if isinstance(v, str) and v.startswith("http")
        else (False, "must be a valid HTTP/HTTPS URL"),
    ),
    "platform": ((str,), False, _non_empty),
    "release_track": ((str,), False, _non_empty),
    "desktop_entry_path": ((str,), False, _absolute_path),
    "icon_url": (
        (str, type(None)),
        False,
        lambda v: (True, "")
        if v is None or (isinstance(v, str) and v.startswith("http"))
        else (False, "must be a valid HTTP/HTTPS URL or null"),
    ),
    "process_name": ((str,), False, _non_empty),
    "dependencies": (
        (str,),
        False,
        lambda v: (True, "")
        if all(d.strip() for d in v.split(",")) or v == ""
        else (False, "must be comma-separated package names (e.g., 'libfuse2,file')"),
    ),
    "timeout": (
        (int,),
        False,
        lambda v: (True, "") if 0 < v <= 3600 else (False, "must be between 1 and 3600 seconds"),
    ),
    "log_file": ((str, type(None)), False, None),
}


def validate_config(config: dict) -> List[str]:
    """Validate configuration against schema.

    Args:
        config: Configuration dictionary to validate.

    Returns:
        List of validation error messages. Empty list if valid.
    """
    errors = []

    for key in config:
        if key not in CONFIG_SCHEMA:
            errors.append(f"Unknown config key: '{key}'")

    for key, (expected_types, required, validator) in CONFIG_SCHEMA.items():
        if required and key not in config:
            errors.append(f"Missing required key: '{key}'")
            continue

        if key not in config:
            continue

        value = config[key]

        # bool is an int subclass; reject it for numeric keys
        if not isinstance(value, expected_types) or (
            isinstance(value, bool) and bool not in expected_types
        ):
            type_names = " or ".join(t.__name__ for t in expected_types)
            errors.append(
                f"'{key}' has invalid type: expected {type_names}, got {type(value).__name__}"
            )
            continue

        if validator and value is not None:
            is_valid, error_msg = validator(value)
            if not is_valid:
                errors.append(f"'{key}' {error_msg}")

    return errors


def load_config(
    validate: bool = True,
    config_file: Optional[Path] = None,
    silent: bool = False,
) -> dict:
    """Load configuration from file.

    Args:
        validate: Whether to validate config and warn on errors. Default True.
        config_file: Optional path to config file. Defaults to CONFIG_FILE.
        silent: If True, suppress warning output. Default False.

    Returns:
        Configuration dictionary merged with defaults. Keys that fail
        validation fall back to their default values.
    """
    if config_file is None:
        config_file = CONFIG_FILE

    if not config_file.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(config_file) as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError):
        return DEFAULT_CONFIG.copy()

    if not isinstance(config, dict):
        return DEFAULT_CONFIG.copy()

    errors = validate_config(config) if validate else []
    if errors and not silent:
        print("Warning: Config validation errors:", file=sys.stderr)
        for error in errors:
            print(f"  - {error}", file=sys.stderr)

    merged = DEFAULT_CONFIG.copy()
    for key, value in config.items():
        if key not in DEFAULT_CONFIG:
            continue
        if validate and validate_config({key: value}):
            continue
        merged[key] = value
    return merged


def save_config(config: dict, config_file: Optional[Path] = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration dictionary to save.
        config_file: Optional path to config file. Defaults to CONFIG_FILE.
    """
    if config_file is None:
        config_file = CONFIG_FILE

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        json.dump(config, f, indent=2)


def reset_config(config_file: Optional[Path] = None) -> None:
    """Reset configuration to default values.

    Args:
        config_file: Optional path to config file. Defaults to CONFIG_FILE.
    """
    save_config(DEFAULT_CONFIG.copy(), config_file=config_file)


def convert_config_value(key: str, value: str):
    """Convert a command-line string to the type DEFAULT_CONFIG expects for key.

    Raises:
        KeyError: If key is not a known config key.
        ValueError: If value cannot be converted.
    """
    expected_type = type(DEFAULT_CONFIG[key])
    if expected_type == bool:
        return value.lower() in ("true", "1", "yes", "on")
    if expected_type == int:
        return int(value)
    if value.lower() == "null":
        return None
    return value


def app_path(config: dict) -> Path:
    """Path of the installed AppImage."""
    return Path(config["install_dir"]) / APPIMAGE_NAME


def version_file(config: dict) -> Path:
    """Path of the sidecar file recording the installed version."""
    return Path(config["install_dir"]) / VERSION_FILE_NAME


def icon_path(config: dict) -> Path:
    """Path of the downloaded application icon."""
    return Path(config["install_dir"]) / ICON_NAME


def release_url(config: dict) -> str:
    """Build the release API URL with platform and release-track parameters."""
    query = urlencode({"platform": config["platform"], "releaseTrack": config["release_track"]})
    return f"{config['api_url']}?{query}"


def dependency_list(config: dict) -> List[str]:
    """Split the comma-separated dependency setting into package names."""
    return [d.strip() for d in config.get("dependencies", "").split(",") if d.strip()]


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "CONFIG_SCHEMA",
    "APPIMAGE_NAME",
    "VERSION_FILE_NAME",
    "ICON_NAME",
    "validate_config",
    "load_config",
    "save_config",
    "reset_config",
    "convert_config_value",
    "app_path",
    "version_file",
    "icon_path",
    "release_url",
    "dependency_list",
]
