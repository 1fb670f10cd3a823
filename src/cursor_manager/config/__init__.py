"""Configuration management.

Modules:
    settings: Config loading, saving, validation and derived paths
    oplog: JSON-lines operation log
"""

from cursor_manager.config.oplog import (
    OpEvent,
    disable_op_log,
    enable_op_log,
    log_event,
    read_op_log,
)
from cursor_manager.config.settings import (
    CONFIG_FILE,
    CONFIG_SCHEMA,
    DEFAULT_CONFIG,
    app_path,
    dependency_list,
    icon_path,
    load_config,
    release_url,
    reset_config,
    save_config,
    validate_config,
    version_file,
)

__all__ = [
    # Settings
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "CONFIG_SCHEMA",
    "validate_config",
    "load_config",
    "save_config",
    "reset_config",
    "app_path",
    "version_file",
    "icon_path",
    "release_url",
    "dependency_list",
    # Operation log
    "OpEvent",
    "enable_op_log",
    "disable_op_log",
    "log_event",
    "read_op_log",
]
