"""Command-line interface for cursor-manager.

This module provides the main entry point and argument parsing for the
cursor-manager CLI tool.
"""

import argparse
import platform
import sys
from pathlib import Path
from typing import List, Optional

from cursor_manager._version import __version__
from cursor_manager.display.colors import Colors, Icons, disable_colors
from cursor_manager.display.colors import error as print_error
from cursor_manager.errors import (
    ConfigError,
    CursorManagerError,
    ExitCode,
    UsageError,
    format_error_for_user,
    get_exit_code,
)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="cursor-manager",
        description="Install, update and remove the Cursor AI IDE on Linux",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  sudo cursor-manager              Install Cursor, or update it if installed
  sudo cursor-manager install      Install Cursor AI IDE
  sudo cursor-manager update       Update Cursor AI IDE
  sudo cursor-manager uninstall    Uninstall Cursor AI IDE
  cursor-manager version           Check installed and latest versions
  cursor-manager config            Show current configuration
  cursor-manager config set release_track latest
  cursor-manager log -n 20         Show the last 20 operation log entries

Required system packages (installed automatically with apt-get):
  libfuse2  Needed to run AppImages
  file      Used to detect the installed version

{Icons.ARROW} https://github.com/flavio-ever/cursor-linux-installer
""",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        dest="show_version",
        help="Show cursor-manager version and system information",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show error details and suggestions",
    )
    parser.add_argument(
        "--config-file",
        metavar="PATH",
        help="Use an alternative configuration file",
    )

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.add_parser("install", help=f"{Icons.GEAR} Install Cursor AI IDE")
    sub.add_parser("update", help=f"{Icons.DOWNLOAD} Update Cursor AI IDE (installs it if missing)")

    uninstall = sub.add_parser("uninstall", help=f"{Icons.CROSS} Uninstall Cursor AI IDE")
    shell_group = uninstall.add_mutually_exclusive_group()
    shell_group.add_argument(
        "--remove-shell-function",
        action="store_true",
        default=None,
        dest="remove_shell",
        help="Also remove the 'cursor' function from your shell profile",
    )
    shell_group.add_argument(
        "--keep-shell-function",
        action="store_false",
        dest="remove_shell",
        help="Keep the 'cursor' function without asking",
    )

    sub.add_parser(
        "version",
        aliases=["check-version"],
        help=f"{Icons.INFO} Check installed and latest Cursor AI IDE versions",
    )

    config = sub.add_parser("config", help=f"{Icons.GEAR} Show or change configuration")
    config.add_argument(
        "config_args",
        nargs="*",
        metavar="COMMAND",
        help="show (default), reset, set KEY VALUE",
    )

    log = sub.add_parser("log", help=f"{Icons.INFO} Show recent operation log entries")
    log.add_argument(
        "-n",
        "--lines",
        type=int,
        default=50,
        metavar="N",
        help="Number of entries to show (default: 50)",
    )

    sub.add_parser("help", help=f"{Icons.INFO} Show this help message")

    return parser


def print_version() -> None:
    """Print version and system information."""
    print(
        f"cursor-manager {__version__} "
        f"(Python {sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}, "
        f"{platform.system()} {platform.machine()})"
    )


def handle_config_command(config_args: list, config: dict, config_file: Path) -> int:
    """Handle configuration subcommands.

    Args:
        config_args: List of config command arguments.
        config: Currently loaded configuration.
        config_file: Configuration file path.

    Returns:
        Exit code.

    Raises:
        UsageError: If the subcommand or its arguments are invalid.
        ConfigError: If the new value fails validation or cannot be saved.
    """
    from cursor_manager.config.oplog import OpEvent, log_event
    from cursor_manager.config.settings import (
        DEFAULT_CONFIG,
        convert_config_value,
        reset_config,
        save_config,
        validate_config,
    )

    valid_keys = f"Valid keys: {', '.join(sorted(DEFAULT_CONFIG.keys()))}"

    if len(config_args) == 0 or config_args[0] == "show":
        print()
        print(f"{Colors.BOLD}{Colors.CYAN}Current Configuration{Colors.RESET}")
        print()
        width = max(len(k) for k in DEFAULT_CONFIG) + 2
        for key in DEFAULT_CONFIG:
            value = config.get(key)
            marker = "" if value == DEFAULT_CONFIG[key] else f" {Colors.YELLOW}(custom){Colors.RESET}"
            print(f"  {key + ':':<{width}} {Colors.CYAN}{value}{Colors.RESET}{marker}")
        print()
        print(f"  Config File: {config_file}")
        print()
        return ExitCode.SUCCESS

    if config_args[0] == "reset":
        try:
            reset_config(config_file=config_file)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_file}: {e}") from e
        log_event(OpEvent.CONFIG_WRITE, "Config reset")
        print(f"{Colors.GREEN}Configuration reset to defaults.{Colors.RESET}")
        return ExitCode.SUCCESS

    if config_args[0] == "set":
        if len(config_args) != 3:
            raise UsageError(
                "'set' requires KEY and VALUE arguments",
                suggestion="Usage: cursor-manager config set KEY VALUE. " + valid_keys,
            )

        key, value = config_args[1], config_args[2]
        if key not in DEFAULT_CONFIG:
            raise UsageError(f"Unknown config key '{key}'", suggestion=valid_keys)

        try:
            converted = convert_config_value(key, value)
        except ValueError as e:
            raise UsageError(f"'{key}' must be an integer") from e

        errors = validate_config({key: converted})
        if errors:
            raise ConfigError(errors[0])

        config[key] = converted
        try:
            save_config(config, config_file=config_file)
        except OSError as e:
            raise ConfigError(f"Cannot write {config_file}: {e}") from e
        log_event(OpEvent.CONFIG_WRITE, f"Config set: {key}", {"key": key, "value": converted})
        print(f"{Colors.GREEN}Set {key} = {converted}{Colors.RESET}")
        return ExitCode.SUCCESS

    raise UsageError(
        f"Unknown config command '{config_args[0]}'",
        suggestion="Available commands: show, reset, set KEY VALUE",
    )


def show_log(log_path: Path, limit: int, verbose: bool = False) -> int:
    """Print the most recent operation log entries.

    Returns:
        Exit code.
    """
    from cursor_manager.config.oplog import read_op_log

    if not log_path.exists():
        print(f"{Colors.YELLOW}No operation log found at {log_path}{Colors.RESET}")
        return ExitCode.SUCCESS

    entries = read_op_log(log_path, limit=limit)
    if not entries:
        print(f"{Colors.DIM}No operation log entries found.{Colors.RESET}")
        return ExitCode.SUCCESS

    print()
    print(f"{Colors.BOLD}{Colors.CYAN}Operation Log{Colors.RESET} ({len(entries)} entries)")
    print(f"{Colors.DIM}{'─' * 70}{Colors.RESET}")

    for entry in entries:
        timestamp = entry.get("timestamp", "")[:19]  # Trim to seconds
        event = entry.get("event", "unknown")
        message = entry.get("message", "")

        if not entry.get("success", True):
            color, icon = Colors.RED, Icons.CROSS
        elif event.startswith(("install", "download", "uninstall")):
            color, icon = Colors.GREEN, Icons.CHECK
        elif event.startswith(("release", "version")):
            color, icon = Colors.CYAN, Icons.ARROW
        elif event.startswith("config"):
            color, icon = Colors.MAGENTA, Icons.GEAR
        else:
            color, icon = Colors.WHITE, "•"

        print(f"{Colors.DIM}{timestamp}{Colors.RESET} {color}{icon} {event}{Colors.RESET}")
        if message:
            print(f"  {message}")

        details = entry.get("details", {})
        if details and verbose:
            for k, v in details.items():
                print(f"    {Colors.DIM}{k}: {v}{Colors.RESET}")

    print()
    print(f"{Colors.DIM}Log file: {log_path}{Colors.RESET}")
    return ExitCode.SUCCESS


def report_error(error: Exception, verbose: bool = False) -> int:
    """Print an error for the user and return its exit code."""
    print_error(format_error_for_user(error, verbose=verbose))
    if not verbose and isinstance(error, CursorManagerError) and error.get_suggestion():
        print(f"{Colors.YELLOW}Suggestion: {error.get_suggestion()}{Colors.RESET}", file=sys.stderr)
    return get_exit_code(error)


def run(argv: Optional[List[str]] = None, installer_factory=None) -> int:
    """Parse arguments and run the selected command.

    Args:
        argv: Command-line arguments. Defaults to sys.argv[1:].
        installer_factory: Callable building an Installer from a config dict.

    Returns:
        Process exit code.
    """
    from cursor_manager.config.oplog import OpEvent, enable_op_log, log_event
    from cursor_manager.config.settings import CONFIG_FILE, load_config
    from cursor_manager.utils.platform import is_linux
    from cursor_manager.utils.prompt import prompt_yes_no

    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        disable_colors()

    if args.show_version:
        print_version()
        return ExitCode.SUCCESS

    command = args.command or "update"
    if command == "help":
        parser.print_help()
        return ExitCode.SUCCESS

    config_file = Path(args.config_file).expanduser() if args.config_file else CONFIG_FILE
    config = load_config(config_file=config_file)

    if config.get("log_file"):
        enable_op_log(Path(config["log_file"]))

    if command == "config":
        try:
            return handle_config_command(args.config_args, config, config_file)
        except CursorManagerError as e:
            return report_error(e, verbose=args.verbose)
    if command == "log":
        if not config.get("log_file"):
            print(f"{Colors.YELLOW}Operation log is disabled (log_file is null).{Colors.RESET}")
            return ExitCode.SUCCESS
        return show_log(Path(config["log_file"]), args.lines, verbose=args.verbose)

    if not is_linux():
        print(f"{Colors.YELLOW}Warning: cursor-manager targets Linux; {platform.system()} is not supported.{Colors.RESET}")

    if installer_factory is None:
        from cursor_manager.install.installer import Installer

        installer_factory = Installer

    log_event(OpEvent.RUN_START, f"cursor-manager {command}", {"version": __version__})
    try:
        installer = installer_factory(config)
        if command == "install":
            installer.install()
        elif command == "update":
            installer.update()
        elif command == "uninstall":
            installer.uninstall(remove_shell=args.remove_shell, confirm=prompt_yes_no)
        elif command in ("version", "check-version"):
            installer.check_version()
    except (CursorManagerError, OSError) as e:
        log_event(OpEvent.RUN_END, f"cursor-manager {command} failed: {e}", success=False)
        return report_error(e, verbose=args.verbose)
    except KeyboardInterrupt:
        print()
        print(f"{Colors.YELLOW}Interrupted.{Colors.RESET}")
        return 130

    log_event(OpEvent.RUN_END, f"cursor-manager {command} completed")
    if config.get("log_file"):
        print(f"{Colors.DIM}Operation completed. Log saved to {config['log_file']}{Colors.RESET}")
    return ExitCode.SUCCESS


def main() -> None:
    """Main entry point for the cursor-manager CLI."""
    sys.exit(int(run()))


__all__ = [
    "create_parser",
    "print_version",
    "handle_config_command",
    "show_log",
    "report_error",
    "run",
    "main",
]
