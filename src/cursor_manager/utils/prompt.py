"""Interactive prompt helpers."""

import sys


def prompt_yes_no(question: str, default: bool = False) -> bool:
    """Prompt user for yes/no answer.

    Args:
        question: The question to ask.
        default: Default value if user presses Enter.

    Returns:
        True for yes, False for no. Returns default when stdin is not a
        terminal or is closed.
    """
    if not sys.stdin or not sys.stdin.isatty():
        return default
    suffix = " [Y/n] " if default else " [y/N] "
    while True:
        try:
            response = input(f"{question}{suffix}").strip().lower()
        except EOFError:
            return default
        if not response:
            return default
        if response in ("y", "yes"):
            return True
        if response in ("n", "no"):
            return False
        print("Please answer 'y' or 'n'")


__all__ = ["prompt_yes_no"]
