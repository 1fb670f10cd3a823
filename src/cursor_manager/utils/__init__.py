"""Utility functions.

Modules:
    platform: Platform checks and invoking-user resolution
    prompt: Interactive yes/no prompt
"""

from cursor_manager.utils.platform import InvokingUser, get_invoking_user, is_linux
from cursor_manager.utils.prompt import prompt_yes_no

__all__ = [
    "InvokingUser",
    "get_invoking_user",
    "is_linux",
    "prompt_yes_no",
]
