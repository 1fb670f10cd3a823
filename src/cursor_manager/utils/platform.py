"""Platform and user detection.

When cursor-manager runs under sudo, shell integration belongs to the user
who invoked sudo, not to root.
"""

import os
import platform
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


@dataclass(frozen=True)
class InvokingUser:
    """The human user on whose behalf the command runs."""

    name: str
    home: Path
    shell: str
    uid: Optional[int] = None
    gid: Optional[int] = None


def is_linux() -> bool:
    return platform.system() == "Linux"


def get_invoking_user(env: Optional[Mapping[str, str]] = None) -> InvokingUser:
    """Resolve the invoking user, looking through sudo when possible.

    Args:
        env: Environment mapping. Defaults to os.environ.

    Returns:
        InvokingUser with home directory and login shell.
    """
    if env is None:
        env = os.environ

    sudo_user = env.get("SUDO_USER")
    if sudo_user and sudo_user != "root":
        try:
            entry = pwd.getpwnam(sudo_user)
            return InvokingUser(
                name=sudo_user,
                home=Path(entry.pw_dir),
                shell=entry.pw_shell or "",
                uid=entry.pw_uid,
                gid=entry.pw_gid,
            )
        except KeyError:
            pass  # Unknown user, fall back to the current environment

    home = Path(env.get("HOME") or Path.home())
    return InvokingUser(
        name=env.get("USER", ""),
        home=home,
        shell=env.get("SHELL", ""),
    )


__all__ = ["InvokingUser", "is_linux", "get_invoking_user"]
