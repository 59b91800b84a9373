"""Install git aliases that run git-utils subcommands."""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path, PureWindowsPath

from git_utils.git.context import GitContext

logger = logging.getLogger(__name__)

# git alias -> git-utils subcommand
ALIASES = [
    ("iswitch", "switch"),
]


class Scope(Enum):
    """Which git config file receives the aliases."""
    USER = "global"
    SYSTEM = "system"
    LOCAL = "local"


def git_path(executable: Path) -> str:
    """Render a path the way git's shell aliases expect it (forward slashes)."""
    if os.name == "nt":
        return PureWindowsPath(executable).as_posix()
    return str(executable)


def install_aliases(git: GitContext, executable: Path, scope: Scope = Scope.USER) -> list[tuple[str, str]]:
    """Point each alias at ``executable``; returns the installed (alias, command) pairs."""
    program = git_path(executable)
    installed: list[tuple[str, str]] = []
    for alias, command in ALIASES:
        git.run(["config", "set", f"--{scope.value}", f"alias.{alias}", f"!{program} {command}"])
        logger.info("Aliased git %s to %s %s", alias, program, command)
        installed.append((alias, command))
    return installed
