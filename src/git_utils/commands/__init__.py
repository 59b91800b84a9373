"""Subcommand implementations, independent of the command-line layer."""

from git_utils.commands.install import Scope, install_aliases
from git_utils.commands.switch import switch_branch

__all__ = ["Scope", "install_aliases", "switch_branch"]
