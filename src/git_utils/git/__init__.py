"""Git backend: subprocess wrapper and branch queries."""

from git_utils.git.context import GitContext, GitOutput

__all__ = ["GitContext", "GitOutput"]
