"""Interactively switch to a local or remote-tracking branch."""

from __future__ import annotations

import logging
from typing import Callable

from git_utils.errors import GitUtilsError
from git_utils.git import branches
from git_utils.git.context import GitContext

logger = logging.getLogger(__name__)

Chooser = Callable[[list[str]], str]


def pick_branch(candidates: list[str]) -> str:
    """Let the user choose a branch with the inline picker."""
    from git_utils.cli.widgets.picker import pick

    return pick(candidates)


def switch_branch(git: GitContext, remote: bool = False, choose: Chooser = pick_branch) -> str:
    """
    Ask for a branch and switch to it. Returns a message for the user.

    With ``remote``, the choice is a remote-tracking branch ``origin/name``:
    an existing local ``name`` is reused only if it already tracks the
    choice, otherwise a new tracking branch is created.
    """
    if not branches.detect_clean_worktree_and_index(git):
        raise GitUtilsError(
            "There are changes in the index/worktree which must be committed, "
            "reverted, or stashed before switching branches"
        )

    all_branches = branches.list_branches(git, remote)
    if not all_branches:
        raise GitUtilsError("No branches to switch to.")

    recent = branches.get_recent_branch_list(git, remote)
    candidates = branches.order_by_recency(all_branches, recent)
    logger.info("%d branches, %d recent", len(candidates), len(recent))

    selected = choose(candidates)

    if not remote:
        git.run(["switch", selected])
        return f"Switched to branch {selected}"

    _remote, sep, local_branch = selected.partition("/")
    if not sep or not local_branch:
        raise GitUtilsError(f"git for-each-ref yielded info in unexpected format: {selected!r}")

    if not branches.ref_exists(git, f"refs/heads/{local_branch}"):
        git.run(["switch", "--track", selected, "--create", local_branch])
        return f"Switched to new branch {local_branch}, tracking {selected}"

    current_upstream = branches.get_upstream(git, local_branch)
    if current_upstream is None:
        raise GitUtilsError(
            f"Branch with name '{local_branch}' already exists but isn't tracking requested branch '{selected}'"
        )
    if current_upstream != selected:
        raise GitUtilsError(
            f"Branch with name '{local_branch}' already exists but has different tracking branch "
            f"'{current_upstream}' (expected '{selected}')"
        )

    git.run(["switch", local_branch])
    return f"Switched to branch {local_branch}, tracking {selected}"
