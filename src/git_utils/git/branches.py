"""Branch and reflog queries used by the switch command."""

from __future__ import annotations

from typing import Optional

from git_utils.git.context import GitContext

# Pointer decorations such as "HEAD -> main" are rendered with this marker.
POINTER_MARKER = ">>>"

RECENT_REFLOG_ENTRIES = 100


def ref_prefix(remote: bool) -> str:
    return "refs/remotes/" if remote else "refs/heads/"


def detect_clean_worktree_and_index(git: GitContext) -> bool:
    """True when tracked files have no staged or unstaged changes."""
    modifications = git.query_list(["status", "--porcelain=1", "--untracked-files=no", "--ignored=no"])
    return not modifications


def list_branches(git: GitContext, remote: bool) -> list[str]:
    """Local (or remote-tracking) branch names, without symbolic ``*/HEAD`` refs."""
    refspec = ref_prefix(remote).rstrip("/")
    branches = git.query_list(["for-each-ref", "--format", "%(refname:lstrip=2)", refspec])
    return [branch for branch in branches if branch and not branch.endswith("/HEAD")]


def parse_recent_branches(reflog: list[str], remote: bool) -> list[str]:
    """
    Extract branch names from decorated reflog lines, most recent first.

    Lines carrying a pointer decoration (the HEAD entry) are skipped, as
    are refs outside the wanted namespace. Each branch appears once.
    """
    prefix = ref_prefix(remote)
    branches: list[str] = []
    for entry in reflog:
        if not entry.strip() or POINTER_MARKER in entry:
            continue

        for reference in entry.split(","):
            if not reference.startswith(prefix):
                continue
            refname = reference[len(prefix):]
            if refname not in branches:
                branches.append(refname)

    return branches


def get_recent_branch_list(git: GitContext, remote: bool) -> list[str]:
    reflog = git.query_list([
        "log",
        "--walk-reflogs",
        "--decorate=full",
        f"-n{RECENT_REFLOG_ENTRIES}",
        f"--format=format:%(decorate:prefix=,suffix=,pointer={POINTER_MARKER},separator=%x2c)",
    ])
    return parse_recent_branches(reflog, remote)


def order_by_recency(branches: list[str], recent: list[str]) -> list[str]:
    """Recent branches that still exist first, in recency order, then the rest."""
    remaining = list(branches)
    ordered: list[str] = []
    for branch in recent:
        if branch in remaining:
            remaining.remove(branch)
            ordered.append(branch)
    return ordered + remaining


def ref_exists(git: GitContext, refname: str) -> bool:
    return git.query_success(["show-ref", "--quiet", refname])


def get_upstream(git: GitContext, branch: str) -> Optional[str]:
    """The branch's upstream as ``remote/name``, or None when it has none."""
    return git.try_query(["rev-parse", "--quiet", "--abbrev-ref", "--verify", f"{branch}@{{upstream}}"])
