"""Tests for the switch and install commands against a scripted git."""

from pathlib import Path, PureWindowsPath

import pytest

from conftest import ScriptedGit, failed, ok
from git_utils.commands import install
from git_utils.commands.install import Scope, install_aliases
from git_utils.commands.switch import switch_branch
from git_utils.errors import Cancelled, GitUtilsError


class Chooser:
    """Stands in for the picker: records the candidates and returns a fixed answer."""

    def __init__(self, answer: str) -> None:
        self.answer = answer
        self.candidates = None

    def __call__(self, candidates: list[str]) -> str:
        self.candidates = candidates
        return self.answer


def local_git(*extra) -> ScriptedGit:
    responses = {
        ("status",): ok(),
        ("for-each-ref",): ok("feature\nmain\nrelease"),
        ("log",): ok("HEAD>>>refs/heads/feature\nrefs/heads/main\nrefs/heads/gone"),
    }
    responses.update(extra)
    return ScriptedGit(responses)


def remote_git(*extra) -> ScriptedGit:
    responses = {
        ("status",): ok(),
        ("for-each-ref",): ok("origin/HEAD\norigin/feature\norigin/main"),
        ("log",): ok("refs/remotes/origin/main"),
    }
    responses.update(extra)
    return ScriptedGit(responses)


class TestSwitchLocal:

    def test_switches_to_choice(self) -> None:
        git = local_git()
        choose = Chooser("feature")
        assert switch_branch(git, choose=choose) == "Switched to branch feature"
        assert choose.candidates == ["main", "feature", "release"]
        assert git.calls[-1] == ("switch", "feature")

    def test_dirty_worktree_is_refused(self) -> None:
        git = local_git()
        git.responses[("status",)] = ok(" M README")
        choose = Chooser("main")
        with pytest.raises(GitUtilsError, match="must be committed"):
            switch_branch(git, choose=choose)
        assert choose.candidates is None

    def test_no_branches(self) -> None:
        git = local_git()
        git.responses[("for-each-ref",)] = ok("")
        with pytest.raises(GitUtilsError, match="No branches to switch to."):
            switch_branch(git, choose=Chooser("main"))

    def test_cancelling_the_picker_switches_nothing(self) -> None:
        git = local_git()

        def cancel(candidates):
            raise Cancelled()

        with pytest.raises(Cancelled):
            switch_branch(git, choose=cancel)
        assert not any(call[0] == "switch" for call in git.calls)


class TestSwitchRemote:

    def test_creates_tracking_branch(self) -> None:
        git = remote_git((("show-ref",), failed(1)))
        choose = Chooser("origin/feature")
        message = switch_branch(git, remote=True, choose=choose)
        assert message == "Switched to new branch feature, tracking origin/feature"
        assert choose.candidates == ["origin/main", "origin/feature"]
        assert git.calls[-1] == ("switch", "--track", "origin/feature", "--create", "feature")

    def test_reuses_branch_already_tracking(self) -> None:
        git = remote_git((("rev-parse",), ok("origin/feature")))
        message = switch_branch(git, remote=True, choose=Chooser("origin/feature"))
        assert message == "Switched to branch feature, tracking origin/feature"
        assert ("show-ref", "--quiet", "refs/heads/feature") in git.calls
        assert git.calls[-1] == ("switch", "feature")

    def test_existing_branch_without_upstream(self) -> None:
        git = remote_git((("rev-parse",), failed(1)))
        with pytest.raises(GitUtilsError, match="isn't tracking requested branch 'origin/feature'"):
            switch_branch(git, remote=True, choose=Chooser("origin/feature"))
        assert git.calls[-1][0] == "rev-parse"

    def test_existing_branch_tracking_something_else(self) -> None:
        git = remote_git((("rev-parse",), ok("upstream/feature")))
        with pytest.raises(GitUtilsError, match="different tracking branch 'upstream/feature'"):
            switch_branch(git, remote=True, choose=Chooser("origin/feature"))

    @pytest.mark.parametrize("answer", ["feature", "origin/"])
    def test_unexpected_ref_format(self, answer: str) -> None:
        git = remote_git()
        with pytest.raises(GitUtilsError, match="unexpected format"):
            switch_branch(git, remote=True, choose=Chooser(answer))


class TestInstall:

    def test_installs_alias_in_scope(self) -> None:
        git = ScriptedGit()
        installed = install_aliases(git, Path("/usr/bin/git-utils"), Scope.LOCAL)
        assert installed == [("iswitch", "switch")]
        assert git.calls == [("config", "set", "--local", "alias.iswitch", "!/usr/bin/git-utils switch")]

    def test_user_scope_is_global_config(self) -> None:
        git = ScriptedGit()
        install_aliases(git, Path("/usr/bin/git-utils"))
        assert git.calls[0][2] == "--global"

    def test_windows_paths_use_forward_slashes(self, monkeypatch) -> None:
        monkeypatch.setattr(install.os, "name", "nt")
        assert install.git_path(PureWindowsPath(r"C:\Tools\git-utils.exe")) == "C:/Tools/git-utils.exe"
