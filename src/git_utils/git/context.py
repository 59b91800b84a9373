"""Thin wrapper around the git executable."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Union

from git_utils.errors import GitError

logger = logging.getLogger(__name__)

Arg = Union[str, Path]


@dataclass(frozen=True)
class GitOutput:
    """Exit status and decoded, stripped output of one git invocation."""
    status: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.status == 0


class GitContext:
    """Runs git commands, optionally in a fixed working directory."""

    def __init__(self, working_dir: Optional[Path] = None, executable: str = "git") -> None:
        self.working_dir = working_dir
        self.executable = executable

    def run_raw(self, args: Iterable[Arg]) -> GitOutput:
        """Run git and return its output whatever the exit status."""
        arg_strings = [str(arg) for arg in args]
        logger.info("> git %s", arg_strings)

        try:
            proc = subprocess.run(
                [self.executable, *arg_strings],
                cwd=self.working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            raise GitError(f"Cannot run {self.executable}: {exc}") from exc

        logger.info(" -> status: %d", proc.returncode)

        try:
            stdout = proc.stdout.decode("utf-8").strip()
            stderr = proc.stderr.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise GitError(f"git produced output that is not UTF-8: {exc}") from exc

        return GitOutput(proc.returncode, stdout, stderr)

    def query(self, args: Iterable[Arg]) -> str:
        """Run git and return stdout; fail on a non-zero exit."""
        output = self.run_raw(args)
        if not output.success:
            logger.error("%s", output.stderr)
            raise GitError(output.stderr, output.status)
        return output.stdout

    def try_query(self, args: Iterable[Arg]) -> Optional[str]:
        """Like query(), but exit status 1 means "no result" rather than failure."""
        output = self.run_raw(args)
        if output.status == 0:
            return output.stdout
        if output.status == 1:
            return None
        raise GitError(output.stderr, output.status)

    def query_list(self, args: Iterable[Arg]) -> list[str]:
        return self.query(args).splitlines()

    def query_success(self, args: Iterable[Arg]) -> bool:
        return self.try_query(args) is not None

    def run(self, args: Iterable[Arg]) -> None:
        self.query(args)
