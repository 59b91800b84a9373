"""Typer CLI application."""

import shutil
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_utils.cli.core.shortcuts import picker_registry
from git_utils.cli.core.terminal import Terminal
from git_utils.cli.log import DEFAULT_LOG_FILE, configure_logging
from git_utils.commands import Scope, install_aliases, switch_branch
from git_utils.errors import GitUtilsError
from git_utils.git import GitContext

console = Console()
err_console = Console(stderr=True)


@contextmanager
def _reported_errors() -> Iterator[None]:
    """Turn git-utils errors into a red message and exit status 1."""
    try:
        yield
    except GitUtilsError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/]", highlight=False)
        raise typer.Exit(1)


def current_executable() -> Path:
    """Path of the running git-utils program, for use in git aliases."""
    argv0 = Path(sys.argv[0])
    if argv0.suffix != ".py" and argv0.is_file():
        return argv0.resolve()
    found = shutil.which("git-utils")
    if found is None:
        raise GitUtilsError("Cannot locate the git-utils executable to alias")
    return Path(found).resolve()


def create_app() -> typer.Typer:
    """Create and configure the CLI application."""
    app = typer.Typer(
        name="git-utils",
        help="Interactive helpers for git.",
        no_args_is_help=True,
        rich_markup_mode="rich",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        log: Annotated[bool, typer.Option("--log", envvar="GIT_UTILS_LOG", help="Log git commands to a file")] = False,
        log_file: Annotated[Path, typer.Option("--log-file", envvar="GIT_UTILS_LOG_FILE", help="File written by --log")] = DEFAULT_LOG_FILE,
        working_dir: Annotated[Optional[Path], typer.Option("--working-dir", envvar="GIT_UTILS_WORKING_DIR", help="Override working directory")] = None,
    ) -> None:
        """Interactive helpers for git."""
        if log:
            configure_logging(log_file)
        ctx.obj = GitContext(working_dir)

    @app.command()
    def install(
        ctx: typer.Context,
        user: Annotated[bool, typer.Option("--user", "-u", help="Install aliases for this user. This is the default.")] = False,
        system: Annotated[bool, typer.Option("--system", "-s", help="Install aliases for the whole system")] = False,
        local: Annotated[bool, typer.Option("--local", "-l", help="Install aliases only in this repo")] = False,
    ) -> None:
        """Install git aliases."""
        if sum((user, system, local)) > 1:
            err_console.print("[red]Choose at most one of --user, --system and --local[/]")
            raise typer.Exit(2)

        scope = Scope.SYSTEM if system else Scope.LOCAL if local else Scope.USER
        with _reported_errors():
            for alias, command in install_aliases(ctx.obj, current_executable(), scope):
                console.print(f"Aliasing `git {alias}` to `git-utils {command}`", highlight=False)

    @app.command()
    def switch(
        ctx: typer.Context,
        remote: Annotated[bool, typer.Option("--remote", "-r", help="Create/switch to a remote tracking branch")] = False,
    ) -> None:
        """Interactively switch branches."""
        with _reported_errors():
            if not Terminal().is_interactive():
                raise GitUtilsError("Can only be run in an interactive tty")
            console.print(switch_branch(ctx.obj, remote), highlight=False)

    @app.command()
    def keys() -> None:
        """List the picker's keyboard shortcuts."""
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Keys")
        table.add_column("Action")
        table.add_column("Description")
        for key_display, label, description in picker_registry().help_lines():
            table.add_row(key_display, label, description)
        table.add_row("a-z, 0-9, ...", "Filter", "Type to filter")
        console.print(table)

    return app
