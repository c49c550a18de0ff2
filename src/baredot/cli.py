"""CLI for baredot - a bare-repository dotfiles bootstrapper."""

import os
from typing import Optional

import typer
from rich.console import Console
from typing_extensions import Annotated

from . import __version__
from .core import (
    ALIAS_NAME,
    REQUIRED_COMMANDS,
    bootstrap,
    require_commands,
    resolve_config,
)
from .exceptions import (
    BaredotError,
    BootstrapResultDict,
    MissingCapabilityError,
    RemoteConflictError,
)
from .output import Reporter

REMOTE_PROMPT = "git url for your remote dotfiles repo"

# Global app and console instances
app = typer.Typer(
    help="baredot - manage your $HOME directory as a bare git repo",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"baredot {__version__}")
        raise typer.Exit()


def show_next_steps(result: BootstrapResultDict, reporter: Reporter) -> None:
    """Print the alias so it can be used without a new login shell."""
    shell = os.environ.get("SHELL") or "$SHELL"

    if not reporter.quiet:
        err_console.rule("[bold green]DONE")
    reporter.info(
        f"to start using your `{ALIAS_NAME}` command, start a new login shell",
        f"(`{shell} -l`) or evaluate the following in your current terminal:",
    )
    console.print()
    console.print(result["alias"], markup=False, highlight=False, soft_wrap=True)
    console.print(f"{ALIAS_NAME} --help", markup=False, highlight=False)
    console.print()


@app.command()
def init(
    git_remote: Annotated[
        str,
        typer.Option(
            "--git-remote",
            help="The git url to use for your dotfiles. Prompted for if omitted.",
        ),
    ] = "",
    git_dir: Annotated[
        Optional[str],
        typer.Option(
            "--git-dir",
            help="Directory in which to store the git state of your dotfiles "
            "repo. Default: ~/.dotfiles.git",
        ),
    ] = None,
    dotfiles_dir: Annotated[
        Optional[str],
        typer.Option(
            "--dotfiles-dir",
            help="Path in which to keep nonstandard or overloaded configuration "
            'files such as ".gitignore". Default: ~/.dotfiles',
        ),
    ] = None,
    non_interactive: Annotated[
        bool,
        typer.Option(
            "--non-interactive", "-n", help="Fail instead of prompting for a remote"
        ),
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only print errors and the alias")
    ] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """
    Start managing your $HOME directory as a bare git repo.

    Based on https://www.atlassian.com/git/tutorials/dotfiles.
    """
    reporter = Reporter.from_env(quiet=quiet)
    config = resolve_config(
        remote=git_remote, git_dir=git_dir, dotfiles_dir=dotfiles_dir
    )

    try:
        require_commands(REQUIRED_COMMANDS, reporter)

        if not config.remote and not non_interactive:
            remote = typer.prompt(
                REMOTE_PROMPT, default="", show_default=False, err=True
            )
            typer.echo(err=True)
            config = config.with_remote(remote)

        result = bootstrap(config, reporter)
    except MissingCapabilityError:
        # each missing command has already been reported
        raise typer.Exit(code=1)
    except RemoteConflictError as e:
        reporter.error(
            f"desired remote        '{e.desired}'",
            f"pre-existing remote   '{e.existing}'",
        )
        raise typer.Exit(code=1)
    except BaredotError as e:
        reporter.error(str(e))
        raise typer.Exit(code=1)

    show_next_steps(result, reporter)


if __name__ == "__main__":
    app()
