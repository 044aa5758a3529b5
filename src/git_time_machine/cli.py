"""CLI entry point for git-time-machine."""

import logging
from contextlib import ExitStack
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from git_time_machine import __version__
from git_time_machine.errors import AcquisitionError, FetchError
from git_time_machine.models import AnalysisOptions, RepositoryReference
from git_time_machine.session import SessionManager, session_scope

app = typer.Typer(
    name="git-time-machine",
    help="Interactive git history visualization and analysis",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"git-time-machine {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.command()
def main(
    repository: Optional[str] = typer.Argument(
        None, help="GitHub repository URL or local path (default: current directory)"
    ),
    days: int = typer.Option(30, "--days", "-d", min=1, help="Number of days to analyze"),
    branch: str = typer.Option("main", "--branch", "-b", help="Branch to analyze"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Filter commits by author"),
    detailed: bool = typer.Option(False, "--detailed", help="Show detailed statistics"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Browse a repository's history from an interactive terminal menu."""
    _configure_logging(verbose)
    options = AnalysisOptions(days=days, branch=branch, author=author, detailed=detailed)
    reference = RepositoryReference.parse(repository)

    from git_time_machine.app import GitTimeMachineApp

    status = "Cloning repository …" if reference.is_remote else "Opening repository …"
    try:
        with ExitStack() as stack:
            with console.status(status):
                session = stack.enter_context(session_scope(reference, SessionManager()))
            console.print("[green]✔[/green] Repository ready!")
            tui = GitTimeMachineApp(session, options)
            tui.run()
            return_code = tui.return_code or 0
    except (AcquisitionError, FetchError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)

    if return_code:
        raise typer.Exit(code=return_code)


if __name__ == "__main__":
    app()
