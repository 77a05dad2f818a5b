"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from treesift import __version__
from treesift.cli.commands import config, find, ls
from treesift.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="treesift",
    help="Browse directories and search them by name, shallowest matches first.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"treesift version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
) -> None:
    """treesift - Breadth-first file name search.

    List a directory or the mounted volumes, and search a tree for
    names containing a query, pausing every few results.
    """
    configure_logging(verbose)


# Register commands
app.command(name="ls")(ls.ls)
app.command(name="find")(find.find)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
