"""CLI package for treesift.

This package contains the Typer application and all subcommands.
"""

from treesift.cli.main import app

__all__ = ["app"]
