"""CLI commands for treesift.

This package contains all subcommand implementations.
"""

from treesift.cli.commands import config, find, ls

__all__ = ["config", "find", "ls"]
