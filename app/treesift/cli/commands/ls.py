"""List command implementation.

Lists one directory, or the mounted volumes when no path is given.
"""

import os
from typing import Annotated

import typer

from treesift.cli.display import (
    OutputFormat,
    SortColumn,
    print_entries_json,
    print_entries_table,
    sort_entries,
)
from treesift.search.enumerator import default_path, list_directory, path_exists
from treesift.search.gateway import filter_entries
from treesift.utils.formatting import console, print_error, print_info


def ls(
    path: Annotated[
        str | None,
        typer.Argument(
            help="Directory to list. Omit to list mounted volumes.",
            show_default=False,
        ),
    ] = None,
    sort: Annotated[
        SortColumn,
        typer.Option(
            "--sort",
            "-s",
            help="Sort column: name, modified, type, or size.",
            case_sensitive=False,
        ),
    ] = SortColumn.NAME,
    descending: Annotated[
        bool,
        typer.Option(
            "--desc",
            "-d",
            help="Sort in descending order.",
        ),
    ] = False,
    name_filter: Annotated[
        str | None,
        typer.Option(
            "--filter",
            "-q",
            help="Only show entries whose name contains this text.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List a directory, folders first.

    Examples:
        treesift ls                         # Mounted volumes
        treesift ls ~/projects              # One directory
        treesift ls . --sort modified --desc
        treesift ls . --filter report       # Only names containing "report"
        treesift ls . --format json
    """
    location = path if path is not None else default_path()

    if not path_exists(location):
        print_error(f"Path does not exist: {location}")
        raise typer.Exit(code=1)
    if location and not os.path.isdir(location):
        print_error(f"Not a directory: {location}")
        raise typer.Exit(code=1)

    entries = list_directory(location)
    if name_filter:
        entries = filter_entries(entries, name_filter)
    entries = sort_entries(entries, sort, descending)

    if output_format == OutputFormat.JSON:
        print_entries_json(entries)
        return

    if not entries:
        print_info("No entries found.")
        return

    title = os.path.abspath(location) if location else "Volumes"
    print_entries_table(entries, title)

    folders = sum(1 for e in entries if e.is_directory)
    console.print(f"\n[dim]{folders} folders, {len(entries) - folders} files[/dim]")
