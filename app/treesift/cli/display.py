"""Shared Rich display functions for entries and search results.

Provides the sortable listing table used by ``ls``, the streaming
result rows used by ``find``, and JSON serialization for both.
"""

import json
from collections.abc import Callable, Iterable
from enum import Enum

from rich.table import Table

from treesift.search.models import Entry
from treesift.utils.formatting import console, format_size, format_timestamp


class SortColumn(str, Enum):
    """Columns a listing can be sorted by."""

    NAME = "name"
    MODIFIED = "modified"
    TYPE = "type"
    SIZE = "size"


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


_SORT_KEYS: dict[SortColumn, Callable[[Entry], tuple]] = {
    SortColumn.NAME: lambda e: (e.name.casefold(), e.name),
    SortColumn.MODIFIED: lambda e: (e.last_modified, e.name.casefold()),
    SortColumn.TYPE: lambda e: (e.type_label.casefold(), e.name.casefold()),
    SortColumn.SIZE: lambda e: (e.size_bytes, e.name.casefold()),
}


def sort_entries(
    entries: Iterable[Entry],
    column: SortColumn = SortColumn.NAME,
    descending: bool = False,
) -> list[Entry]:
    """Sort a listing by one column, keeping directories ahead of files.

    Ties on the chosen column fall back to the case-insensitive name, so
    the order is stable across calls.

    Args:
        entries: Entries to sort.
        column: Column to sort by.
        descending: Reverse the order within the directory and file groups.

    Returns:
        New sorted list.
    """
    key = _SORT_KEYS[column]
    items = list(entries)
    directories = sorted((e for e in items if e.is_directory), key=key, reverse=descending)
    files = sorted((e for e in items if not e.is_directory), key=key, reverse=descending)
    return directories + files


def _name_cell(entry: Entry, label: str) -> str:
    if entry.is_volume:
        return f"[volume]{label}[/volume]"
    if entry.is_directory:
        return f"[directory]{label}[/directory]"
    return f"[file]{label}[/file]"


def format_entry_row(entry: Entry, *, use_display_label: bool = False) -> tuple[str, str, str, str]:
    """Format an entry as a table row with theme markup.

    Args:
        entry: The entry to format.
        use_display_label: Show the display label (full path below the
            search root) instead of the bare name.

    Returns:
        Tuple of (name, modified, type, size) with Rich markup.
    """
    label = entry.display_label if use_display_label else entry.name
    return (
        _name_cell(entry, label),
        f"[muted]{format_timestamp(entry.last_modified)}[/muted]",
        f"[muted]{entry.type_label}[/muted]",
        f"[info]{format_size(entry.size_bytes)}[/info]",
    )


def create_entries_table(title: str) -> Table:
    """Create a pre-configured table for displaying entries.

    Args:
        title: Table title.

    Returns:
        Rich Table with Name, Date modified, Type, and Size columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Date modified", no_wrap=True)
    table.add_column("Type")
    table.add_column("Size", justify="right")
    return table


def print_entries_table(entries: Iterable[Entry], title: str) -> None:
    """Print a listing as a table."""
    table = create_entries_table(title)
    for entry in entries:
        table.add_row(*format_entry_row(entry))
    console.print(table)


def print_entries_json(entries: Iterable[Entry]) -> None:
    """Print entries as a JSON array."""
    console.print_json(json.dumps([entry.to_dict() for entry in entries]))
