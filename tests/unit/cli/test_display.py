"""Unit tests for shared CLI display helpers."""

from datetime import datetime

from treesift.cli.display import (
    SortColumn,
    create_entries_table,
    format_entry_row,
    sort_entries,
)
from treesift.search.models import Entry


def _entry(
    name: str,
    is_directory: bool = False,
    size: int = 0,
    modified: datetime = datetime(2024, 1, 1),
    type_label: str | None = None,
    parent: str | None = "/data",
) -> Entry:
    return Entry(
        name=name,
        full_path=f"/data/{name}" if parent else f"/mnt/{name}",
        is_directory=is_directory,
        size_bytes=size,
        last_modified=modified,
        type_label=type_label or ("File folder" if is_directory else "TXT File"),
        parent_path=parent,
    )


ENTRIES = [
    _entry("b.txt", size=10, modified=datetime(2024, 3, 1), type_label="TXT File"),
    _entry("Zeta", is_directory=True, modified=datetime(2024, 1, 1)),
    _entry("a.md", size=300, modified=datetime(2024, 2, 1), type_label="MD File"),
    _entry("alpha", is_directory=True, modified=datetime(2024, 5, 1)),
]


class TestSortEntries:
    """Tests for sort_entries function."""

    def test_name_keeps_directories_first(self) -> None:
        """Sorting by name groups folders ahead of files."""
        result = sort_entries(ENTRIES)
        assert [e.name for e in result] == ["alpha", "Zeta", "a.md", "b.txt"]

    def test_name_descending(self) -> None:
        """Descending order applies within each group."""
        result = sort_entries(ENTRIES, SortColumn.NAME, descending=True)
        assert [e.name for e in result] == ["Zeta", "alpha", "b.txt", "a.md"]

    def test_modified(self) -> None:
        """Sorting by modification time."""
        result = sort_entries(ENTRIES, SortColumn.MODIFIED)
        assert [e.name for e in result] == ["Zeta", "alpha", "a.md", "b.txt"]

    def test_size(self) -> None:
        """Sorting by size, largest last."""
        result = sort_entries(ENTRIES, SortColumn.SIZE)
        assert [e.name for e in result] == ["alpha", "Zeta", "b.txt", "a.md"]

    def test_type(self) -> None:
        """Sorting by type label."""
        result = sort_entries(ENTRIES, SortColumn.TYPE)
        assert [e.name for e in result] == ["alpha", "Zeta", "a.md", "b.txt"]

    def test_input_not_modified(self) -> None:
        """A new list is returned."""
        entries = list(ENTRIES)
        sort_entries(entries, SortColumn.SIZE)
        assert entries == ENTRIES


class TestFormatEntryRow:
    """Tests for format_entry_row function."""

    def test_file_row(self) -> None:
        """Files show their size and type."""
        name, modified, type_label, size = format_entry_row(_entry("b.txt", size=2048))
        assert name == "[file]b.txt[/file]"
        assert "2024-01-01 00:00" in modified
        assert "TXT File" in type_label
        assert "2 KB" in size

    def test_directory_row_has_no_size(self) -> None:
        """Folders leave the size column empty."""
        name, _, _, size = format_entry_row(_entry("docs", is_directory=True))
        assert name == "[directory]docs[/directory]"
        assert size == "[info][/info]"

    def test_volume_row(self) -> None:
        """Volumes are styled as volumes."""
        name, *_ = format_entry_row(_entry("sda1", is_directory=True, parent=None))
        assert name == "[volume]sda1[/volume]"

    def test_display_label(self) -> None:
        """Search results can show the display label."""
        entry = Entry(
            name="x.txt",
            full_path="/r/s/x.txt",
            is_directory=False,
            size_bytes=1,
            last_modified=datetime(2024, 1, 1),
            type_label="TXT File",
            parent_path="/r/s",
            display_label="/r/s/x.txt",
        )
        name, *_ = format_entry_row(entry, use_display_label=True)
        assert name == "[file]/r/s/x.txt[/file]"


def test_entries_table_columns() -> None:
    """The listing table has the four explorer columns."""
    table = create_entries_table("Listing")
    assert [c.header for c in table.columns] == ["Name", "Date modified", "Type", "Size"]
    assert table.title == "Listing"
