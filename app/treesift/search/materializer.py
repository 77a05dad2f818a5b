"""Entry materialization.

Turns metadata the caller has already read into immutable Entry records.
Nothing here catches errors: a caller whose stat failed must skip the
entry instead of materializing a partial record.
"""

import os
from datetime import datetime

from treesift.search.models import (
    DIRECTORY_TYPE_LABEL,
    VOLUME_TYPE_LABEL,
    Entry,
    path_key,
)

DEFAULT_FILE_TYPE_LABEL = "File"


def type_label_for(name: str, is_directory: bool) -> str:
    """Human type label for an entry name.

    Args:
        name: Base name of the entry.
        is_directory: Whether the entry is a directory.

    Returns:
        "File folder" for directories, "<EXT> File" for files with an
        extension, "File" otherwise. Dotfiles have no extension.
    """
    if is_directory:
        return DIRECTORY_TYPE_LABEL
    extension = os.path.splitext(name)[1].lstrip(".")
    if not extension:
        return DEFAULT_FILE_TYPE_LABEL
    return f"{extension.upper()} File"


def display_label_for(name: str, full_path: str, parent_path: str, search_root: str | None) -> str:
    """Label shown for an entry: bare name at the search root, full path deeper."""
    if search_root is None or path_key(parent_path) == path_key(search_root):
        return name
    return full_path


def materialize(
    name: str,
    parent_path: str,
    stat_result: os.stat_result,
    *,
    is_directory: bool,
    search_root: str | None = None,
) -> Entry:
    """Build an Entry for a child of parent_path.

    Args:
        name: Base name of the child.
        parent_path: Directory containing the child.
        stat_result: Metadata already read for the child.
        is_directory: Whether the child is a directory.
        search_root: Root of the running search, None for plain listings.

    Returns:
        Immutable Entry.
    """
    full_path = os.path.join(parent_path, name)
    return Entry(
        name=name,
        full_path=full_path,
        is_directory=is_directory,
        size_bytes=0 if is_directory else stat_result.st_size,
        last_modified=datetime.fromtimestamp(stat_result.st_mtime),
        type_label=type_label_for(name, is_directory),
        parent_path=parent_path,
        display_label=display_label_for(name, full_path, parent_path, search_root),
    )


def volume_entry(mount_point: str, label: str | None, stat_result: os.stat_result) -> Entry:
    """Build the synthetic-root Entry for one mounted volume.

    Args:
        mount_point: Root directory of the volume (e.g. "C:\\" or "/mnt/data").
        label: Volume label, if the volume has one.
        stat_result: Metadata of the volume root.

    Returns:
        Directory Entry named "<identifier>" or "<identifier> (<label>)".
    """
    identifier = volume_identifier(mount_point)
    name = f"{identifier} ({label})" if label else identifier
    return Entry(
        name=name,
        full_path=mount_point,
        is_directory=True,
        size_bytes=0,
        last_modified=datetime.fromtimestamp(stat_result.st_mtime),
        type_label=VOLUME_TYPE_LABEL,
        parent_path=None,
    )


def volume_identifier(mount_point: str) -> str:
    """Identifier of a volume: drive name without trailing separator, or the mount point."""
    stripped = mount_point.rstrip("\\/")
    return stripped or mount_point
