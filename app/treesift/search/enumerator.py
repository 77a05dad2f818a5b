"""Single-directory enumeration.

Lists the immediate children of one directory, directories first and
each group sorted by name case-insensitively. This order is what gives
search results their within-directory ordering, so it is fixed.

Enumeration is best effort: a directory that cannot be read yields an
empty listing, and a child that vanishes or cannot be stat'ed between
listing and stat is left out. Nothing here raises OSError.
"""

import logging
import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path

from treesift.search.materializer import materialize, volume_entry
from treesift.search.models import ROOT_SENTINEL, Entry

logger = logging.getLogger(__name__)

_PROC_MOUNTS = Path("/proc/self/mounts")
_DISK_LABELS = Path("/dev/disk/by-label")

# Mount tables escape bytes as \ooo, udev link names as \xNN; other bytes are raw UTF-8.
_MOUNT_ESCAPE = re.compile(rb"\\([0-7]{3})")
_LABEL_ESCAPE = re.compile(rb"\\x([0-9a-fA-F]{2})")


@dataclass(frozen=True, slots=True)
class DirectoryListing:
    """Immediate children of one directory.

    Attributes:
        directories: Subdirectories, name-sorted case-insensitively.
        files: Files, name-sorted case-insensitively.
        ok: False when the directory itself could not be enumerated.
    """

    directories: tuple[Entry, ...] = ()
    files: tuple[Entry, ...] = ()
    ok: bool = True

    @property
    def entries(self) -> list[Entry]:
        """All children, directories before files."""
        return [*self.directories, *self.files]

    def __len__(self) -> int:
        return len(self.directories) + len(self.files)


def _name_order(entry: Entry) -> tuple[str, str]:
    return (entry.name.casefold(), entry.name)


def enumerate_directory(path: str, *, search_root: str | None = None) -> DirectoryListing:
    """Enumerate the immediate children of a directory.

    Args:
        path: Directory to enumerate.
        search_root: Root of the running search; controls display labels.

    Returns:
        DirectoryListing. Empty with ok=False if the directory cannot be
        read (permission denied, vanished, not a directory, too long).
        Entry paths are absolute even when ``path`` is relative.
    """
    path = os.path.abspath(path)
    if search_root:
        search_root = os.path.abspath(search_root)
    directories: list[Entry] = []
    files: list[Entry] = []

    try:
        with os.scandir(path) as it:
            for child in it:
                try:
                    is_directory = child.is_dir()
                    stat_result = child.stat()
                except OSError as e:
                    logger.debug("Skipping unreadable entry %s: %s", child.path, e)
                    continue

                entry = materialize(
                    child.name,
                    path,
                    stat_result,
                    is_directory=is_directory,
                    search_root=search_root,
                )
                if is_directory:
                    directories.append(entry)
                else:
                    files.append(entry)
    except OSError as e:
        logger.debug("Cannot enumerate directory %s: %s", path, e)
        return DirectoryListing(ok=False)

    directories.sort(key=_name_order)
    files.sort(key=_name_order)
    return DirectoryListing(directories=tuple(directories), files=tuple(files))


def list_directory(path: str | None) -> list[Entry]:
    """List one directory for display, or the mounted volumes for the root.

    Args:
        path: Directory to list. The empty string (or None) is the
            synthetic root and lists mounted volumes.

    Returns:
        Entries, directories first. Empty if the directory cannot be read.
    """
    if not path:
        return list_volumes()
    return enumerate_directory(path).entries


# =============================================================================
# Volumes
# =============================================================================


def _decode_escapes(value: str, pattern: re.Pattern[bytes], base: int) -> str:
    if "\\" not in value:
        return value
    raw = value.encode("utf-8", "surrogateescape")
    raw = pattern.sub(lambda m: bytes([int(m.group(1), base) & 0xFF]), raw)
    return raw.decode("utf-8", errors="replace")


def _unescape_mount_field(value: str) -> str:
    """Decode the octal escapes of a mount table field (``\\040`` is a space)."""
    return _decode_escapes(value, _MOUNT_ESCAPE, 8)


def _unescape_label(value: str) -> str:
    """Decode the ``\\xNN`` byte escapes udev uses in by-label link names."""
    return _decode_escapes(value, _LABEL_ESCAPE, 16)


def _posix_mounts() -> list[tuple[str, str]]:
    """(device, mount point) of every real block device, falling back to '/'."""
    try:
        lines = _PROC_MOUNTS.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return [("", "/")]

    mounts: list[tuple[str, str]] = []
    seen: set[str] = set()
    for line in lines:
        parts = line.split()
        if len(parts) < 2:
            continue
        device, mount_point = parts[0], _unescape_mount_field(parts[1])
        if not device.startswith("/dev/") or mount_point in seen:
            continue
        seen.add(mount_point)
        mounts.append((device, mount_point))

    return mounts or [("", "/")]


def _posix_labels() -> dict[str, str]:
    """Map resolved device paths to volume labels."""
    labels: dict[str, str] = {}
    try:
        links = list(_DISK_LABELS.iterdir())
    except OSError:
        return labels
    for link in links:
        labels[os.path.realpath(link)] = _unescape_label(link.name)
    return labels


def _volume_roots() -> list[tuple[str, str | None]]:
    """(mount point, label) for every mounted volume on this platform."""
    if sys.platform == "win32":
        return [(drive, None) for drive in os.listdrives()]

    labels = _posix_labels()
    return [
        (mount_point, labels.get(os.path.realpath(device)) if device else None)
        for device, mount_point in _posix_mounts()
    ]


def list_volumes() -> list[Entry]:
    """List mounted, ready volumes as synthetic root entries.

    A volume whose root cannot be stat'ed is not ready and is left out.

    Returns:
        Volume entries sorted by identifier.
    """
    volumes: list[Entry] = []
    for mount_point, label in _volume_roots():
        try:
            stat_result = os.stat(mount_point)
        except OSError as e:
            logger.debug("Volume %s not ready: %s", mount_point, e)
            continue
        volumes.append(volume_entry(mount_point, label, stat_result))

    volumes.sort(key=lambda v: v.full_path.casefold())
    return volumes


# =============================================================================
# Navigation helpers
# =============================================================================


def default_path() -> str:
    """Starting location for browsing: the synthetic all-volumes root."""
    return ROOT_SENTINEL


def path_exists(path: str | None) -> bool:
    """Check whether a path exists. The synthetic root always exists."""
    if not path:
        return True
    return os.path.exists(path)


def parent_path(path: str | None) -> str | None:
    """Parent location of a path for upward navigation.

    Returns:
        The containing directory; the synthetic root for a volume root;
        None for the synthetic root itself or a path that doesn't exist.
    """
    if not path or not path_exists(path):
        return None
    absolute = os.path.abspath(path)
    parent = os.path.dirname(absolute)
    if parent == absolute:
        return ROOT_SENTINEL
    return parent
