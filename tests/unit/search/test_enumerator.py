"""Unit tests for single-directory enumeration.

Tests for listing order, failure handling, volumes, and navigation helpers.
"""

# pyright: reportPrivateUsage=false

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from treesift.search import enumerator
from treesift.search.enumerator import (
    _posix_labels,
    _posix_mounts,
    _unescape_label,
    _unescape_mount_field,
    default_path,
    enumerate_directory,
    list_directory,
    list_volumes,
    parent_path,
    path_exists,
)


class TestEnumerateDirectory:
    """Tests for enumerate_directory function."""

    def test_directories_before_files_name_sorted(self, tmp_path: Path) -> None:
        """Directories come first, each group sorted case-insensitively."""
        for name in ("beta", "Alpha"):
            (tmp_path / name).mkdir()
        for name in ("zeta.txt", "Eta.txt", "delta.txt"):
            (tmp_path / name).write_text("")

        listing = enumerate_directory(str(tmp_path))

        assert listing.ok
        assert [e.name for e in listing.directories] == ["Alpha", "beta"]
        assert [e.name for e in listing.files] == ["delta.txt", "Eta.txt", "zeta.txt"]
        assert [e.name for e in listing.entries] == [
            "Alpha",
            "beta",
            "delta.txt",
            "Eta.txt",
            "zeta.txt",
        ]
        assert len(listing) == 5

    def test_missing_directory_is_empty_not_ok(self, tmp_path: Path) -> None:
        """A directory that cannot be read yields an empty listing."""
        listing = enumerate_directory(str(tmp_path / "missing"))
        assert not listing.ok
        assert listing.entries == []

    def test_file_path_is_empty_not_ok(self, tmp_path: Path) -> None:
        """Enumerating a file yields an empty listing instead of raising."""
        target = tmp_path / "f.txt"
        target.write_text("")
        assert not enumerate_directory(str(target)).ok

    def test_unstattable_child_skipped(self, tmp_path: Path) -> None:
        """A dangling symlink is left out of the listing."""
        (tmp_path / "real.txt").write_text("")
        os.symlink(tmp_path / "gone", tmp_path / "dangling")

        listing = enumerate_directory(str(tmp_path))

        assert [e.name for e in listing.entries] == ["real.txt"]

    def test_search_root_sets_display_labels(self, tmp_path: Path) -> None:
        """Children of a non-root directory get full-path labels."""
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "x.txt").write_text("")

        listing = enumerate_directory(str(sub), search_root=str(tmp_path))

        assert listing.files[0].display_label == str(sub / "x.txt")


class TestListDirectory:
    """Tests for list_directory function."""

    def test_lists_directory(self, tmp_path: Path) -> None:
        """A real path lists its children."""
        (tmp_path / "d").mkdir()
        (tmp_path / "f").write_text("")
        assert [e.name for e in list_directory(str(tmp_path))] == ["d", "f"]

    def test_root_sentinel_lists_volumes(self) -> None:
        """The empty string lists mounted volumes."""
        with patch.object(enumerator, "list_volumes", return_value=[]) as mock_volumes:
            assert list_directory("") == []
        mock_volumes.assert_called_once_with()

    def test_unreadable_directory_is_empty(self, tmp_path: Path) -> None:
        """An unreadable directory lists as empty."""
        assert list_directory(str(tmp_path / "nope")) == []

    def test_relative_path_gives_absolute_entries(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Listing a relative path yields absolute entry paths."""
        (tmp_path / "a.txt").write_text("")
        monkeypatch.chdir(tmp_path)

        (entry,) = list_directory(".")

        assert os.path.isabs(entry.full_path)
        assert entry.full_path == str(tmp_path / "a.txt")
        assert entry.parent_path == str(tmp_path)


class TestVolumes:
    """Tests for volume discovery."""

    def test_unescape_mount_field(self) -> None:
        """Octal escapes in mount tables are decoded."""
        assert _unescape_mount_field("/mnt/my\\040disk") == "/mnt/my disk"
        assert _unescape_mount_field("/plain") == "/plain"

    def test_non_latin_mount_point(self, tmp_path: Path) -> None:
        """Raw UTF-8 next to octal escapes decodes to the real mount point."""
        mounts = tmp_path / "mounts"
        mounts.write_text("/dev/sdb1 /media/u/Мой\\040диск ext4 rw 0 0\n", encoding="utf-8")

        with patch.object(enumerator, "_PROC_MOUNTS", mounts):
            assert _posix_mounts() == [("/dev/sdb1", "/media/u/Мой диск")]

    def test_list_volumes_with_non_latin_mount_point(self, tmp_path: Path) -> None:
        """Listing volumes does not fail on a non-Latin mount point."""
        volume = tmp_path / "Мой диск"
        volume.mkdir()
        escaped = str(volume).replace(" ", "\\040")
        mounts = tmp_path / "mounts"
        mounts.write_text(f"/dev/sdb1 {escaped} ext4 rw 0 0\n", encoding="utf-8")

        with (
            patch.object(enumerator, "_PROC_MOUNTS", mounts),
            patch.object(enumerator, "_DISK_LABELS", tmp_path / "no-labels"),
        ):
            volumes = list_directory("")

        assert [v.full_path for v in volumes] == [str(volume)]

    def test_label_byte_escapes_are_utf8(self) -> None:
        """udev \\xNN escapes are bytes of a UTF-8 label."""
        assert _unescape_label("\\xd0\\x9c\\xd0\\xbe\\xd0\\xb9\\x20disk") == "Мой disk"
        assert _unescape_label("Мой\\x20диск") == "Мой диск"
        assert _unescape_label("DATA") == "DATA"

    def test_posix_labels_decodes_link_names(self, tmp_path: Path) -> None:
        """Labels are read from by-label link names."""
        device = tmp_path / "sdb1"
        device.write_text("")
        by_label = tmp_path / "by-label"
        by_label.mkdir()
        (by_label / "Backup\\x20Диск").symlink_to(device)

        with patch.object(enumerator, "_DISK_LABELS", by_label):
            labels = _posix_labels()

        assert labels == {os.path.realpath(device): "Backup Диск"}

    def test_posix_mounts_filters_virtual_filesystems(self, tmp_path: Path) -> None:
        """Only block devices are volumes, each mount point once."""
        mounts = tmp_path / "mounts"
        mounts.write_text(
            "proc /proc proc rw 0 0\n"
            "/dev/sda1 / ext4 rw 0 0\n"
            "tmpfs /run tmpfs rw 0 0\n"
            "/dev/sdb1 /mnt/my\\040data ext4 rw 0 0\n"
            "/dev/sda1 / ext4 rw 0 0\n"
        )
        with patch.object(enumerator, "_PROC_MOUNTS", mounts):
            result = _posix_mounts()

        assert result == [("/dev/sda1", "/"), ("/dev/sdb1", "/mnt/my data")]

    def test_posix_mounts_fallback(self, tmp_path: Path) -> None:
        """Without a readable mount table the filesystem root is used."""
        with patch.object(enumerator, "_PROC_MOUNTS", tmp_path / "missing"):
            assert _posix_mounts() == [("", "/")]

    def test_list_volumes_skips_unready(self, tmp_path: Path) -> None:
        """Volumes whose root cannot be stat'ed are left out."""
        roots = [(str(tmp_path), "Data"), (str(tmp_path / "offline"), None)]
        with patch.object(enumerator, "_volume_roots", return_value=roots):
            volumes = list_volumes()

        assert len(volumes) == 1
        assert volumes[0].name == f"{tmp_path} (Data)"
        assert volumes[0].type_label == "Local Disk"
        assert volumes[0].parent_path is None


class TestNavigation:
    """Tests for navigation helpers."""

    def test_default_path_is_root(self) -> None:
        """Browsing starts at the synthetic root."""
        assert default_path() == ""

    def test_root_always_exists(self) -> None:
        """The synthetic root exists."""
        assert path_exists("")
        assert path_exists(None)

    def test_path_exists(self, tmp_path: Path) -> None:
        """Real paths are checked on disk."""
        assert path_exists(str(tmp_path))
        assert not path_exists(str(tmp_path / "missing"))

    def test_parent_of_directory(self, tmp_path: Path) -> None:
        """The parent of a directory is its containing directory."""
        sub = tmp_path / "sub"
        sub.mkdir()
        assert parent_path(str(sub)) == str(tmp_path)

    def test_parent_of_volume_root_is_sentinel(self) -> None:
        """Going up from a volume root reaches the synthetic root."""
        assert parent_path(os.path.abspath(os.sep)) == ""

    def test_parent_of_root_or_missing_is_none(self, tmp_path: Path) -> None:
        """The synthetic root and missing paths have no parent."""
        assert parent_path("") is None
        assert parent_path(str(tmp_path / "missing")) is None
