"""Directories a deep search never descends into.

The default policy excludes the platform system directory (``Windows`` on
Windows) because enumerating it takes a long time and rarely yields
anything a user is looking for. Which names and patterns are excluded is
configuration, not knowledge baked into the traversal.
"""

import fnmatch
import ntpath
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from treesift.core.settings import SearchSettings

SkipPredicate = Callable[[str], bool]


def _last_segment(path: str) -> str:
    """Final path component, tolerant of trailing separators and either separator style."""
    return ntpath.basename(path.rstrip("\\/")) if path else ""


class SkipPolicy:
    """Decides which directories are excluded from traversal entirely.

    Args:
        dir_names: Directory names matched case-insensitively against the
            last segment of a path.
        patterns: Glob patterns matched against the whole path. Patterns
            starting with ~ are expanded to the user's home directory.
    """

    def __init__(
        self,
        dir_names: Iterable[str] = (),
        patterns: Iterable[str] = (),
    ) -> None:
        self._names = frozenset(name.casefold() for name in dir_names if name)
        home = str(Path.home())
        self._patterns = tuple(
            os.path.normcase(home + p[1:] if p.startswith("~") else p) for p in patterns if p
        )

    @classmethod
    def from_settings(cls, settings: SearchSettings) -> "SkipPolicy":
        """Build the policy configured in search settings."""
        return cls(dir_names=settings.skip_dir_names, patterns=settings.skip_patterns)

    @property
    def is_empty(self) -> bool:
        """Whether the policy never skips anything."""
        return not self._names and not self._patterns

    def __call__(self, path: str) -> bool:
        """Check whether a directory must not be enumerated.

        Args:
            path: Directory path.

        Returns:
            True if the directory's name or path is excluded.
        """
        if self._names and _last_segment(path).casefold() in self._names:
            return True
        if self._patterns:
            candidate = os.path.normcase(path)
            return any(fnmatch.fnmatch(candidate, pattern) for pattern in self._patterns)
        return False

    def __repr__(self) -> str:
        return f"<SkipPolicy names={sorted(self._names)} patterns={list(self._patterns)}>"


def never_skip(_path: str) -> bool:
    """Skip predicate that excludes nothing."""
    return False
