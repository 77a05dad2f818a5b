"""Search domain models.

This module defines the immutable records handed across the search
engine's seams: the entries surfaced to callers, the suspendable
traversal cursor, and the states a search session moves through.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# The synthetic root: lists mounted volumes instead of a directory.
ROOT_SENTINEL = ""

DIRECTORY_TYPE_LABEL = "File folder"
VOLUME_TYPE_LABEL = "Local Disk"


def is_root_sentinel(path: str | None) -> bool:
    """Check whether a path designates the synthetic all-volumes root."""
    return path is None or path == ROOT_SENTINEL


def path_key(path: str) -> str:
    """Comparison key for a directory path.

    Case-folded on platforms where paths are case-insensitive, so the
    visited set and the display-label rule compare paths the way the
    filesystem does.
    """
    return os.path.normcase(os.path.normpath(path))


class SessionState(str, Enum):
    """Lifecycle state of a search session.

    Attributes:
        IDLE: Created, not started.
        RUNNING: A worker is traversing.
        PAUSED: The result cap was reached; the traversal can resume.
        COMPLETED: The frontier was exhausted.
        CANCELLED: Cancelled by the caller; partial state discarded.
    """

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the session can no longer produce callbacks."""
        return self in (SessionState.COMPLETED, SessionState.CANCELLED)


class TraversalOutcome(str, Enum):
    """Why a traversal run returned."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class Entry:
    """One file, directory, or volume surfaced by listing or search.

    Attributes:
        name: Base name, or the volume label for synthetic root entries.
        full_path: Absolute path.
        is_directory: True for directories and volumes.
        size_bytes: Byte length for files, 0 for directories.
        last_modified: Last write time in local time.
        type_label: "File folder", "<EXT> File", or "Local Disk".
        parent_path: Containing directory, None only for volumes.
        display_label: name when the parent is the search root, else full_path.
    """

    name: str
    full_path: str
    is_directory: bool
    size_bytes: int
    last_modified: datetime
    type_label: str
    parent_path: str | None
    display_label: str = ""

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Entry name cannot be empty"
            raise ValueError(msg)
        if not self.full_path:
            msg = "Entry path cannot be empty"
            raise ValueError(msg)
        if self.parent_path is not None:
            expected = os.path.join(self.parent_path, self.name)
            if path_key(expected) != path_key(self.full_path):
                msg = f"Path {self.full_path!r} is not {self.name!r} inside {self.parent_path!r}"
                raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)
        if not self.display_label:
            object.__setattr__(self, "display_label", self.name)

    @property
    def is_volume(self) -> bool:
        """Whether this entry is a mounted volume of the synthetic root."""
        return self.parent_path is None

    def to_dict(self) -> dict[str, object]:
        """Serialize the entry for JSON output."""
        return {
            "name": self.name,
            "path": self.full_path,
            "is_directory": self.is_directory,
            "size_bytes": self.size_bytes,
            "last_modified": self.last_modified.isoformat(),
            "type": self.type_label,
            "parent_path": self.parent_path,
            "display_label": self.display_label,
        }


@dataclass(frozen=True, slots=True)
class TraversalState:
    """Suspendable cursor of one breadth-first traversal.

    A traversal works on private mutable copies of these fields and hands
    back a new value, so a paused state has exactly one owner at a time.

    Attributes:
        frontier: Pending directory paths in discovery order.
        visited: path_key of every directory already expanded.
        folders_checked: Directories expanded so far.
        files_checked: Files name-tested so far.
        pending_matches: Matches found in the directory that hit the result
            cap but not yet emitted; emitted first on resume.
    """

    frontier: tuple[str, ...]
    visited: frozenset[str] = field(default_factory=frozenset)
    folders_checked: int = 0
    files_checked: int = 0
    pending_matches: tuple[Entry, ...] = ()

    def __post_init__(self) -> None:
        """Validate counters after initialization."""
        if self.folders_checked < 0 or self.files_checked < 0:
            msg = "Traversal counters cannot be negative"
            raise ValueError(msg)

    @classmethod
    def initial(cls, root_path: str) -> "TraversalState":
        """Create a fresh state seeded with the search root."""
        return cls(frontier=(root_path,))

    @property
    def exhausted(self) -> bool:
        """Whether nothing is left to expand or emit."""
        return not self.frontier and not self.pending_matches


@dataclass(frozen=True, slots=True)
class TraversalResult:
    """What a traversal run returns.

    Attributes:
        state: Cursor after the run; resume from it when outcome is PAUSED.
        outcome: Why the run ended.
        emitted: Matches delivered to the match callback during this run.
    """

    state: TraversalState
    outcome: TraversalOutcome
    emitted: int = 0

    @property
    def paused(self) -> bool:
        """Whether the run stopped at the result cap."""
        return self.outcome == TraversalOutcome.PAUSED
