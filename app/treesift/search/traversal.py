"""Breadth-first name search over a directory tree.

The traversal keeps an explicit FIFO frontier instead of recursing, so
shallow matches surface before deep ones and the whole cursor can be
frozen into a TraversalState when the result cap is hit, then resumed
later without re-visiting directories or re-emitting matches.

Within one directory matches are emitted directories first, then files,
each in case-insensitive name order. Across directories they follow
frontier discovery order.
"""

import logging
import os
import threading
from collections import deque
from collections.abc import Callable

from treesift.search.enumerator import enumerate_directory
from treesift.search.models import (
    Entry,
    TraversalOutcome,
    TraversalResult,
    TraversalState,
    path_key,
)
from treesift.search.skip import SkipPredicate, never_skip

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
MatchCallback = Callable[[Entry], None]

DEFAULT_PROGRESS_EVERY_FOLDERS = 10
DEFAULT_PROGRESS_EVERY_FILES = 100


def name_matches(name: str, needle: str) -> bool:
    """Case-insensitive substring test of a base name against a folded query."""
    return needle in name.casefold()


class BreadthFirstTraversal:
    """One run of the traversal engine.

    Holds private mutable copies of a TraversalState while running and
    hands back a new frozen state when the run ends. Instances are single
    use and owned by exactly one thread.

    Args:
        root_path: Directory the search started from. Never name-tested
            itself; only its descendants are.
        query: Text to find in entry names (case-insensitive substring).
        skip: Predicate for directories that are never enumerated.
        on_progress: Called with (folders_checked, files_checked).
        on_match: Called once per match, synchronously, in emission order.
        cancel_event: Checked before each dequeue and each emission.
        initial_state: State to resume from instead of a fresh one.
        result_cap: Matches to emit before pausing; None for no cap.
        progress_every_folders: Report after this many expanded directories.
        progress_every_files: Report after this many checked files.
    """

    def __init__(
        self,
        root_path: str,
        query: str,
        *,
        skip: SkipPredicate | None = None,
        on_progress: ProgressCallback | None = None,
        on_match: MatchCallback | None = None,
        cancel_event: threading.Event | None = None,
        initial_state: TraversalState | None = None,
        result_cap: int | None = None,
        progress_every_folders: int = DEFAULT_PROGRESS_EVERY_FOLDERS,
        progress_every_files: int = DEFAULT_PROGRESS_EVERY_FILES,
    ) -> None:
        if result_cap is not None and result_cap < 1:
            msg = f"Result cap must be at least 1, got {result_cap}"
            raise ValueError(msg)

        self._root = root_path
        self._needle = query.casefold()
        self._skip = skip or never_skip
        self._on_progress = on_progress
        self._on_match = on_match
        self._cancel_event = cancel_event
        self._result_cap = result_cap
        self._progress_every_folders = max(1, progress_every_folders)
        self._progress_every_files = max(1, progress_every_files)

        state = initial_state or TraversalState.initial(root_path)
        self._frontier: deque[str] = deque(state.frontier)
        self._visited: set[str] = set(state.visited)
        self._folders_checked = state.folders_checked
        self._files_checked = state.files_checked
        self._pending: deque[Entry] = deque(state.pending_matches)
        self._emitted = 0
        self._reported = (self._folders_checked, self._files_checked)

    @property
    def cancelled(self) -> bool:
        """Whether the caller has asked the traversal to stop."""
        return self._cancel_event is not None and self._cancel_event.is_set()

    @property
    def cap_reached(self) -> bool:
        """Whether this run has emitted as many matches as the cap allows."""
        return self._result_cap is not None and self._emitted >= self._result_cap

    def run(self) -> TraversalResult:
        """Traverse until the frontier is exhausted, cancelled, or capped.

        Returns:
            TraversalResult with the final state and why the run ended.
        """
        self._emit_pending()

        while not self.cancelled and not self._pending and not self.cap_reached:
            if not self._frontier:
                return self._finish(TraversalOutcome.COMPLETED)
            self._expand(self._frontier.popleft())
            self._emit_pending()

        if self.cancelled:
            return self._finish(TraversalOutcome.CANCELLED)
        if self._pending or self._frontier:
            return self._finish(TraversalOutcome.PAUSED)
        return self._finish(TraversalOutcome.COMPLETED)

    def _expand(self, path: str) -> None:
        """Enumerate one frontier directory, enqueue its children, queue its matches."""
        key = path_key(os.path.realpath(path))
        if key in self._visited:
            return
        self._visited.add(key)

        if self._skip(path):
            logger.debug("Skipping excluded directory %s", path)
            return

        listing = enumerate_directory(path, search_root=self._root)
        if listing.ok or os.path.isdir(path):
            self._folders_checked += 1
        self._files_checked += len(listing.files)

        for directory in listing.directories:
            if name_matches(directory.name, self._needle):
                self._pending.append(directory)
            if not self._skip(directory.full_path):
                self._frontier.append(directory.full_path)

        for file in listing.files:
            if name_matches(file.name, self._needle):
                self._pending.append(file)

        self._maybe_report_progress()

    def _emit_pending(self) -> None:
        while self._pending and not self.cap_reached and not self.cancelled:
            entry = self._pending.popleft()
            if self._on_match is not None:
                self._on_match(entry)
            self._emitted += 1

    def _maybe_report_progress(self) -> None:
        last_folders, last_files = self._reported
        if (
            self._folders_checked - last_folders >= self._progress_every_folders
            or self._files_checked - last_files >= self._progress_every_files
        ):
            self._report_progress()

    def _report_progress(self) -> None:
        self._reported = (self._folders_checked, self._files_checked)
        if self._on_progress is not None:
            self._on_progress(self._folders_checked, self._files_checked)

    def _snapshot(self) -> TraversalState:
        return TraversalState(
            frontier=tuple(self._frontier),
            visited=frozenset(self._visited),
            folders_checked=self._folders_checked,
            files_checked=self._files_checked,
            pending_matches=tuple(self._pending),
        )

    def _finish(self, outcome: TraversalOutcome) -> TraversalResult:
        if outcome != TraversalOutcome.CANCELLED:
            self._report_progress()
        logger.debug(
            "Traversal of %s %s: %d emitted, %d folders, %d files, %d queued",
            self._root,
            outcome.value,
            self._emitted,
            self._folders_checked,
            self._files_checked,
            len(self._frontier),
        )
        return TraversalResult(state=self._snapshot(), outcome=outcome, emitted=self._emitted)


def traverse(
    root_path: str,
    query: str,
    *,
    skip: SkipPredicate | None = None,
    on_progress: ProgressCallback | None = None,
    on_match: MatchCallback | None = None,
    cancel_event: threading.Event | None = None,
    initial_state: TraversalState | None = None,
    result_cap: int | None = None,
    progress_every_folders: int = DEFAULT_PROGRESS_EVERY_FOLDERS,
    progress_every_files: int = DEFAULT_PROGRESS_EVERY_FILES,
) -> TraversalResult:
    """Search a directory tree breadth-first for names containing query.

    See BreadthFirstTraversal for the arguments. Callback exceptions
    propagate to the caller.

    Returns:
        TraversalResult. When its outcome is PAUSED, pass its state back
        as initial_state to continue the same traversal.
    """
    return BreadthFirstTraversal(
        root_path,
        query,
        skip=skip,
        on_progress=on_progress,
        on_match=on_match,
        cancel_event=cancel_event,
        initial_state=initial_state,
        result_cap=result_cap,
        progress_every_folders=progress_every_folders,
        progress_every_files=progress_every_files,
    ).run()
