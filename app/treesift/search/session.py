"""Search session controller.

A SearchSession owns one user-visible search: it validates the request,
runs the traversal on a dedicated worker thread, pauses when the result
cap is hit, resumes from the retained TraversalState, and cancels
cooperatively.

State machine::

    IDLE -> RUNNING -> COMPLETED | CANCELLED
            RUNNING <-> PAUSED

Callbacks run on the worker thread. Every callback is delivered while
holding the session lock and after re-checking the cancel signal, so once
cancel() returns no further callback is made. Callers that may have
queued callbacks onto another thread before cancelling must still filter
by session_id.
"""

import logging
import os
import threading
import uuid
from collections.abc import Callable

from treesift.core.settings import SearchSettings
from treesift.search.errors import InvalidSearchRequest, InvalidSessionState
from treesift.search.models import Entry, SessionState, TraversalState
from treesift.search.skip import SkipPolicy, SkipPredicate
from treesift.search.traversal import MatchCallback, ProgressCallback, traverse

logger = logging.getLogger(__name__)

StateCallback = Callable[[SessionState], None]


def validate_request(root_path: str | None, query: str | None) -> None:
    """Check that a deep search can run.

    Args:
        root_path: Directory to search.
        query: Text to find in entry names.

    Raises:
        InvalidSearchRequest: If the query is empty or blank, the root is the
            synthetic all-volumes root, or the root is not an existing directory.
    """
    if not query or not query.strip():
        msg = "Search query cannot be empty"
        raise InvalidSearchRequest(msg)
    if not root_path:
        msg = "Cannot deep-search the all-volumes root; filter its listing instead"
        raise InvalidSearchRequest(msg)
    if not os.path.isdir(root_path):
        msg = f"Not an existing directory: {root_path}"
        raise InvalidSearchRequest(msg)


class SearchSession:
    """One logical search operation.

    Args:
        root_path: Directory to search. Made absolute on construction.
        query: Text to find in entry names.
        on_progress: Called with (folders_checked, files_checked).
        on_match: Called once per match, in breadth-first order.
        on_state_change: Called with the new state on every transition.
        result_cap: Matches per run before pausing. Defaults to the
            configured cap.
        skip: Directories never descended. Defaults to the configured policy.
        settings: Search settings. Defaults to SearchSettings().
    """

    def __init__(
        self,
        root_path: str,
        query: str,
        *,
        on_progress: ProgressCallback | None = None,
        on_match: MatchCallback | None = None,
        on_state_change: StateCallback | None = None,
        result_cap: int | None = None,
        skip: SkipPredicate | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self._settings = settings or SearchSettings()
        self._root_path = os.path.abspath(root_path) if root_path else root_path
        self._query = query
        self._result_cap = result_cap if result_cap is not None else self._settings.result_cap
        self._skip = skip if skip is not None else SkipPolicy.from_settings(self._settings)
        self._on_progress = on_progress
        self._on_match = on_match
        self._on_state_change = on_state_change

        self.session_id = uuid.uuid4().hex

        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._cancel_event = threading.Event()
        self._worker: threading.Thread | None = None
        self._traversal_state: TraversalState | None = None
        self._results_emitted = 0
        self._folders_checked = 0
        self._files_checked = 0

    def __repr__(self) -> str:
        return (
            f"<SearchSession id={self.session_id[:8]} root={self._root_path!r} "
            f"query={self._query!r} state={self._state.value}>"
        )

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def query(self) -> str:
        return self._query

    @property
    def result_cap(self) -> int:
        return self._result_cap

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def results_emitted(self) -> int:
        """Matches delivered across all runs of this session."""
        return self._results_emitted

    @property
    def folders_checked(self) -> int:
        return self._folders_checked

    @property
    def files_checked(self) -> int:
        return self._files_checked

    @property
    def traversal_state(self) -> TraversalState | None:
        """The retained cursor while paused, None otherwise."""
        return self._traversal_state

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """Validate the request and start traversing on a worker thread.

        Raises:
            InvalidSearchRequest: If the request cannot run; no callback fires.
            InvalidSessionState: If the session was already started.
        """
        with self._lock:
            if self._state != SessionState.IDLE:
                msg = f"Cannot start a session that is {self._state.value}"
                raise InvalidSessionState(msg)
            validate_request(self._root_path, self._query)
            logger.info(
                "Starting search %s for %r in %s",
                self.session_id[:8],
                self._query,
                self._root_path,
            )
            self._launch(TraversalState.initial(self._root_path))

    def resume(self) -> None:
        """Continue a paused traversal from its retained state.

        Raises:
            InvalidSessionState: If the session is not paused.
        """
        with self._lock:
            if self._state != SessionState.PAUSED or self._traversal_state is None:
                msg = f"Cannot resume a session that is {self._state.value}"
                raise InvalidSessionState(msg)
            state, self._traversal_state = self._traversal_state, None
            logger.info("Resuming search %s", self.session_id[:8])
            self._launch(state)

    def cancel(self) -> None:
        """Stop the search. Idempotent, and a no-op once completed."""
        with self._lock:
            if self._state.is_terminal:
                return
            self._cancel_event.set()
            self._traversal_state = None
            logger.info("Cancelled search %s", self.session_id[:8])
            self._set_state(SessionState.CANCELLED)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current worker finishes.

        Args:
            timeout: Seconds to wait, None to wait indefinitely.

        Returns:
            True if no worker is running afterwards.
        """
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        return not worker.is_alive()

    # -------------------------------------------------------------------------
    # Worker
    # -------------------------------------------------------------------------

    def _launch(self, initial_state: TraversalState) -> None:
        self._cancel_event = threading.Event()
        self._set_state(SessionState.RUNNING)
        self._worker = threading.Thread(
            target=self._run,
            args=(initial_state, self._cancel_event),
            name=f"treesift-search-{self.session_id[:8]}",
            daemon=True,
        )
        self._worker.start()

    def _run(self, initial_state: TraversalState, cancel_event: threading.Event) -> None:
        def deliver_match(entry: Entry) -> None:
            with self._lock:
                if cancel_event.is_set():
                    return
                self._results_emitted += 1
                if self._on_match is not None:
                    self._on_match(entry)

        def deliver_progress(folders_checked: int, files_checked: int) -> None:
            with self._lock:
                if cancel_event.is_set():
                    return
                self._folders_checked = folders_checked
                self._files_checked = files_checked
                if self._on_progress is not None:
                    self._on_progress(folders_checked, files_checked)

        try:
            result = traverse(
                self._root_path,
                self._query,
                skip=self._skip,
                on_progress=deliver_progress,
                on_match=deliver_match,
                cancel_event=cancel_event,
                initial_state=initial_state,
                result_cap=self._result_cap,
                progress_every_folders=self._settings.progress_every_folders,
                progress_every_files=self._settings.progress_every_files,
            )
        except Exception:
            logger.exception("Search %s failed", self.session_id[:8])
            self.cancel()
            return

        with self._lock:
            if cancel_event.is_set():
                return
            self._folders_checked = result.state.folders_checked
            self._files_checked = result.state.files_checked
            if result.paused:
                self._traversal_state = result.state
                logger.info(
                    "Search %s paused after %d results", self.session_id[:8], self._results_emitted
                )
                self._set_state(SessionState.PAUSED)
            else:
                logger.info(
                    "Search %s completed: %d results, %d folders, %d files",
                    self.session_id[:8],
                    self._results_emitted,
                    self._folders_checked,
                    self._files_checked,
                )
                self._set_state(SessionState.COMPLETED)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
