"""Debounced search gateway.

Sits between a presentation layer that edits a query keystroke by
keystroke and the search engine. Each edit cancels whatever is running
or pending and schedules a new search after a quiet period, so at most
one session is ever live.

Callbacks handed to the gateway are wrapped with the identity of the
session that produced them and dropped once that session is no longer
the active one. Callbacks run on worker or timer threads and must not
call back into the gateway synchronously; marshal to your own thread.
"""

import logging
import threading
import uuid
from collections.abc import Callable, Iterable
from typing import Any

from treesift.core.settings import SearchSettings
from treesift.search.enumerator import list_directory
from treesift.search.errors import InvalidSearchRequest, InvalidSessionState
from treesift.search.models import ROOT_SENTINEL, Entry, SessionState, is_root_sentinel
from treesift.search.session import SearchSession, StateCallback
from treesift.search.skip import SkipPredicate
from treesift.search.traversal import MatchCallback, ProgressCallback, name_matches

logger = logging.getLogger(__name__)

TimerFactory = Callable[..., Any]


def filter_entries(entries: Iterable[Entry], query: str) -> list[Entry]:
    """Flat case-insensitive name filter over already-listed entries."""
    needle = query.casefold()
    return [entry for entry in entries if name_matches(entry.name, needle)]


class SearchGateway:
    """Coalesces rapid query edits into at most one active search.

    Args:
        on_progress: Called with (folders_checked, files_checked) of the
            active session.
        on_match: Called once per match of the active search.
        on_state_change: Called with each state of the active search.
        settings: Search settings (debounce delay, result cap, skip policy).
        skip: Directories never descended; defaults to the configured policy.
        timer_factory: Callable with threading.Timer's signature.
    """

    def __init__(
        self,
        *,
        on_progress: ProgressCallback | None = None,
        on_match: MatchCallback | None = None,
        on_state_change: StateCallback | None = None,
        settings: SearchSettings | None = None,
        skip: SkipPredicate | None = None,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._settings = settings or SearchSettings()
        self._skip = skip
        self._on_progress = on_progress
        self._on_match = on_match
        self._on_state_change = on_state_change
        self._timer_factory = timer_factory

        self._lock = threading.RLock()
        self._session: SearchSession | None = None
        self._active_id: str | None = None
        self._timer: Any = None
        self._pending: tuple[str, str] | None = None
        self._generation = 0

    @property
    def active_session(self) -> SearchSession | None:
        """The live session, if a deep search has started."""
        return self._session

    @property
    def active_id(self) -> str | None:
        """Identity of the search whose callbacks are currently delivered."""
        return self._active_id

    @property
    def has_pending(self) -> bool:
        """Whether a debounced search is waiting to start."""
        return self._pending is not None

    def set_query(self, root_path: str, query: str) -> None:
        """Record a query edit.

        Cancels the current search and any pending one. A blank query
        leaves nothing running; otherwise a new search starts once the
        debounce delay passes without another edit.

        Args:
            root_path: Directory being viewed; the synthetic root filters
                the volume list instead of searching.
            query: Current query text.
        """
        with self._lock:
            self._supersede()
            if not query or not query.strip():
                return

            self._generation += 1
            self._pending = (root_path, query)
            delay = self._settings.debounce_seconds
            if delay <= 0:
                self._fire(self._generation)
                return
            self._timer = self._timer_factory(delay, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()

    def navigate(self, root_path: str) -> None:
        """Leave the current location: cancel and forget any search."""
        with self._lock:
            logger.debug("Navigating to %r, clearing search", root_path)
            self._supersede()

    def flush(self) -> None:
        """Start the pending search now instead of waiting for the debounce delay."""
        with self._lock:
            if self._pending is None:
                return
            self._fire(self._generation)

    def continue_search(self) -> None:
        """Resume the active search after it paused at the result cap.

        Raises:
            InvalidSessionState: If there is no paused search.
        """
        with self._lock:
            if self._session is None:
                msg = "No active search to continue"
                raise InvalidSessionState(msg)
            self._session.resume()

    def cancel(self) -> None:
        """Stop the active search, keeping its identity so the cancellation is reported."""
        with self._lock:
            self._cancel_timer()
            self._pending = None
            if self._session is not None:
                self._session.cancel()

    def close(self) -> None:
        """Cancel everything and stop delivering callbacks."""
        with self._lock:
            self._supersede()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _supersede(self) -> None:
        self._cancel_timer()
        self._pending = None
        self._active_id = None
        session, self._session = self._session, None
        if session is not None:
            session.cancel()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            root_path, query = self._pending
            self._pending = None
            self._cancel_timer()

            if is_root_sentinel(root_path):
                self._filter_volumes(query)
                return
            self._start_session(root_path, query)

    def _filter_volumes(self, query: str) -> None:
        token = uuid.uuid4().hex
        self._active_id = token
        matches = filter_entries(list_directory(ROOT_SENTINEL), query)
        logger.debug("Filtered volume list for %r: %d matches", query, len(matches))
        for entry in matches:
            if self._active_id != token:
                return
            if self._on_match is not None:
                self._on_match(entry)
        if self._on_state_change is not None and self._active_id == token:
            self._on_state_change(SessionState.COMPLETED)

    def _start_session(self, root_path: str, query: str) -> None:
        holder: dict[str, str] = {}

        def current() -> bool:
            return self._active_id is not None and self._active_id == holder.get("id")

        def guarded_progress(folders_checked: int, files_checked: int) -> None:
            if current() and self._on_progress is not None:
                self._on_progress(folders_checked, files_checked)

        def guarded_match(entry: Entry) -> None:
            if current() and self._on_match is not None:
                self._on_match(entry)

        def guarded_state(state: SessionState) -> None:
            if current() and self._on_state_change is not None:
                self._on_state_change(state)

        session = SearchSession(
            root_path,
            query,
            on_progress=guarded_progress,
            on_match=guarded_match,
            on_state_change=guarded_state,
            skip=self._skip,
            settings=self._settings,
        )
        holder["id"] = session.session_id
        self._session = session
        self._active_id = session.session_id
        try:
            session.start()
        except InvalidSearchRequest as e:
            logger.info("Search not started: %s", e)
            self._session = None
            self._active_id = None
