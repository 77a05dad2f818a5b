"""Library entry points consumed by presentation layers.

Thin functions over the enumerator and SearchSession that express the
"not started" outcome as None instead of an exception.
"""

import logging

from treesift.core.settings import SearchSettings
from treesift.search.enumerator import list_directory
from treesift.search.errors import InvalidSearchRequest
from treesift.search.session import SearchSession, StateCallback
from treesift.search.skip import SkipPredicate
from treesift.search.traversal import MatchCallback, ProgressCallback

logger = logging.getLogger(__name__)

__all__ = ["cancel_search", "list_directory", "resume_search", "start_search"]


def start_search(
    root_path: str,
    query: str,
    on_progress: ProgressCallback | None = None,
    on_match: MatchCallback | None = None,
    result_cap: int | None = None,
    *,
    on_state_change: StateCallback | None = None,
    skip: SkipPredicate | None = None,
    settings: SearchSettings | None = None,
) -> SearchSession | None:
    """Start a deep search on a worker thread.

    Args:
        root_path: Existing directory to search.
        query: Text to find in entry names.
        on_progress: Called with (folders_checked, files_checked).
        on_match: Called once per match, in breadth-first order.
        result_cap: Matches per run before the session pauses.
        on_state_change: Called with each new session state.
        skip: Directories never descended; defaults to the configured policy.
        settings: Search settings; defaults to SearchSettings().

    Returns:
        The running session, or None if the request was rejected (empty
        query, synthetic root, missing directory). No callback fires when
        None is returned.
    """
    session = SearchSession(
        root_path,
        query,
        on_progress=on_progress,
        on_match=on_match,
        on_state_change=on_state_change,
        result_cap=result_cap,
        skip=skip,
        settings=settings,
    )
    try:
        session.start()
    except InvalidSearchRequest as e:
        logger.info("Search not started: %s", e)
        return None
    return session


def cancel_search(handle: SearchSession | None) -> None:
    """Cancel a search. Safe to call repeatedly, after completion, or with None."""
    if handle is not None:
        handle.cancel()


def resume_search(handle: SearchSession) -> None:
    """Resume a paused search.

    Raises:
        InvalidSessionState: If the session is not paused.
    """
    handle.resume()
