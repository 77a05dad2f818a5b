"""Deep filesystem name search.

This package exports the directory listing, the breadth-first traversal
engine, the search session controller and the debounced gateway.
"""

from treesift.search.api import cancel_search, resume_search, start_search
from treesift.search.enumerator import list_directory, list_volumes
from treesift.search.errors import InvalidSearchRequest, InvalidSessionState, SearchError
from treesift.search.gateway import SearchGateway, filter_entries
from treesift.search.models import (
    ROOT_SENTINEL,
    Entry,
    SessionState,
    TraversalOutcome,
    TraversalResult,
    TraversalState,
)
from treesift.search.session import SearchSession
from treesift.search.skip import SkipPolicy
from treesift.search.traversal import traverse

__all__ = [
    "ROOT_SENTINEL",
    "Entry",
    "InvalidSearchRequest",
    "InvalidSessionState",
    "SearchError",
    "SearchGateway",
    "SearchSession",
    "SessionState",
    "SkipPolicy",
    "TraversalOutcome",
    "TraversalResult",
    "TraversalState",
    "cancel_search",
    "filter_entries",
    "list_directory",
    "list_volumes",
    "resume_search",
    "start_search",
    "traverse",
]
