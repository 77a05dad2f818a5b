"""Search engine exceptions."""


class SearchError(Exception):
    """Base exception for search engine errors."""


class InvalidSearchRequest(SearchError):
    """Raised when a search cannot start.

    Covers an empty query, the synthetic all-volumes root, and a root that
    does not exist or is not a directory.
    """


class InvalidSessionState(SearchError):
    """Raised when a session operation is invalid in its current state.

    Resuming a session that is not paused is a programmer error.
    """
