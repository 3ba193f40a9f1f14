"""Errors raised by the search orchestrator."""


class SearchError(Exception):
    """Base exception for search operations."""
    pass


class InvalidQueryError(SearchError, ValueError):
    """Raised when the query is missing or blank; nothing is retrieved."""
    pass


class RetrievalError(SearchError):
    """Raised when query embedding or similarity search fails."""
    pass


class TopicCardError(SearchError):
    """Raised when the selected topic's verses cannot be fetched."""
    pass
