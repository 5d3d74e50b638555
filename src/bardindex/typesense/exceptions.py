"""Typesense access exceptions."""


class SearchIndexError(Exception):
    """Base exception for search index errors."""


class ConfigurationError(SearchIndexError):
    """Raised when the index client configuration is invalid."""


class ConnectionError(SearchIndexError):
    """Raised when the Typesense service cannot be reached."""


class QueryError(SearchIndexError):
    """Raised when a call to Typesense fails or returns a malformed response."""


class DocumentNotFoundError(SearchIndexError):
    """Raised when a requested document does not exist."""


class PlayNotFoundError(DocumentNotFoundError):
    """Raised when no play matches the requested id."""
