"""
Exception classes for songvocab.

Only NotFoundError, FetchFailedError, ConfigurationError and
PersistenceError ever reach the caller. InvalidModelOutputError is raised by
the response parser and recovered inside the extractor.

Exception Hierarchy:
    SongVocabError (base)
        NotFoundError - no song matched the query
        FetchFailedError - lyrics could not be retrieved or extracted
        ConfigurationError - a required credential is missing
        InvalidModelOutputError - model text holds no decodable JSON
        PersistenceError - the SQLite store failed
"""


class SongVocabError(Exception):
    """
    Base exception for all songvocab errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (query, url, status).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class NotFoundError(SongVocabError):
    """Raised when the lyrics search returns zero hits for a query."""
    pass


class FetchFailedError(SongVocabError):
    """
    Raised when the first search hit's lyrics cannot be retrieved.

    Common causes:
        - non-2xx response from the song metadata call or the lyrics page
        - transport errors (timeouts, DNS)
        - the page contains no lyrics container, or only empty ones
    """
    pass


class ConfigurationError(SongVocabError):
    """Raised when the model or lyrics API credential is not configured."""
    pass


class InvalidModelOutputError(SongVocabError):
    """Raised when the model's reply cannot be decoded as JSON."""
    pass


class PersistenceError(SongVocabError):
    """Raised when a read or write against the vocabulary store fails."""
    pass
