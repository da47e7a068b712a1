class TrackerError(Exception):
    """Base exception for the volunteer tracker."""


class QueryError(TrackerError):
    """Raised when rows could not be retrieved from the data store."""

    def __init__(self, query: str, message: str = "") -> None:
        self.query = query
        super().__init__(f"{query} failed: {message}" if message else f"{query} failed")


class DataIntegrityWarning(UserWarning):
    """Issued when the store holds more than one record for a volunteer and date."""
