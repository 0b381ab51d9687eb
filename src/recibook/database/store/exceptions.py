"""Document store exceptions."""

from __future__ import annotations


class PersistenceError(Exception):
    """Raised when the underlying store fails to read or write.

    Carries the collection and operation for logging; the message is
    human-readable and safe to surface.
    """

    def __init__(
        self,
        message: str,
        *,
        collection: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.collection = collection
        self.operation = operation
        super().__init__(message)


class InvalidQueryError(PersistenceError):
    """Raised when a query cannot be expressed by the backend.

    For example an ``in`` filter with more values than the store accepts.
    """
