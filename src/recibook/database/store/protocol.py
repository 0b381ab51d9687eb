"""Document store protocol.

Defines the small surface the repositories rely on: add, get, set, delete
and query-by-equality with a single sort key. Backends (Firestore, PostgreSQL
JSONB) implement it interchangeably.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


class _ServerTimestamp:
    """Sentinel replaced by the store's own clock at write time."""

    _instance: _ServerTimestamp | None = None

    def __new__(cls) -> _ServerTimestamp:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()

FilterOp = Literal["==", "in"]


@dataclass(frozen=True, slots=True)
class FieldFilter:
    """A single equality (``==``) or membership (``in``) condition."""

    field: str
    op: FilterOp
    value: Any


@dataclass(frozen=True, slots=True)
class OrderBy:
    """Sort specification for a query."""

    field: str
    descending: bool = False


@dataclass(slots=True)
class DocumentSnapshot:
    """A document id with its stored fields."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Fields merged with the id, the shape callers consume."""
        return {"id": self.id, **self.data}


def server_timestamp_fields(data: Mapping[str, Any]) -> list[str]:
    """Names of the fields holding the SERVER_TIMESTAMP sentinel."""
    return [key for key, value in data.items() if value is SERVER_TIMESTAMP]


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document store backends.

    All methods raise ``PersistenceError`` when the backend fails.
    """

    in_filter_limit: int

    async def initialize(self) -> None:
        """Acquire client resources (pools, channels)."""
        ...

    async def shutdown(self) -> None:
        """Release client resources."""
        ...

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert a document under a store-generated id and return the id."""
        ...

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        """Fetch one document, or None when it does not exist."""
        ...

    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any]
    ) -> None:
        """Create or fully overwrite the document at ``doc_id``."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete the document at ``doc_id``; deleting a missing one is a no-op."""
        ...

    async def query(
        self,
        collection: str,
        *,
        filters: Sequence[FieldFilter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        """Return documents matching every filter, in ``order_by`` order."""
        ...

    async def health_check(self) -> str:
        """Return "healthy", "unhealthy" or "not_initialized"."""
        ...
