"""Document store protocol and its exceptions.

Backends live in ``firestore`` and ``postgres`` and are imported lazily by
``recibook.database.connection.build_document_store``.
"""

from recibook.database.store.exceptions import InvalidQueryError, PersistenceError
from recibook.database.store.protocol import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStore,
    FieldFilter,
    OrderBy,
)


__all__ = [
    "SERVER_TIMESTAMP",
    "DocumentSnapshot",
    "DocumentStore",
    "FieldFilter",
    "InvalidQueryError",
    "OrderBy",
    "PersistenceError",
]
