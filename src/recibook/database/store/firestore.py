"""Cloud Firestore document store.

Thin adapter over ``google.cloud.firestore.AsyncClient`` that speaks the
``DocumentStore`` protocol and translates Google API failures into
``PersistenceError``.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1 import FieldFilter as FirestoreFieldFilter

from recibook.database.store.exceptions import InvalidQueryError, PersistenceError
from recibook.database.store.protocol import SERVER_TIMESTAMP, DocumentSnapshot
from recibook.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from recibook.database.store.protocol import FieldFilter, OrderBy

logger = get_logger(__name__)

# Maximum number of values accepted by an "in" filter
IN_FILTER_LIMIT = 10


def _to_firestore(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: firestore.SERVER_TIMESTAMP if value is SERVER_TIMESTAMP else value
        for key, value in data.items()
    }


class FirestoreDocumentStore:
    """DocumentStore backed by Cloud Firestore.

    The client is created lazily in ``initialize`` unless one is injected,
    which is how tests supply a mock.
    """

    in_filter_limit = IN_FILTER_LIMIT

    def __init__(
        self,
        client: firestore.AsyncClient | None = None,
        *,
        project: str | None = None,
        database: str = "(default)",
    ) -> None:
        self._client = client
        self._project = project
        self._database = database

    @property
    def client(self) -> firestore.AsyncClient:
        """The live Firestore client."""
        if self._client is None:
            msg = "Firestore client not initialized. Call initialize() first."
            raise RuntimeError(msg)
        return self._client

    async def initialize(self) -> None:
        if self._client is None:
            self._client = firestore.AsyncClient(
                project=self._project, database=self._database
            )
        logger.info(
            "Firestore document store initialized",
            project=self._project,
            database=self._database,
        )

    async def shutdown(self) -> None:
        if self._client is not None:
            result = self._client.close()
            if inspect.isawaitable(result):
                await result
            self._client = None
        logger.debug("Firestore document store shutdown")

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        try:
            _, ref = await self.client.collection(collection).add(_to_firestore(data))
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceError(
                f"Failed to add document to {collection}: {e}",
                collection=collection,
                operation="add",
            ) from e
        return ref.id

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        try:
            snap = await self.client.collection(collection).document(doc_id).get()
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceError(
                f"Failed to read {collection}/{doc_id}: {e}",
                collection=collection,
                operation="get",
            ) from e
        if not snap.exists:
            return None
        return DocumentSnapshot(id=snap.id, data=snap.to_dict() or {})

    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any]
    ) -> None:
        try:
            await self.client.collection(collection).document(doc_id).set(
                _to_firestore(data)
            )
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceError(
                f"Failed to write {collection}/{doc_id}: {e}",
                collection=collection,
                operation="set",
            ) from e

    async def delete(self, collection: str, doc_id: str) -> None:
        try:
            await self.client.collection(collection).document(doc_id).delete()
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceError(
                f"Failed to delete {collection}/{doc_id}: {e}",
                collection=collection,
                operation="delete",
            ) from e

    async def query(
        self,
        collection: str,
        *,
        filters: Sequence[FieldFilter] = (),
        order_by: OrderBy | None = None,
        limit: int | None = None,
    ) -> list[DocumentSnapshot]:
        query: Any = self.client.collection(collection)
        for f in filters:
            if f.op == "in" and not f.value:
                # Firestore rejects empty "in" lists; nothing can match
                return []
            if f.op == "in" and len(f.value) > self.in_filter_limit:
                msg = (
                    f"'in' filter on {f.field} has {len(f.value)} values; "
                    f"Firestore accepts at most {self.in_filter_limit}"
                )
                raise InvalidQueryError(msg, collection=collection, operation="query")
            query = query.where(filter=FirestoreFieldFilter(f.field, f.op, f.value))
        if order_by is not None:
            direction = (
                firestore.Query.DESCENDING
                if order_by.descending
                else firestore.Query.ASCENDING
            )
            query = query.order_by(order_by.field, direction=direction)
        if limit is not None:
            query = query.limit(limit)

        try:
            return [
                DocumentSnapshot(id=snap.id, data=snap.to_dict() or {})
                async for snap in query.stream()
            ]
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceError(
                f"Failed to query {collection}: {e}",
                collection=collection,
                operation="query",
            ) from e

    async def health_check(self) -> str:
        if self._client is None:
            return "not_initialized"
        try:
            await self._client.collection("users").limit(1).get()
        except Exception as e:
            logger.warning("Firestore health check failed", error=str(e))
            return "unhealthy"
        return "healthy"
