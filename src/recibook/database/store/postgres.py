"""PostgreSQL JSONB document store.

Stores every collection in one table keyed by ``(collection, id)`` with the
document body in a JSONB column. Server timestamps are written as epoch
seconds from ``clock_timestamp()`` so ordering never depends on client clocks.
"""

from __future__ import annotations

import re
import uuid
from typing import TYPE_CHECKING, Any

import asyncpg
import orjson

from recibook.database.connection import get_database_pool
from recibook.database.store.exceptions import InvalidQueryError, PersistenceError
from recibook.database.store.protocol import (
    DocumentSnapshot,
    server_timestamp_fields,
)
from recibook.observability.logging import get_logger


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from asyncpg import Pool

    from recibook.database.store.protocol import FieldFilter, OrderBy

logger = get_logger(__name__)

# Same cap as Firestore so both backends batch identically
IN_FILTER_LIMIT = 10

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]{0,62}$")


def _encode(value: Any) -> str:
    return orjson.dumps(value).decode()


def _decode(value: Any) -> dict[str, Any]:
    if isinstance(value, (str, bytes)):
        return orjson.loads(value)
    return dict(value)


class PostgresDocumentStore:
    """DocumentStore backed by a JSONB table.

    Uses the global asyncpg pool from ``recibook.database.connection``
    unless a pool is injected.
    """

    in_filter_limit = IN_FILTER_LIMIT

    def __init__(self, pool: Pool | None = None, *, table: str = "documents") -> None:
        if not _IDENTIFIER.match(table):
            msg = f"Invalid table name: {table!r}"
            raise ValueError(msg)
        self._pool = pool
        self._table = table

    @property
    def pool(self) -> Pool:
        """Get the database connection pool."""
        if self._pool is not None:
            return self._pool
        return get_database_pool()

    async def initialize(self) -> None:
        """Create the documents table and its indexes if missing."""
        statements = (
            f"""
            CREATE TABLE IF NOT EXISTS {self._table} (
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data JSONB NOT NULL,
                PRIMARY KEY (collection, id)
            )
            """,
            f"CREATE INDEX IF NOT EXISTS {self._table}_data_idx "
            f"ON {self._table} USING GIN (data jsonb_path_ops)",
        )
        try:
            async with self.pool.acquire() as conn:
                for statement in statements:
                    await conn.execute(statement)
        except asyncpg.PostgresError as e:
            msg = f"Failed to prepare table {self._table}: {e}"
            raise PersistenceError(msg, operation="initialize") from e
        logger.info("PostgreSQL document store initialized", table=self._table)

    async def shutdown(self) -> None:
        # The pool belongs to recibook.database.connection
        logger.debug("PostgreSQL document store shutdown")

    async def _write(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        *,
        operation: str,
    ) -> None:
        stamped = server_timestamp_fields(data)
        body = {k: v for k, v in data.items() if k not in stamped}
        sql = f"""
            INSERT INTO {self._table} (collection, id, data)
            VALUES ($1, $2, $3::jsonb || (
                SELECT COALESCE(
                    jsonb_object_agg(f, extract(epoch FROM clock_timestamp())),
                    '{{}}'::jsonb
                )
                FROM unnest($4::text[]) AS f
            ))
            ON CONFLICT (collection, id) DO UPDATE SET data = EXCLUDED.data
        """
        try:
            async with self.pool.acquire() as conn:
                await conn.execute(sql, collection, doc_id, _encode(body), stamped)
        except asyncpg.PostgresError as e:
            raise PersistenceError(
                f"Failed to write {collection}/{doc_id}: {e}",
                collection=collection,
                operation=operation,
            ) from e

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        await self._write(collection, doc_id, data, operation="add")
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: Mapping[str, Any]
    ) -> None:
        await self._write(collection, doc_id, data, operation="set")

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        sql = f"SELECT id, data FROM {self._table} WHERE collection = $1 AND id = $2"
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(sql, collection, doc_id)
        except asyncpg.PostgresError as e:
            raise PersistenceError(
                f"Failed to read {collection}/{doc_id}: {e}",
                collection=collection,
                operation="get",
            ) from e
        if row is None:
            return None
        return DocumentSnapshot(id=row["id"], data=_decode(row["data"]))

    async def delete(self, collection: str, doc_id: str) -> None:
        sql = f"DELETE FROM {self._table} WHERE collection = $1 AND id = $2"
        try:
            async with self.pool.acquire() as conn:
                await conn.execute(sql, collection, doc_id)
        except asyncpg.PostgresError as e:
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
        params: list[Any] = [collection]
        clauses = ["collection = $1"]

        for f in filters:
            params.append(f.field)
            key = f"${len(params)}"
            if f.op == "==":
                params.append(_encode(f.value))
                clauses.append(f"data -> {key}::text = ${len(params)}::jsonb")
            elif f.op == "in":
                values = list(f.value)
                if not values:
                    return []
                if len(values) > self.in_filter_limit:
                    msg = (
                        f"'in' filter on {f.field} has {len(values)} values; "
                        f"at most {self.in_filter_limit} are accepted"
                    )
                    raise InvalidQueryError(
                        msg, collection=collection, operation="query"
                    )
                params.append([_encode(v) for v in values])
                clauses.append(f"data -> {key}::text = ANY(${len(params)}::jsonb[])")
            else:
                msg = f"Unsupported filter operator: {f.op}"
                raise InvalidQueryError(msg, collection=collection, operation="query")

        sql = f"SELECT id, data FROM {self._table} WHERE {' AND '.join(clauses)}"
        if order_by is not None:
            params.append(order_by.field)
            direction = "DESC" if order_by.descending else "ASC"
            sql += f" ORDER BY data -> ${len(params)}::text {direction} NULLS LAST, id"
        if limit is not None:
            params.append(limit)
            sql += f" LIMIT ${len(params)}"

        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(sql, *params)
        except asyncpg.PostgresError as e:
            raise PersistenceError(
                f"Failed to query {collection}: {e}",
                collection=collection,
                operation="query",
            ) from e

        return [DocumentSnapshot(id=row["id"], data=_decode(row["data"])) for row in rows]

    async def health_check(self) -> str:
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except RuntimeError:
            return "not_initialized"
        except Exception as e:
            logger.warning("PostgreSQL health check failed", error=str(e))
            return "unhealthy"
        return "healthy"
