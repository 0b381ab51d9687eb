"""Store lifecycle management.

This module provides:
- The asyncpg pool used by the PostgreSQL document store
- Construction of the configured ``DocumentStore`` backend
- Health reporting for the readiness probe
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import asyncpg

from recibook.core.config import StoreBackend, get_settings
from recibook.observability.logging import get_logger


if TYPE_CHECKING:
    from asyncpg import Pool

    from recibook.core.config import Settings
    from recibook.database.store.protocol import DocumentStore

logger = get_logger(__name__)

# Global connection pool
_pool: Pool | None = None


async def init_database_pool() -> None:
    """Initialize the PostgreSQL connection pool and verify it with SELECT 1."""
    global _pool  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing database connection pool",
        host=settings.database.host,
        port=settings.database.port,
        database=settings.database.name,
    )

    _pool = await asyncpg.create_pool(
        host=settings.database.host,
        port=settings.database.port,
        database=settings.database.name,
        user=settings.database.user,
        password=settings.DATABASE_PASSWORD or None,
        min_size=settings.database.min_pool_size,
        max_size=settings.database.max_pool_size,
        command_timeout=settings.database.command_timeout,
        ssl=settings.database.ssl if settings.database.ssl else None,
    )

    try:
        async with _pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        logger.info("Database connection established successfully")
    except asyncpg.PostgresError:
        logger.exception("Failed to connect to database")
        raise


async def close_database_pool() -> None:
    """Close the PostgreSQL connection pool if one is open."""
    global _pool  # noqa: PLW0603

    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database connection pool closed")


def get_database_pool() -> Pool:
    """Get the database connection pool.

    Raises:
        RuntimeError: If pool is not initialized.
    """
    if _pool is None:
        msg = "Database pool not initialized. Call init_database_pool() first."
        raise RuntimeError(msg)
    return _pool


def build_document_store(settings: Settings | None = None) -> DocumentStore:
    """Create the document store selected by ``store.backend``."""
    settings = settings or get_settings()

    if settings.store.backend == StoreBackend.POSTGRES:
        from recibook.database.store.postgres import PostgresDocumentStore

        return PostgresDocumentStore(table=settings.database.table)

    from recibook.database.store.firestore import FirestoreDocumentStore

    return FirestoreDocumentStore(
        project=settings.firestore.project,
        database=settings.firestore.database,
    )


async def open_document_store(settings: Settings | None = None) -> DocumentStore:
    """Open backend connections and return an initialized store."""
    settings = settings or get_settings()
    if settings.store.backend == StoreBackend.POSTGRES:
        await init_database_pool()

    store = build_document_store(settings)
    await store.initialize()
    return store


async def close_document_store(store: DocumentStore | None) -> None:
    """Shut the store down and release the pool it may be using."""
    if store is not None:
        await store.shutdown()
    await close_database_pool()


async def check_store_health(store: DocumentStore | None) -> dict[str, str]:
    """Report document store health for the readiness probe."""
    if store is None:
        return {"document_store": "not_initialized"}
    return {"document_store": await store.health_check()}
