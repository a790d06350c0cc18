"""
Storage factory for creating storage backend instances.

This module provides factory functions to create the appropriate
Record Store implementation based on configuration, and an async
context manager that ties a store's lifetime to a block of code.
"""

from contextlib import asynccontextmanager
from enum import Enum
from typing import TYPE_CHECKING, AsyncIterator

from core.logging import get_logger
from core.storage.base import BaseRecordStore


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MONGODB = "mongodb"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_record_store(settings: "Settings") -> BaseRecordStore:
    """
    Create a record store instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured record store instance (not yet initialized)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.SQLITE:
        from core.storage.sql import SQLRecordStore

        logger.info(
            "Creating SQLite record store",
            path=settings.sqlite_path,
            table=settings.message_store_name,
        )
        return SQLRecordStore(
            connection_string=settings.sqlite_url,
            table_name=settings.message_store_name,
        )

    elif backend == StorageBackend.POSTGRES:
        from core.storage.sql import SQLRecordStore

        logger.info(
            "Creating PostgreSQL record store",
            table=settings.message_store_name,
        )
        return SQLRecordStore(
            connection_string=settings.postgres_async_url,
            table_name=settings.message_store_name,
        )

    elif backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBRecordStore

        logger.info(
            "Creating MongoDB record store",
            database=settings.mongodb_database,
            collection=settings.message_store_name,
        )
        return MongoDBRecordStore(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            collection_name=settings.message_store_name,
        )

    else:
        raise ValueError(f"Unsupported backend: {backend}")


@asynccontextmanager
async def open_record_store(settings: "Settings") -> AsyncIterator[BaseRecordStore]:
    """
    Open a record store for the duration of a block.

    Usage:
        async with open_record_store(settings) as store:
            await store.insert(message.id, message)
    """
    store = create_record_store(settings)
    await store.setup()
    try:
        yield store
    finally:
        await store.close()
