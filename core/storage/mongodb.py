"""
MongoDB storage backend implementation.

Provides a MongoDB Record Store: one collection, with the message id
used as the document `_id`.
"""

from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from core.logging import get_logger
from core.storage.base import BaseRecordStore, MessageRecord


logger = get_logger(__name__)


class MongoDBRecordStore(BaseRecordStore):
    """
    MongoDB-based Record Store.

    Documents are keyed by `_id` (the message id). String `_id` values
    sort by binary comparison, which gives the ascending key order the
    store promises.
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "message_board",
        collection_name: str = "messages",
    ):
        """
        Initialize MongoDB record store.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database name
            collection_name: Collection holding the id -> message map
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._collection_name = collection_name
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    async def setup(self) -> None:
        """Initialize connection. The `_id` index always exists."""
        if self._client is not None:
            return

        self._client = AsyncIOMotorClient(self._connection_string, tz_aware=True)
        self._db = self._client[self._database_name]

        logger.info(
            "MongoDB record store initialized",
            database=self._database_name,
            collection=self._collection_name,
        )

    @property
    def _collection(self):
        """Get the messages collection."""
        if self._db is None:
            raise RuntimeError(
                "Record store not initialized. Call setup() first."
            )
        return self._db[self._collection_name]

    @staticmethod
    def _to_document(message: MessageRecord) -> dict[str, Any]:
        doc = message.to_dict()
        doc["_id"] = doc.pop("id")
        return doc

    @staticmethod
    def _from_document(doc: Optional[dict[str, Any]]) -> Optional[MessageRecord]:
        if doc is None:
            return None
        doc["id"] = doc.pop("_id")
        return MessageRecord.from_dict(doc)

    async def insert(self, key: str, message: MessageRecord) -> Optional[MessageRecord]:
        """Create or replace a message (upsert), returning the prior value."""
        if key != message.id:
            raise ValueError(f"Key {key!r} does not match message id {message.id!r}")

        previous = await self._collection.find_one_and_replace(
            {"_id": key},
            self._to_document(message),
            upsert=True,
            return_document=ReturnDocument.BEFORE,
        )

        logger.debug(
            "Message record upserted",
            message_id=key,
            replaced=previous is not None,
        )
        return self._from_document(previous)

    async def get(self, key: str) -> Optional[MessageRecord]:
        """Get a message by id."""
        doc = await self._collection.find_one({"_id": key})
        return self._from_document(doc)

    async def remove(self, key: str) -> Optional[MessageRecord]:
        """Delete a message by id, returning what was removed."""
        doc = await self._collection.find_one_and_delete({"_id": key})
        if doc is not None:
            logger.debug("Message record removed", message_id=key)
        return self._from_document(doc)

    async def values(self) -> list[MessageRecord]:
        """All messages ordered by id ascending."""
        cursor = self._collection.find({}).sort("_id", ASCENDING)
        docs = await cursor.to_list(length=None)
        return [self._from_document(doc) for doc in docs]

    async def count(self) -> int:
        return await self._collection.count_documents({})

    async def ping(self) -> bool:
        if self._client is None:
            raise RuntimeError(
                "Record store not initialized. Call setup() first."
            )
        await self._client.admin.command("ping")
        return True

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
        logger.info("MongoDB record store closed")
