"""
Case-insensitive substring search over message titles and bodies.

There is no persistent index: every call scans a fresh snapshot of the
store, so cost is linear in the number of messages and their text size.
"""

from typing import Iterable, Optional

from core.logging import get_logger
from core.storage import BaseRecordStore, MessageRecord
from manager.errors import InvalidInputError


logger = get_logger(__name__)


def search_messages(
    records: Iterable[MessageRecord],
    query: Optional[str],
) -> list[MessageRecord]:
    """
    Filter records whose title or body contains `query`, ignoring case.

    Input order is preserved.

    Raises:
        InvalidInputError: If query is None or empty
    """
    if not query:
        raise InvalidInputError("Query parameter is required.")

    needle = query.lower()
    return [
        record
        for record in records
        if needle in record.title.lower() or needle in record.body.lower()
    ]


class MessageSearch:
    """Read-only search view over a record store."""

    def __init__(self, store: BaseRecordStore):
        self._store = store

    async def search(self, query: Optional[str]) -> list[MessageRecord]:
        """
        Search the current store snapshot, in ascending id order.

        An empty or missing query is rejected before the store is read.
        """
        if not query:
            raise InvalidInputError("Query parameter is required.")

        snapshot = await self._store.values()
        matches = search_messages(snapshot, query)

        logger.debug(
            "Search completed",
            query=query,
            scanned=len(snapshot),
            matched=len(matches),
        )
        return matches
