"""
Abstract base classes for storage backends.

This module defines the record type and the contract that every
Record Store implementation must follow, enabling pluggable backends
for durable, ordered message persistence.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    Truncated to milliseconds, the finest precision every backend keeps,
    so a stored timestamp reads back equal to the one written.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from a backend."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return ensure_utc(value)


def _parse_required_timestamp(data: dict[str, Any], key: str) -> datetime:
    value = _parse_timestamp(data[key])
    if value is None:
        raise ValueError(f"Message {data.get('id')!r} has no {key}")
    return value


@dataclass
class MessageRecord:
    """
    A message posted on the board.

    This is the only entity the Record Store holds. `id` and `created_at`
    are assigned once by the service; `updated_at` stays None until the
    first update.
    """
    id: str
    title: str = ""
    body: str = ""
    attachment_url: str = ""
    created_at: datetime = field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "attachment_url": self.attachment_url,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MessageRecord":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            body=data.get("body") or "",
            attachment_url=data.get("attachment_url") or "",
            created_at=_parse_required_timestamp(data, "created_at"),
            updated_at=_parse_timestamp(data.get("updated_at")),
        )


class BaseRecordStore(ABC):
    """
    Abstract base class for the durable ordered message map.

    Keys are message ids, values are MessageRecord instances. Every
    implementation must survive process restarts and iterate values
    in ascending key order (plain code point order, independent of
    any database locale).

    Absence is never an error: get/remove return None for a missing key.
    """

    @abstractmethod
    async def setup(self) -> None:
        """
        Open the durable region (create table/collection/indexes).

        This should be idempotent - safe to call multiple times.
        """
        pass

    @abstractmethod
    async def insert(self, key: str, message: MessageRecord) -> Optional[MessageRecord]:
        """
        Store a message under `key`, overwriting any existing value (upsert).

        Returns the previous value if one existed, otherwise None.
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[MessageRecord]:
        """Get the message stored under `key`, or None."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> Optional[MessageRecord]:
        """
        Delete the entry under `key`.

        Returns the removed value, or None if nothing was stored.
        """
        pass

    @abstractmethod
    async def values(self) -> list[MessageRecord]:
        """
        Snapshot of all stored messages in ascending key order.

        The list is fully materialized, so later mutations of the store
        never affect a snapshot already returned.
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of stored messages."""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (connections, pools)."""
        pass
