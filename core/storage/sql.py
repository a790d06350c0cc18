"""
SQL storage backend implementation.

Provides a Record Store over SQLAlchemy async engines for:
- SQLite (via aiosqlite, default single-file durable store)
- PostgreSQL (via asyncpg)
"""

import re
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import DateTime, String, bindparam, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from core.logging import get_logger
from core.storage.base import BaseRecordStore, MessageRecord


logger = get_logger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_COLUMNS = "id, title, body, attachment_url, created_at, updated_at"

# Typed result columns so both dialects hand back datetime objects
_RESULT_TYPES = {
    "id": String(),
    "title": String(),
    "body": String(),
    "attachment_url": String(),
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
}


class SQLRecordStore(BaseRecordStore):
    """
    SQL-based Record Store.

    One table keyed by message id. Ordering is the primary key's byte
    order: SQLite's default BINARY collation, and the "C" collation on
    PostgreSQL so the result never depends on the server locale.
    """

    def __init__(
        self,
        connection_string: str,
        table_name: str = "messages",
        echo: bool = False,
    ):
        """
        Initialize SQL record store.

        Args:
            connection_string: SQLAlchemy async URL (sqlite+aiosqlite or postgresql+asyncpg)
            table_name: Table holding the id -> message map
            echo: Whether to echo SQL statements
        """
        if not _TABLE_NAME_RE.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")

        self._connection_string = connection_string
        self._table = table_name
        self._echo = echo
        self._engine: Optional[AsyncEngine] = None

    @property
    def dialect(self) -> str:
        """Backend dialect name derived from the connection string."""
        return make_url(self._connection_string).get_backend_name()

    async def setup(self) -> None:
        """Initialize connection and create table if not exists."""
        if self._engine is not None:
            return

        engine_kwargs: dict[str, Any] = {"echo": self._echo}
        if self.dialect == "sqlite":
            self._ensure_sqlite_directory()
        else:
            engine_kwargs.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

        self._engine = create_async_engine(self._connection_string, **engine_kwargs)

        if self.dialect == "postgresql":
            key_type = 'TEXT COLLATE "C"'
            ts_type = "TIMESTAMP WITH TIME ZONE"
        else:
            key_type = "TEXT"
            ts_type = "TIMESTAMP"

        async with self._engine.begin() as conn:
            await conn.execute(text(f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    id {key_type} PRIMARY KEY,
                    title TEXT NOT NULL DEFAULT '',
                    body TEXT NOT NULL DEFAULT '',
                    attachment_url TEXT NOT NULL DEFAULT '',
                    created_at {ts_type} NOT NULL,
                    updated_at {ts_type}
                )
            """))

        logger.info(
            "SQL record store initialized",
            dialect=self.dialect,
            table=self._table,
        )

    def _ensure_sqlite_directory(self) -> None:
        database = make_url(self._connection_string).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    @property
    def _ready_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError(
                "Record store not initialized. Call setup() first."
            )
        return self._engine

    def _select_one(self):
        return text(
            f"SELECT {_COLUMNS} FROM {self._table} WHERE id = :id"
        ).columns(**_RESULT_TYPES)

    async def _fetch(self, conn: AsyncConnection, key: str) -> Optional[MessageRecord]:
        result = await conn.execute(self._select_one(), {"id": key})
        row = result.mappings().first()
        if row is None:
            return None
        return self._to_record(row)

    @staticmethod
    def _to_record(row: Any) -> MessageRecord:
        return MessageRecord.from_dict(dict(row))

    async def insert(self, key: str, message: MessageRecord) -> Optional[MessageRecord]:
        """Create or overwrite a message (upsert), returning the prior value."""
        if key != message.id:
            raise ValueError(f"Key {key!r} does not match message id {message.id!r}")

        upsert = text(f"""
            INSERT INTO {self._table} ({_COLUMNS})
            VALUES (:id, :title, :body, :attachment_url, :created_at, :updated_at)
            ON CONFLICT (id) DO UPDATE SET
                title = excluded.title,
                body = excluded.body,
                attachment_url = excluded.attachment_url,
                created_at = excluded.created_at,
                updated_at = excluded.updated_at
        """).bindparams(
            bindparam("created_at", type_=DateTime(timezone=True)),
            bindparam("updated_at", type_=DateTime(timezone=True)),
        )

        async with self._ready_engine.begin() as conn:
            previous = await self._fetch(conn, key)
            await conn.execute(upsert, message.to_dict())

        logger.debug(
            "Message record upserted",
            message_id=key,
            replaced=previous is not None,
        )
        return previous

    async def get(self, key: str) -> Optional[MessageRecord]:
        """Get a message by id."""
        async with self._ready_engine.connect() as conn:
            return await self._fetch(conn, key)

    async def remove(self, key: str) -> Optional[MessageRecord]:
        """Delete a message by id, returning what was removed."""
        async with self._ready_engine.begin() as conn:
            previous = await self._fetch(conn, key)
            if previous is None:
                return None
            await conn.execute(
                text(f"DELETE FROM {self._table} WHERE id = :id"),
                {"id": key},
            )

        logger.debug("Message record removed", message_id=key)
        return previous

    async def values(self) -> list[MessageRecord]:
        """All messages ordered by id ascending."""
        async with self._ready_engine.connect() as conn:
            result = await conn.execute(
                text(
                    f"SELECT {_COLUMNS} FROM {self._table} ORDER BY id ASC"
                ).columns(**_RESULT_TYPES)
            )
            return [self._to_record(row) for row in result.mappings().all()]

    async def count(self) -> int:
        async with self._ready_engine.connect() as conn:
            result = await conn.execute(text(f"SELECT COUNT(*) FROM {self._table}"))
            return int(result.scalar_one())

    async def ping(self) -> bool:
        async with self._ready_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def close(self) -> None:
        """Dispose of the database engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
        logger.info("SQL record store closed", table=self._table)
