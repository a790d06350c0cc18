"""
消息服务 - 管理留言板消息的完整生命周期。

作为 API 层与 Record Store 之间的桥梁，负责分配 id 与时间戳、
合并部分更新字段，并把存储结果转换为 找到/未找到 的返回值。
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from core.logging import get_logger
from core.storage import BaseRecordStore, MessageRecord, utc_now
from manager.search import MessageSearch


logger = get_logger(__name__)


@dataclass
class MessageFields:
    """
    Caller-editable message fields.

    None means "not provided": on create the default is used, on update
    the stored value is kept. id, created_at and updated_at are never
    caller-controlled.
    """
    title: Optional[str] = None
    body: Optional[str] = None
    attachment_url: Optional[str] = None

    def merge_into(self, record: MessageRecord) -> MessageRecord:
        """Return a copy of `record` with every provided field replaced."""
        changes = {
            name: value
            for name, value in (
                ("title", self.title),
                ("body", self.body),
                ("attachment_url", self.attachment_url),
            )
            if value is not None
        }
        return replace(record, **changes)


def _new_message_id() -> str:
    return str(uuid.uuid4())


class MessageService:
    """
    留言板消息服务。

    - 创建消息（服务端分配 id 与 createdAt）
    - 查询、列出、搜索消息
    - 部分更新（updatedAt 始终由服务端设置）
    - 删除消息

    未找到的消息以 None 返回，从不抛出异常。
    写操作通过同一把 asyncio.Lock 串行化，保证读-改-写更新的原子性。
    """

    def __init__(
        self,
        store: BaseRecordStore,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        初始化消息服务。

        Args:
            store: 已完成 setup() 的 Record Store
            clock: 可选的时间来源（默认当前 UTC 时间）
            id_factory: 可选的 id 生成器（默认 uuid4）
        """
        self._store = store
        self._clock = clock or utc_now
        self._id_factory = id_factory or _new_message_id
        self._search = MessageSearch(store)
        self._write_lock = asyncio.Lock()

    async def create(self, fields: Optional[MessageFields] = None) -> MessageRecord:
        """创建新消息，返回包含服务端字段的完整记录。"""
        fields = fields or MessageFields()

        async with self._write_lock:
            message = fields.merge_into(
                MessageRecord(
                    id=self._id_factory(),
                    created_at=self._clock(),
                    updated_at=None,
                )
            )
            await self._store.insert(message.id, message)

        logger.info(
            "Message created",
            message_id=message.id,
            title=message.title,
        )
        return message

    async def get(self, message_id: str) -> Optional[MessageRecord]:
        """按 id 获取消息，不存在时返回 None。"""
        return await self._store.get(message_id)

    async def update(
        self,
        message_id: str,
        fields: MessageFields,
    ) -> Optional[MessageRecord]:
        """合并部分字段到已有消息并刷新 updatedAt，不存在时返回 None。"""
        async with self._write_lock:
            existing = await self._store.get(message_id)
            if existing is None:
                logger.info("Update skipped, message not found", message_id=message_id)
                return None

            updated = replace(
                fields.merge_into(existing),
                updated_at=self._next_updated_at(existing),
            )
            await self._store.insert(message_id, updated)

        logger.info(
            "Message updated",
            message_id=message_id,
            updated_at=updated.updated_at.isoformat(),
        )
        return updated

    async def delete(self, message_id: str) -> Optional[MessageRecord]:
        """删除消息并返回被删除的记录，不存在时返回 None。"""
        async with self._write_lock:
            removed = await self._store.remove(message_id)

        if removed is None:
            logger.info("Delete skipped, message not found", message_id=message_id)
        else:
            logger.info("Message deleted", message_id=message_id)
        return removed

    async def list(self) -> list[MessageRecord]:
        """按 id 升序返回全部消息。"""
        return await self._store.values()

    async def search(self, query: Optional[str]) -> list[MessageRecord]:
        """在标题与正文中做大小写不敏感的子串搜索。"""
        return await self._search.search(query)

    def _next_updated_at(self, existing: MessageRecord) -> datetime:
        """当前时间，但绝不早于 createdAt 或上一次的 updatedAt。"""
        candidates = [self._clock(), existing.created_at]
        if existing.updated_at is not None:
            candidates.append(existing.updated_at)
        return max(candidates)
