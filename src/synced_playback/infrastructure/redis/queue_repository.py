"""Redis implementation of the session queue.

A list of uids (``queue:{id}:list``) keeps the order; a hash
(``queue:{id}:data``) maps each uid to its JSON item.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from synced_playback.domain.playback.entities import QueueItem
from synced_playback.domain.playback.repository import QueueRepository
from synced_playback.domain.shared.constants import RedisKeys

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisQueueRepository(QueueRepository):
    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def push(self, session_id: str, items: Sequence[QueueItem]) -> int:
        if not items:
            return await self.length(session_id)

        with_uids = [item.ensure_uid() for item in items]
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.hset(
                RedisKeys.queue_data(session_id),
                mapping={item.uid: item.model_dump_json() for item in with_uids},
            )
            pipe.rpush(RedisKeys.queue_list(session_id), *[item.uid for item in with_uids])
            results = await pipe.execute()
        return int(results[-1])

    async def length(self, session_id: str) -> int:
        return int(await self._redis.llen(RedisKeys.queue_list(session_id)))

    async def uid_at(self, session_id: str, index: int) -> str | None:
        if index < 0:
            return None
        return await self._redis.lindex(RedisKeys.queue_list(session_id), index)

    async def index_of(self, session_id: str, uid: str) -> int | None:
        position = await self._redis.lpos(RedisKeys.queue_list(session_id), uid)
        return int(position) if position is not None else None

    async def get_item(self, session_id: str, uid: str) -> QueueItem | None:
        raw = await self._redis.hget(RedisKeys.queue_data(session_id), uid)
        return QueueItem.model_validate_json(raw) if raw else None

    async def item_at(self, session_id: str, index: int) -> QueueItem | None:
        uid = await self.uid_at(session_id, index)
        if uid is None:
            return None
        return await self.get_item(session_id, uid)

    async def range(self, session_id: str, start: int = 0, stop: int = -1) -> list[QueueItem]:
        uids = await self._redis.lrange(RedisKeys.queue_list(session_id), start, stop)
        if not uids:
            return []
        raws = await self._redis.hmget(RedisKeys.queue_data(session_id), uids)
        items: list[QueueItem] = []
        for uid, raw in zip(uids, raws, strict=True):
            if raw is None:
                logger.warning("Queue of session %s lists uid %s without data", session_id, uid)
                continue
            items.append(QueueItem.model_validate_json(raw))
        return items

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(RedisKeys.queue_list(session_id), RedisKeys.queue_data(session_id))
