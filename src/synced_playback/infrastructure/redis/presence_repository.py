"""Redis implementation of listener presence."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from synced_playback.domain.sessions.repository import PresenceRepository
from synced_playback.domain.shared.constants import RedisKeys
from synced_playback.domain.shared.datetime_utils import from_epoch_ms, to_epoch_ms

if TYPE_CHECKING:
    from redis.asyncio import Redis


class RedisPresenceRepository(PresenceRepository):
    """Sorted set per session: member = user id, score = last ping in epoch ms."""

    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def ping(self, session_id: str, user_id: str, at: datetime) -> datetime | None:
        key = RedisKeys.listener_presences(session_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.zscore(key, user_id)
            pipe.zadd(key, {user_id: to_epoch_ms(at)})
            previous, _ = await pipe.execute()
        return from_epoch_ms(previous) if previous is not None else None

    async def active_since(self, session_id: str, since: datetime) -> list[str]:
        # "(" makes the lower bound exclusive.
        return list(
            await self._redis.zrevrangebyscore(
                RedisKeys.listener_presences(session_id), "+inf", f"({to_epoch_ms(since)}"
            )
        )

    async def clear(self, session_id: str) -> None:
        await self._redis.delete(RedisKeys.listener_presences(session_id))
