"""Redis implementation of now-playing reactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from synced_playback.domain.playback.repository import ReactionRepository
from synced_playback.domain.shared.constants import RedisKeys

if TYPE_CHECKING:
    from redis.asyncio import Redis


class RedisReactionRepository(ReactionRepository):
    """Hash per (session, uid): field = user id, value = reaction symbol."""

    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def set(self, session_id: str, uid: str, user_id: str, reaction: str) -> None:
        await self._redis.hset(RedisKeys.now_playing_reactions(session_id, uid), user_id, reaction)

    async def remove(self, session_id: str, uid: str, user_id: str) -> None:
        await self._redis.hdel(RedisKeys.now_playing_reactions(session_id, uid), user_id)

    async def all(self, session_id: str, uid: str) -> dict[str, str]:
        return dict(await self._redis.hgetall(RedisKeys.now_playing_reactions(session_id, uid)))
