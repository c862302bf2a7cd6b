"""Redis implementation of session invite tokens."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING

from synced_playback.domain.sessions.repository import InviteTokenRepository
from synced_playback.domain.shared.constants import PlaybackConstants, RedisKeys

if TYPE_CHECKING:
    from redis.asyncio import Redis


class RedisInviteTokenRepository(InviteTokenRepository):
    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def get(self, session_id: str) -> str | None:
        return await self._redis.get(RedisKeys.invite_token(session_id))

    async def create(self, session_id: str) -> str:
        key = RedisKeys.invite_token(session_id)
        token = secrets.token_urlsafe(PlaybackConstants.INVITE_TOKEN_BYTES)
        # NX keeps an existing token valid.
        if await self._redis.set(key, token, nx=True):
            return token
        existing = await self._redis.get(key)
        return existing if existing is not None else token

    async def delete(self, session_id: str) -> None:
        await self._redis.delete(RedisKeys.invite_token(session_id))
