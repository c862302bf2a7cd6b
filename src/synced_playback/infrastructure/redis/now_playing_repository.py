"""Redis implementation of the now-playing state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from synced_playback.domain.playback.entities import NowPlayingState
from synced_playback.domain.playback.repository import NowPlayingRepository
from synced_playback.domain.shared.constants import RedisKeys
from synced_playback.domain.shared.datetime_utils import UtcDateTime, to_epoch_ms

if TYPE_CHECKING:
    from redis.asyncio import Redis


class RedisNowPlayingRepository(NowPlayingRepository):
    """Stores the state as a hash at ``nowPlaying:{id}:state``.

    ``commit`` replaces the hash and re-arms the session's entry in the skip
    schedule inside one MULTI/EXEC.
    """

    def __init__(self, client: Redis, skip_schedule_key: str = RedisKeys.SKIP_SCHEDULE) -> None:
        self._redis = client
        self._skip_schedule_key = skip_schedule_key

    async def get(self, session_id: str) -> NowPlayingState | None:
        raw = await self._redis.hgetall(RedisKeys.now_playing_state(session_id))
        if not raw:
            return None
        return NowPlayingState(
            playing_index=int(raw["playing_index"]),
            playing_uid=raw["playing_uid"],
            played_at=UtcDateTime.from_iso(raw["played_at"]).dt,
            ended_at=UtcDateTime.from_iso(raw["ended_at"]).dt,
        )

    async def commit(self, session_id: str, state: NowPlayingState) -> None:
        key = RedisKeys.now_playing_state(session_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            pipe.hset(
                key,
                mapping={
                    "playing_index": state.playing_index,
                    "playing_uid": state.playing_uid,
                    "played_at": UtcDateTime(state.played_at).iso,
                    "ended_at": UtcDateTime(state.ended_at).iso,
                },
            )
            pipe.zadd(self._skip_schedule_key, {session_id: to_epoch_ms(state.ended_at)})
            await pipe.execute()

    async def remove(self, session_id: str) -> None:
        await self._redis.delete(RedisKeys.now_playing_state(session_id))
