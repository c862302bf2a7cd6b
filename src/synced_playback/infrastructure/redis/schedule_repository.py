"""Redis sorted-set schedules.

Member = session id, score = deadline in epoch milliseconds. ZREM is the claim:
only the caller that removed the member owns the due work. ``claim_due`` adds
a WATCH on the set so the removal only happens while the deadline is still due.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from redis.exceptions import WatchError

from synced_playback.domain.playback.repository import ScheduleRepository
from synced_playback.domain.playback.value_objects import ClaimResult
from synced_playback.domain.shared.datetime_utils import from_epoch_ms, to_epoch_ms
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

DEFAULT_CLAIM_ATTEMPTS = 5


class RedisSortedSetSchedule(ScheduleRepository):
    def __init__(
        self, client: Redis, key: str, *, claim_attempts: int = DEFAULT_CLAIM_ATTEMPTS
    ) -> None:
        self._redis = client
        self._key = key
        self._claim_attempts = claim_attempts

    @property
    def key(self) -> str:
        return self._key

    async def arm(self, member: str, at: datetime) -> None:
        await self._redis.zadd(self._key, {member: to_epoch_ms(at)})

    async def arm_if_absent(self, member: str, at: datetime) -> bool:
        added = await self._redis.zadd(self._key, {member: to_epoch_ms(at)}, nx=True)
        return bool(added)

    async def due(self, now: datetime) -> list[str]:
        return list(await self._redis.zrangebyscore(self._key, "-inf", to_epoch_ms(now)))

    async def claim(self, member: str) -> ClaimResult:
        removed = await self._redis.zrem(self._key, member)
        return ClaimResult.from_removed_count(int(removed))

    async def claim_due(self, member: str, now: datetime) -> ClaimResult:
        """Remove ``member`` only while its deadline is at or before ``now``.

        Any write to the set between the read and the removal aborts the
        attempt. After ``claim_attempts`` aborted attempts the entry is left in
        place and the claim is reported as not won; the next tick sees it again.
        """
        cutoff = to_epoch_ms(now)
        async with self._redis.pipeline(transaction=True) as pipe:
            for _ in range(self._claim_attempts):
                try:
                    await pipe.watch(self._key)
                    score = await pipe.zscore(self._key, member)
                    if score is None or score > cutoff:
                        await pipe.unwatch()
                        return ClaimResult.ALREADY_HANDLED
                    pipe.multi()
                    pipe.zrem(self._key, member)
                    (removed,) = await pipe.execute()
                    return ClaimResult.from_removed_count(int(removed))
                except WatchError:
                    # Another member of the schedule changed; read again.
                    continue

        logger.warning(LogTemplates.CLAIM_CONTENDED, member, self._claim_attempts)
        return ClaimResult.ALREADY_HANDLED

    async def deadline(self, member: str) -> datetime | None:
        score = await self._redis.zscore(self._key, member)
        return from_epoch_ms(score) if score is not None else None
