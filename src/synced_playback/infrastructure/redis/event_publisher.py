"""Redis pub/sub implementation of the event publisher."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from synced_playback.application.interfaces.event_publisher import EventPublisher
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from ...domain.shared.events import DomainEvent

logger = logging.getLogger(__name__)


class RedisEventPublisher(EventPublisher):
    """Publishes each event as JSON on ``{CHANNEL}:{session_id}``."""

    def __init__(self, client: Redis) -> None:
        self._redis = client

    async def publish(self, event: DomainEvent) -> int:
        receivers = int(await self._redis.publish(event.channel, event.model_dump_json()))
        logger.debug(LogTemplates.EVENT_PUBLISHED, type(event).__name__, event.channel, receivers)
        return receivers
