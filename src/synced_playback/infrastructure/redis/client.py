"""Coordination store connection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import redis.asyncio as redis

from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...config.settings import RedisSettings

logger = logging.getLogger(__name__)


class RedisConnection:
    """Owns the shared ``redis.asyncio`` client and its lifecycle.

    The client is created lazily and decodes responses to ``str``.
    """

    def __init__(self, url: str, settings: RedisSettings | None = None) -> None:
        self._url = url
        self._socket_timeout = settings.socket_timeout_s if settings else 5.0
        self._health_check_interval = settings.health_check_interval_s if settings else 30
        self._client: redis.Redis | None = None

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(
                self._url,
                decode_responses=True,
                socket_timeout=self._socket_timeout,
                health_check_interval=self._health_check_interval,
            )
        return self._client

    async def initialize(self) -> None:
        await self.client.ping()
        logger.info(LogTemplates.REDIS_CONNECTED, self._url)

    async def close(self) -> None:
        if self._client is not None:
            try:
                await self._client.aclose()
            finally:
                self._client = None
        logger.info(LogTemplates.REDIS_CLOSED)
