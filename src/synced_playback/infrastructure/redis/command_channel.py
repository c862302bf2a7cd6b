"""Worker command channel over Redis pub/sub."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

import pydantic

from synced_playback.application.interfaces.command_publisher import CommandPublisher
from synced_playback.domain.playback.commands import dump_worker_command, parse_worker_command
from synced_playback.domain.shared.constants import PubSubChannels
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from ...domain.playback.commands import WorkerCommand

logger = logging.getLogger(__name__)


class RedisCommandPublisher(CommandPublisher):
    def __init__(self, client: Redis, channel: str = PubSubChannels.WORKER) -> None:
        self._redis = client
        self._channel = channel

    @property
    def channel(self) -> str:
        return self._channel

    async def publish(self, command: WorkerCommand) -> None:
        await self._redis.publish(self._channel, dump_worker_command(command))
        logger.debug(LogTemplates.COMMAND_PUBLISHED, command.action, command.session_id)


class RedisCommandListener:
    """Subscribes to the worker channel and yields parsed commands.

    Malformed payloads are logged and skipped.
    """

    def __init__(self, client: Redis, channel: str = PubSubChannels.WORKER) -> None:
        self._redis = client
        self._channel = channel

    @property
    def channel(self) -> str:
        return self._channel

    async def listen(self) -> AsyncIterator[WorkerCommand]:
        pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        await pubsub.subscribe(self._channel)
        logger.info(LogTemplates.COMMAND_LISTENER_STARTED, self._channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                command = self.parse(message["data"])
                if command is not None:
                    yield command
        finally:
            await pubsub.unsubscribe(self._channel)
            await pubsub.aclose()

    @staticmethod
    def parse(raw: str | bytes) -> WorkerCommand | None:
        try:
            return parse_worker_command(raw)
        except pydantic.ValidationError:
            logger.warning(LogTemplates.COMMAND_INVALID, raw)
            return None
