"""Coordination store (Redis) adapters."""

from synced_playback.infrastructure.redis.client import RedisConnection
from synced_playback.infrastructure.redis.command_channel import (
    RedisCommandListener,
    RedisCommandPublisher,
)
from synced_playback.infrastructure.redis.event_publisher import RedisEventPublisher
from synced_playback.infrastructure.redis.invite_token_repository import RedisInviteTokenRepository
from synced_playback.infrastructure.redis.now_playing_repository import RedisNowPlayingRepository
from synced_playback.infrastructure.redis.presence_repository import RedisPresenceRepository
from synced_playback.infrastructure.redis.queue_repository import RedisQueueRepository
from synced_playback.infrastructure.redis.reaction_repository import RedisReactionRepository
from synced_playback.infrastructure.redis.schedule_repository import RedisSortedSetSchedule

__all__ = [
    "RedisConnection",
    "RedisQueueRepository",
    "RedisNowPlayingRepository",
    "RedisSortedSetSchedule",
    "RedisPresenceRepository",
    "RedisReactionRepository",
    "RedisInviteTokenRepository",
    "RedisEventPublisher",
    "RedisCommandPublisher",
    "RedisCommandListener",
]
