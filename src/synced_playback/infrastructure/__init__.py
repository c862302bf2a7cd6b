"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite session documents and track catalogue)
- Coordination store (Redis queues, now-playing state, schedules, pub/sub)
- Scheduling (skip scheduler, session-end scheduler, playback worker)
"""

from synced_playback.infrastructure.persistence.database import Database
from synced_playback.infrastructure.redis.client import RedisConnection
from synced_playback.infrastructure.scheduling.worker import PlaybackWorker

__all__ = [
    "Database",
    "RedisConnection",
    "PlaybackWorker",
]
