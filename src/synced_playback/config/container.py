"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for stores, repositories, services, handlers and
the worker's schedulers. Components are created on-demand and cached for reuse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from ..application.commands.add_to_queue import AddToQueueHandler
    from ..application.commands.end_session import EndSessionHandler
    from ..application.commands.play_queue_item import PlayQueueItemHandler
    from ..application.commands.skip_track import SkipTrackHandler
    from ..application.interfaces.command_publisher import CommandPublisher
    from ..application.interfaces.event_publisher import EventPublisher
    from ..application.queries.get_listeners import GetListenersHandler
    from ..application.queries.get_now_playing import GetNowPlayingHandler
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.services.playback_actuator import PlaybackActuator
    from ..application.services.presence_service import PresenceService
    from ..application.services.queue_service import QueueApplicationService
    from ..application.services.reaction_service import ReactionService
    from ..application.services.session_service import SessionApplicationService
    from ..domain.playback.repository import (
        NowPlayingRepository,
        QueueRepository,
        ReactionRepository,
        ScheduleRepository,
        TrackRepository,
    )
    from ..domain.sessions.repository import (
        InviteTokenRepository,
        PresenceRepository,
        SessionRepository,
    )
    from ..infrastructure.persistence.database import Database
    from ..infrastructure.redis.client import RedisConnection
    from ..infrastructure.redis.command_channel import RedisCommandListener
    from ..infrastructure.scheduling.session_end_scheduler import SessionEndScheduler
    from ..infrastructure.scheduling.skip_scheduler import SkipScheduler
    from ..infrastructure.scheduling.worker import PlaybackWorker
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _redis_client: Redis | None = None

    # Stores
    _database: Database | None = None
    _redis: RedisConnection | None = None

    # Repositories
    _session_repository: SessionRepository | None = None
    _track_repository: TrackRepository | None = None
    _queue_repository: QueueRepository | None = None
    _now_playing_repository: NowPlayingRepository | None = None
    _skip_schedule: ScheduleRepository | None = None
    _session_end_schedule: ScheduleRepository | None = None
    _presence_repository: PresenceRepository | None = None
    _reaction_repository: ReactionRepository | None = None
    _invite_token_repository: InviteTokenRepository | None = None

    # Channels
    _event_publisher: EventPublisher | None = None
    _command_publisher: CommandPublisher | None = None
    _command_listener: RedisCommandListener | None = None

    # Application services
    _playback_actuator: PlaybackActuator | None = None
    _queue_service: QueueApplicationService | None = None
    _session_service: SessionApplicationService | None = None
    _presence_service: PresenceService | None = None
    _reaction_service: ReactionService | None = None

    # Command handlers
    _skip_track_handler: SkipTrackHandler | None = None
    _play_queue_item_handler: PlayQueueItemHandler | None = None
    _add_to_queue_handler: AddToQueueHandler | None = None
    _end_session_handler: EndSessionHandler | None = None

    # Query handlers
    _get_now_playing_handler: GetNowPlayingHandler | None = None
    _get_queue_handler: GetQueueHandler | None = None
    _get_listeners_handler: GetListenersHandler | None = None

    # Background jobs
    _skip_scheduler: SkipScheduler | None = None
    _session_end_scheduler: SessionEndScheduler | None = None
    _worker: PlaybackWorker | None = None

    def set_redis_client(self, client: Redis) -> None:
        """Use an already connected client instead of one built from settings."""
        self._redis_client = client

    # === Stores ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    @property
    def redis_connection(self) -> RedisConnection:
        """Get the coordination store connection manager."""
        if self._redis is None:
            from ..infrastructure.redis.client import RedisConnection

            self._redis = RedisConnection(self.settings.redis.url, settings=self.settings.redis)
        return self._redis

    @property
    def redis(self) -> Redis:
        """Get the shared coordination store client."""
        if self._redis_client is not None:
            return self._redis_client
        return self.redis_connection.client

    # === Repositories ===

    @property
    def session_repository(self) -> SessionRepository:
        """Get the session repository."""
        if self._session_repository is None:
            from ..infrastructure.persistence.repositories.session_repository import (
                SQLiteSessionRepository,
            )

            self._session_repository = SQLiteSessionRepository(self.database)
        return self._session_repository

    @property
    def track_repository(self) -> TrackRepository:
        """Get the track catalogue repository."""
        if self._track_repository is None:
            from ..infrastructure.persistence.repositories.track_repository import (
                SQLiteTrackRepository,
            )

            self._track_repository = SQLiteTrackRepository(self.database)
        return self._track_repository

    @property
    def queue_repository(self) -> QueueRepository:
        """Get the queue store."""
        if self._queue_repository is None:
            from ..infrastructure.redis.queue_repository import RedisQueueRepository

            self._queue_repository = RedisQueueRepository(self.redis)
        return self._queue_repository

    @property
    def now_playing_repository(self) -> NowPlayingRepository:
        """Get the now-playing state store."""
        if self._now_playing_repository is None:
            from ..domain.shared.constants import RedisKeys
            from ..infrastructure.redis.now_playing_repository import (
                RedisNowPlayingRepository,
            )

            self._now_playing_repository = RedisNowPlayingRepository(
                self.redis, skip_schedule_key=RedisKeys.SKIP_SCHEDULE
            )
        return self._now_playing_repository

    @property
    def skip_schedule(self) -> ScheduleRepository:
        """Get the track-end schedule."""
        if self._skip_schedule is None:
            from ..domain.shared.constants import RedisKeys
            from ..infrastructure.redis.schedule_repository import RedisSortedSetSchedule

            self._skip_schedule = RedisSortedSetSchedule(self.redis, RedisKeys.SKIP_SCHEDULE)
        return self._skip_schedule

    @property
    def session_end_schedule(self) -> ScheduleRepository:
        """Get the session-end deadline schedule."""
        if self._session_end_schedule is None:
            from ..domain.shared.constants import RedisKeys
            from ..infrastructure.redis.schedule_repository import RedisSortedSetSchedule

            self._session_end_schedule = RedisSortedSetSchedule(
                self.redis, RedisKeys.SESSION_END_SCHEDULE
            )
        return self._session_end_schedule

    @property
    def presence_repository(self) -> PresenceRepository:
        """Get the listener presence store."""
        if self._presence_repository is None:
            from ..infrastructure.redis.presence_repository import RedisPresenceRepository

            self._presence_repository = RedisPresenceRepository(self.redis)
        return self._presence_repository

    @property
    def reaction_repository(self) -> ReactionRepository:
        """Get the reaction store."""
        if self._reaction_repository is None:
            from ..infrastructure.redis.reaction_repository import RedisReactionRepository

            self._reaction_repository = RedisReactionRepository(self.redis)
        return self._reaction_repository

    @property
    def invite_token_repository(self) -> InviteTokenRepository:
        """Get the invite token store."""
        if self._invite_token_repository is None:
            from ..infrastructure.redis.invite_token_repository import (
                RedisInviteTokenRepository,
            )

            self._invite_token_repository = RedisInviteTokenRepository(self.redis)
        return self._invite_token_repository

    # === Channels ===

    @property
    def event_publisher(self) -> EventPublisher:
        """Get the session event publisher."""
        if self._event_publisher is None:
            from ..infrastructure.redis.event_publisher import RedisEventPublisher

            self._event_publisher = RedisEventPublisher(self.redis)
        return self._event_publisher

    @property
    def command_publisher(self) -> CommandPublisher:
        """Get the worker command publisher."""
        if self._command_publisher is None:
            from ..infrastructure.redis.command_channel import RedisCommandPublisher

            self._command_publisher = RedisCommandPublisher(
                self.redis, channel=self.settings.scheduler.command_channel
            )
        return self._command_publisher

    @property
    def command_listener(self) -> RedisCommandListener:
        """Get the worker command listener."""
        if self._command_listener is None:
            from ..infrastructure.redis.command_channel import RedisCommandListener

            self._command_listener = RedisCommandListener(
                self.redis, channel=self.settings.scheduler.command_channel
            )
        return self._command_listener

    # === Application Services ===

    @property
    def playback_actuator(self) -> PlaybackActuator:
        """Get the playback actuator."""
        if self._playback_actuator is None:
            from ..application.services.playback_actuator import PlaybackActuator

            self._playback_actuator = PlaybackActuator(
                queue_repository=self.queue_repository,
                now_playing_repository=self.now_playing_repository,
                skip_schedule=self.skip_schedule,
                track_repository=self.track_repository,
                event_publisher=self.event_publisher,
            )
        return self._playback_actuator

    @property
    def queue_service(self) -> QueueApplicationService:
        """Get the queue application service."""
        if self._queue_service is None:
            from ..application.services.queue_service import QueueApplicationService

            self._queue_service = QueueApplicationService(
                queue_repository=self.queue_repository,
                track_repository=self.track_repository,
                event_publisher=self.event_publisher,
            )
        return self._queue_service

    @property
    def session_service(self) -> SessionApplicationService:
        """Get the session lifecycle service."""
        if self._session_service is None:
            from ..application.services.session_service import SessionApplicationService

            self._session_service = SessionApplicationService(
                session_repository=self.session_repository,
                queue_repository=self.queue_repository,
                presence_repository=self.presence_repository,
                invite_token_repository=self.invite_token_repository,
                session_end_schedule=self.session_end_schedule,
                queue_service=self.queue_service,
                playback_actuator=self.playback_actuator,
                command_publisher=self.command_publisher,
                event_publisher=self.event_publisher,
                session_live_timeout=self.settings.presence.session_live_timeout,
            )
        return self._session_service

    @property
    def presence_service(self) -> PresenceService:
        """Get the listener presence service."""
        if self._presence_service is None:
            from ..application.services.presence_service import PresenceService

            self._presence_service = PresenceService(
                session_repository=self.session_repository,
                presence_repository=self.presence_repository,
                session_end_schedule=self.session_end_schedule,
                event_publisher=self.event_publisher,
                activity_timeout=self.settings.presence.activity_timeout,
                session_live_timeout=self.settings.presence.session_live_timeout,
            )
        return self._presence_service

    @property
    def reaction_service(self) -> ReactionService:
        """Get the reaction service."""
        if self._reaction_service is None:
            from ..application.services.reaction_service import ReactionService

            self._reaction_service = ReactionService(
                now_playing_repository=self.now_playing_repository,
                reaction_repository=self.reaction_repository,
                event_publisher=self.event_publisher,
            )
        return self._reaction_service

    # === Command Handlers ===

    @property
    def skip_track_handler(self) -> SkipTrackHandler:
        """Get the skip track command handler."""
        if self._skip_track_handler is None:
            from ..application.commands.skip_track import SkipTrackHandler

            self._skip_track_handler = SkipTrackHandler(
                session_repository=self.session_repository,
                now_playing_repository=self.now_playing_repository,
                queue_repository=self.queue_repository,
                command_publisher=self.command_publisher,
            )
        return self._skip_track_handler

    @property
    def play_queue_item_handler(self) -> PlayQueueItemHandler:
        """Get the play queue item command handler."""
        if self._play_queue_item_handler is None:
            from ..application.commands.play_queue_item import PlayQueueItemHandler

            self._play_queue_item_handler = PlayQueueItemHandler(
                session_repository=self.session_repository,
                queue_repository=self.queue_repository,
                command_publisher=self.command_publisher,
            )
        return self._play_queue_item_handler

    @property
    def add_to_queue_handler(self) -> AddToQueueHandler:
        """Get the add to queue command handler."""
        if self._add_to_queue_handler is None:
            from ..application.commands.add_to_queue import AddToQueueHandler

            self._add_to_queue_handler = AddToQueueHandler(
                session_repository=self.session_repository,
                queue_service=self.queue_service,
            )
        return self._add_to_queue_handler

    @property
    def end_session_handler(self) -> EndSessionHandler:
        """Get the end session command handler."""
        if self._end_session_handler is None:
            from ..application.commands.end_session import EndSessionHandler

            self._end_session_handler = EndSessionHandler(
                session_repository=self.session_repository,
                session_service=self.session_service,
            )
        return self._end_session_handler

    # === Query Handlers ===

    @property
    def get_now_playing_handler(self) -> GetNowPlayingHandler:
        """Get the now-playing query handler."""
        if self._get_now_playing_handler is None:
            from ..application.queries.get_now_playing import GetNowPlayingHandler

            self._get_now_playing_handler = GetNowPlayingHandler(
                now_playing_repository=self.now_playing_repository,
                queue_repository=self.queue_repository,
            )
        return self._get_now_playing_handler

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        """Get the get queue query handler."""
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(
                queue_repository=self.queue_repository,
                now_playing_repository=self.now_playing_repository,
            )
        return self._get_queue_handler

    @property
    def get_listeners_handler(self) -> GetListenersHandler:
        """Get the listeners query handler."""
        if self._get_listeners_handler is None:
            from ..application.queries.get_listeners import GetListenersHandler

            self._get_listeners_handler = GetListenersHandler(
                presence_service=self.presence_service,
            )
        return self._get_listeners_handler

    # === Background Jobs ===

    @property
    def skip_scheduler(self) -> SkipScheduler:
        """Get the skip scheduler."""
        if self._skip_scheduler is None:
            from ..infrastructure.scheduling.skip_scheduler import SkipScheduler

            self._skip_scheduler = SkipScheduler(
                actuator=self.playback_actuator,
                skip_schedule=self.skip_schedule,
                command_listener=self.command_listener,
                poll_interval_ms=self.settings.scheduler.skip_poll_interval_ms,
                resubscribe_delay_s=self.settings.scheduler.resubscribe_delay_s,
            )
        return self._skip_scheduler

    @property
    def session_end_scheduler(self) -> SessionEndScheduler:
        """Get the session-end scheduler."""
        if self._session_end_scheduler is None:
            from ..infrastructure.scheduling.session_end_scheduler import SessionEndScheduler

            self._session_end_scheduler = SessionEndScheduler(
                session_service=self.session_service,
                session_end_schedule=self.session_end_schedule,
                poll_interval_s=self.settings.scheduler.session_end_poll_interval_s,
            )
        return self._session_end_scheduler

    @property
    def worker(self) -> PlaybackWorker:
        """Get the playback worker hosting both schedulers."""
        if self._worker is None:
            from ..infrastructure.scheduling.worker import PlaybackWorker

            self._worker = PlaybackWorker(
                skip_scheduler=self.skip_scheduler,
                session_end_scheduler=self.session_end_scheduler,
            )
        return self._worker

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()
        if self._redis_client is None:
            await self.redis_connection.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        try:
            if self._worker is not None:
                await self._worker.stop()
        except Exception as exc:
            logger.warning("Failed stopping playback worker: %r", exc)

        if self._redis is not None:
            await self._redis.close()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
