from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
import pytest_asyncio

# ============================================================================
# Clock & Recorders
# ============================================================================


class FakeClock:
    """Deterministic clock; call it like ``utcnow`` and move it with ``advance``."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingEventPublisher:
    """EventPublisher that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: list = []

    async def publish(self, event) -> int:
        self.events.append(event)
        return 0

    def of_type(self, event_type: type) -> list:
        return [event for event in self.events if isinstance(event, event_type)]


class RecordingCommandPublisher:
    """CommandPublisher that keeps every command in memory."""

    def __init__(self) -> None:
        self.commands: list = []

    async def publish(self, command) -> None:
        self.commands.append(command)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def event_publisher():
    return RecordingEventPublisher()


@pytest.fixture
def command_publisher():
    return RecordingCommandPublisher()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from synced_playback.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session_repository(in_memory_database):
    """Create a session repository with in-memory database."""
    from synced_playback.infrastructure.persistence.repositories.session_repository import (
        SQLiteSessionRepository,
    )

    return SQLiteSessionRepository(in_memory_database)


@pytest_asyncio.fixture
async def track_repository(in_memory_database):
    """Create a track catalogue with t1 (3 min), t2 (4 min) and t3 (2.5 min)."""
    from synced_playback.domain.playback.entities import Track
    from synced_playback.infrastructure.persistence.repositories.track_repository import (
        SQLiteTrackRepository,
    )

    repo = SQLiteTrackRepository(in_memory_database)
    await repo.save(Track(id="t1", title="First", duration_ms=180_000))
    await repo.save(Track(id="t2", title="Second", duration_ms=240_000))
    await repo.save(Track(id="t3", title="Third", duration_ms=150_000))
    await repo.save(Track(id="long", title="Too Long", duration_ms=8 * 60 * 1000))
    return repo


# ============================================================================
# Coordination Store Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def redis_client():
    """A fresh fakeredis server per test."""
    client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def queue_repository(redis_client):
    from synced_playback.infrastructure.redis.queue_repository import RedisQueueRepository

    return RedisQueueRepository(redis_client)


@pytest.fixture
def skip_schedule(redis_client):
    from synced_playback.domain.shared.constants import RedisKeys
    from synced_playback.infrastructure.redis.schedule_repository import RedisSortedSetSchedule

    return RedisSortedSetSchedule(redis_client, RedisKeys.SKIP_SCHEDULE)


@pytest.fixture
def session_end_schedule(redis_client):
    from synced_playback.domain.shared.constants import RedisKeys
    from synced_playback.infrastructure.redis.schedule_repository import RedisSortedSetSchedule

    return RedisSortedSetSchedule(redis_client, RedisKeys.SESSION_END_SCHEDULE)


@pytest.fixture
def now_playing_repository(redis_client):
    from synced_playback.infrastructure.redis.now_playing_repository import (
        RedisNowPlayingRepository,
    )

    return RedisNowPlayingRepository(redis_client)


@pytest.fixture
def presence_repository(redis_client):
    from synced_playback.infrastructure.redis.presence_repository import RedisPresenceRepository

    return RedisPresenceRepository(redis_client)


@pytest.fixture
def reaction_repository(redis_client):
    from synced_playback.infrastructure.redis.reaction_repository import RedisReactionRepository

    return RedisReactionRepository(redis_client)


@pytest.fixture
def invite_token_repository(redis_client):
    from synced_playback.infrastructure.redis.invite_token_repository import (
        RedisInviteTokenRepository,
    )

    return RedisInviteTokenRepository(redis_client)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def actuator(
    queue_repository,
    now_playing_repository,
    skip_schedule,
    track_repository,
    event_publisher,
    clock,
):
    from synced_playback.application.services.playback_actuator import PlaybackActuator

    return PlaybackActuator(
        queue_repository=queue_repository,
        now_playing_repository=now_playing_repository,
        skip_schedule=skip_schedule,
        track_repository=track_repository,
        event_publisher=event_publisher,
        clock=clock,
    )


@pytest.fixture
def queue_service(queue_repository, track_repository, event_publisher):
    from synced_playback.application.services.queue_service import QueueApplicationService

    return QueueApplicationService(
        queue_repository=queue_repository,
        track_repository=track_repository,
        event_publisher=event_publisher,
    )


@pytest.fixture
def session_service(
    session_repository,
    queue_repository,
    presence_repository,
    invite_token_repository,
    session_end_schedule,
    queue_service,
    actuator,
    command_publisher,
    event_publisher,
    clock,
):
    from synced_playback.application.services.session_service import SessionApplicationService

    return SessionApplicationService(
        session_repository=session_repository,
        queue_repository=queue_repository,
        presence_repository=presence_repository,
        invite_token_repository=invite_token_repository,
        session_end_schedule=session_end_schedule,
        queue_service=queue_service,
        playback_actuator=actuator,
        command_publisher=command_publisher,
        event_publisher=event_publisher,
        session_live_timeout=timedelta(minutes=15),
        clock=clock,
    )


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_session(clock):
    """A live session created by ``alice``."""
    from synced_playback.domain.sessions.entities import PlaybackSession

    return PlaybackSession(
        id="sess-1",
        creator_id="alice",
        text="Friday mix",
        collaborator_ids=["alice"],
        created_at=clock(),
        last_creator_activity_at=clock(),
    )


@pytest.fixture
def queued_session(queue_repository):
    """Push t1, t2, t3 onto the queue of ``sess-1`` with known uids."""
    from synced_playback.domain.playback.entities import QueueItem

    async def _push(session_id: str = "sess-1") -> list[str]:
        uids = ["uid-one", "uid-two", "uid-three"]
        await queue_repository.push(
            session_id,
            [
                QueueItem(uid=uid, track_id=track_id, creator_id="alice")
                for uid, track_id in zip(uids, ["t1", "t2", "t3"], strict=True)
            ],
        )
        return uids

    return _push
