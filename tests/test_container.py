"""
Unit Tests for Dependency Injection Container

Tests for:
- Container initialization with settings
- Lazy initialization and caching of every component
- Coordination store client override (set_redis_client)
- Settings flowing into services and schedulers
- Lifecycle methods (initialize, shutdown)
"""

from unittest.mock import AsyncMock, MagicMock

import fakeredis
import pytest
import pytest_asyncio

from synced_playback.config.container import Container, create_container
from synced_playback.config.settings import DatabaseSettings, SchedulerSettings, Settings


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        environment="test",
        database=DatabaseSettings(url="sqlite:///:memory:"),
        scheduler=SchedulerSettings(command_channel="WORKER_TEST", skip_poll_interval_ms=200),
    )


@pytest.fixture
def fake_redis():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def container(settings, fake_redis):
    container = Container(settings=settings)
    container.set_redis_client(fake_redis)
    return container


@pytest_asyncio.fixture
async def started_container(container):
    await container.initialize()
    yield container
    await container.shutdown()


# =============================================================================
# Container Initialization Tests
# =============================================================================


class TestContainerInitialization:
    def test_create_container_factory(self, settings):
        container = create_container(settings)

        assert isinstance(container, Container)
        assert container.settings is settings

    def test_redis_override(self, container, fake_redis):
        assert container.redis is fake_redis

    def test_redis_from_settings(self, settings):
        """Without an override the client comes from the connection manager."""
        container = Container(settings=settings)

        assert container.redis is container.redis_connection.client

    def test_database_uses_configured_url(self, container):
        assert container.database.is_memory


# =============================================================================
# Lazy Component Tests
# =============================================================================


COMPONENTS = [
    "session_repository",
    "track_repository",
    "queue_repository",
    "now_playing_repository",
    "skip_schedule",
    "session_end_schedule",
    "presence_repository",
    "reaction_repository",
    "invite_token_repository",
    "event_publisher",
    "command_publisher",
    "command_listener",
    "playback_actuator",
    "queue_service",
    "session_service",
    "presence_service",
    "reaction_service",
    "skip_track_handler",
    "play_queue_item_handler",
    "add_to_queue_handler",
    "end_session_handler",
    "get_now_playing_handler",
    "get_queue_handler",
    "get_listeners_handler",
    "skip_scheduler",
    "session_end_scheduler",
    "worker",
]


class TestLazyComponents:
    @pytest.mark.parametrize("name", COMPONENTS)
    def test_component_is_cached(self, container, name):
        first = getattr(container, name)

        assert first is not None
        assert getattr(container, name) is first

    def test_schedules_use_distinct_keys(self, container):
        assert container.skip_schedule.key != container.session_end_schedule.key

    def test_command_channel_from_settings(self, container):
        assert container.command_publisher.channel == "WORKER_TEST"
        assert container.command_listener.channel == "WORKER_TEST"

    def test_services_share_the_actuator(self, container):
        assert container.session_service._actuator is container.playback_actuator
        assert container.skip_scheduler._actuator is container.playback_actuator


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_create_session_end_to_end(self, started_container):
        """A session created through the container reaches the worker channel."""
        from synced_playback.domain.playback.entities import Track

        await started_container.track_repository.save(
            Track(id="t1", title="First", duration_ms=180_000)
        )

        session = await started_container.session_service.create_session("alice", ["t1"])

        stored = await started_container.session_repository.get(session.id)
        assert stored.is_live
        assert await started_container.queue_repository.length(session.id) == 1

    @pytest.mark.asyncio
    async def test_shutdown_stops_worker(self, container):
        await container.initialize()
        worker = MagicMock()
        worker.stop = AsyncMock()
        container._worker = worker

        await container.shutdown()

        worker.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_shutdown_survives_worker_failure(self, container, caplog):
        await container.initialize()
        worker = MagicMock()
        worker.stop = AsyncMock(side_effect=RuntimeError("boom"))
        container._worker = worker

        await container.shutdown()

        assert "Failed stopping playback worker" in caplog.text

    @pytest.mark.asyncio
    async def test_shutdown_without_initialize(self, settings):
        await Container(settings=settings).shutdown()
