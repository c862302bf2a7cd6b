"""
Unit Tests for Application Layer Commands

Tests for:
- SkipTrackCommand, SkipTrackHandler
- PlayQueueItemCommand, PlayQueueItemHandler
- AddToQueueCommand, AddToQueueHandler
- EndSessionCommand, EndSessionHandler

Uses mocking to isolate from infrastructure dependencies.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from synced_playback.domain.playback.commands import (
    PlayIndexCommand,
    PlayUidCommand,
    SkipBackwardCommand,
    SkipForwardCommand,
)
from synced_playback.domain.playback.entities import NowPlayingState
from synced_playback.domain.sessions.entities import PlaybackSession
from synced_playback.domain.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
)

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def session_repo():
    repo = AsyncMock()
    repo.get_collaborators.return_value = ["alice", "bob"]
    return repo


@pytest.fixture
def publisher():
    return AsyncMock()


# =============================================================================
# SkipTrack Command Tests
# =============================================================================


class TestSkipTrackCommand:
    """Unit tests for SkipTrackCommand."""

    def test_create_valid_command(self):
        """Should default to a forward skip."""
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        cmd = SkipTrackCommand(session_id="s1", user_id="alice")
        assert cmd.backward is False

    def test_empty_session_id_raises_error(self):
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        with pytest.raises(ValueError, match="Session ID must not be empty"):
            SkipTrackCommand(session_id="", user_id="alice")


class TestSkipTrackHandler:
    """Unit tests for SkipTrackHandler."""

    @pytest.fixture
    def now_playing_repo(self):
        repo = AsyncMock()
        repo.get.return_value = NowPlayingState.start(
            index=0, uid="uid-one", duration_ms=1000, now=NOW
        )
        return repo

    @pytest.fixture
    def queue_repo(self):
        repo = AsyncMock()
        repo.length.return_value = 3
        return repo

    @pytest.fixture
    def handler(self, session_repo, now_playing_repo, queue_repo, publisher):
        from synced_playback.application.commands.skip_track import SkipTrackHandler

        return SkipTrackHandler(
            session_repository=session_repo,
            now_playing_repository=now_playing_repo,
            queue_repository=queue_repo,
            command_publisher=publisher,
        )

    @pytest.mark.asyncio
    async def test_forward_skip_is_published(self, handler, publisher):
        """Should hand a forward skip to the worker."""
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        result = await handler.handle(SkipTrackCommand(session_id="s1", user_id="bob"))

        assert result.is_success
        publisher.publish.assert_awaited_once_with(SkipForwardCommand(session_id="s1"))

    @pytest.mark.asyncio
    async def test_backward_skip_is_published(self, handler, publisher):
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        result = await handler.handle(
            SkipTrackCommand(session_id="s1", user_id="alice", backward=True)
        )

        assert result.command == SkipBackwardCommand(session_id="s1")
        publisher.publish.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_nothing_playing(self, handler, now_playing_repo, publisher):
        """Should refuse when the session has no now-playing state."""
        from synced_playback.application.commands.skip_track import SkipStatus, SkipTrackCommand

        now_playing_repo.get.return_value = None

        result = await handler.handle(SkipTrackCommand(session_id="s1", user_id="alice"))

        assert result.status == SkipStatus.NOTHING_PLAYING
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_queue(self, handler, queue_repo, publisher):
        from synced_playback.application.commands.skip_track import SkipStatus, SkipTrackCommand

        queue_repo.length.return_value = 0

        result = await handler.handle(SkipTrackCommand(session_id="s1", user_id="alice"))

        assert result.status == SkipStatus.ERROR
        assert result.message == "Couldn't advance playback"
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_collaborator_is_refused(self, handler, publisher):
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        with pytest.raises(PermissionDeniedError):
            await handler.handle(SkipTrackCommand(session_id="s1", user_id="mallory"))
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_caller_is_refused(self, handler):
        from synced_playback.application.commands.skip_track import SkipTrackCommand

        with pytest.raises(AuthenticationRequiredError):
            await handler.handle(SkipTrackCommand(session_id="s1", user_id=None))


# =============================================================================
# PlayQueueItem Command Tests
# =============================================================================


class TestPlayQueueItemCommand:
    """Unit tests for PlayQueueItemCommand."""

    def test_requires_exactly_one_target(self):
        from synced_playback.application.commands.play_queue_item import PlayQueueItemCommand

        with pytest.raises(ValueError, match="Exactly one of uid or index"):
            PlayQueueItemCommand(session_id="s1", user_id="alice")
        with pytest.raises(ValueError, match="Exactly one of uid or index"):
            PlayQueueItemCommand(session_id="s1", user_id="alice", uid="uid-one", index=0)

    def test_negative_index_raises_error(self):
        from synced_playback.application.commands.play_queue_item import PlayQueueItemCommand

        with pytest.raises(ValueError, match="cannot be negative"):
            PlayQueueItemCommand(session_id="s1", user_id="alice", index=-1)


class TestPlayQueueItemHandler:
    """Unit tests for PlayQueueItemHandler."""

    @pytest.fixture
    def queue_repo(self):
        repo = AsyncMock()
        repo.index_of.return_value = 2
        repo.uid_at.return_value = "uid-three"
        return repo

    @pytest.fixture
    def handler(self, session_repo, queue_repo, publisher):
        from synced_playback.application.commands.play_queue_item import PlayQueueItemHandler

        return PlayQueueItemHandler(
            session_repository=session_repo,
            queue_repository=queue_repo,
            command_publisher=publisher,
        )

    @pytest.mark.asyncio
    async def test_play_by_uid(self, handler, publisher):
        from synced_playback.application.commands.play_queue_item import PlayQueueItemCommand

        result = await handler.handle(
            PlayQueueItemCommand(session_id="s1", user_id="alice", uid="uid-three")
        )

        assert result.is_success
        publisher.publish.assert_awaited_once_with(PlayUidCommand(session_id="s1", uid="uid-three"))

    @pytest.mark.asyncio
    async def test_play_by_index(self, handler, publisher):
        from synced_playback.application.commands.play_queue_item import PlayQueueItemCommand

        await handler.handle(PlayQueueItemCommand(session_id="s1", user_id="alice", index=2))

        publisher.publish.assert_awaited_once_with(PlayIndexCommand(session_id="s1", index=2))

    @pytest.mark.asyncio
    async def test_unknown_target_is_not_published(self, handler, queue_repo, publisher):
        """Should report a generic failure for an unresolvable uid."""
        from synced_playback.application.commands.play_queue_item import PlayQueueItemCommand

        queue_repo.index_of.return_value = None

        result = await handler.handle(
            PlayQueueItemCommand(session_id="s1", user_id="alice", uid="uid-gone")
        )

        assert not result.is_success
        assert result.message == "Couldn't advance playback"
        publisher.publish.assert_not_awaited()


# =============================================================================
# AddToQueue Command Tests
# =============================================================================


class TestAddToQueueHandler:
    """Unit tests for AddToQueueHandler."""

    @pytest.fixture
    def queue_service(self):
        service = MagicMock()
        service.enqueue = AsyncMock(return_value=[])
        return service

    @pytest.fixture
    def handler(self, session_repo, queue_service):
        from synced_playback.application.commands.add_to_queue import AddToQueueHandler

        return AddToQueueHandler(session_repository=session_repo, queue_service=queue_service)

    @pytest.mark.asyncio
    async def test_collaborator_can_add(self, handler, session_repo, queue_service):
        from synced_playback.application.commands.add_to_queue import AddToQueueCommand

        session_repo.get.return_value = PlaybackSession(
            id="s1", creator_id="alice", collaborator_ids=["alice", "bob"]
        )

        await handler.handle(AddToQueueCommand(session_id="s1", user_id="bob", track_ids=["t1"]))

        queue_service.enqueue.assert_awaited_once_with("s1", "bob", ["t1"])

    @pytest.mark.asyncio
    async def test_ended_session_is_refused(self, handler, session_repo, queue_service):
        from synced_playback.application.commands.add_to_queue import AddToQueueCommand

        session_repo.get.return_value = PlaybackSession(
            id="s1", creator_id="alice", is_live=False, collaborator_ids=["alice"]
        )

        with pytest.raises(InvalidOperationError):
            await handler.handle(
                AddToQueueCommand(session_id="s1", user_id="alice", track_ids=["t1"])
            )
        queue_service.enqueue.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_outsider_is_refused(self, handler, session_repo):
        from synced_playback.application.commands.add_to_queue import AddToQueueCommand

        session_repo.get.return_value = PlaybackSession(
            id="s1", creator_id="alice", collaborator_ids=["alice"]
        )

        with pytest.raises(PermissionDeniedError):
            await handler.handle(
                AddToQueueCommand(session_id="s1", user_id="mallory", track_ids=["t1"])
            )

    @pytest.mark.asyncio
    async def test_missing_session(self, handler, session_repo):
        from synced_playback.application.commands.add_to_queue import AddToQueueCommand

        session_repo.get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await handler.handle(AddToQueueCommand(session_id="s1", user_id="alice"))


# =============================================================================
# EndSession Command Tests
# =============================================================================


class TestEndSessionHandler:
    """Unit tests for EndSessionHandler."""

    @pytest.fixture
    def session_service(self):
        service = MagicMock()
        service.end_session = AsyncMock(return_value=True)
        return service

    @pytest.fixture
    def handler(self, session_repo, session_service):
        from synced_playback.application.commands.end_session import EndSessionHandler

        session_repo.get.return_value = PlaybackSession(
            id="s1", creator_id="alice", collaborator_ids=["alice", "bob"]
        )
        return EndSessionHandler(session_repository=session_repo, session_service=session_service)

    @pytest.mark.asyncio
    async def test_creator_ends_session(self, handler, session_service):
        from synced_playback.application.commands.end_session import EndSessionCommand

        assert await handler.handle(EndSessionCommand(session_id="s1", user_id="alice")) is True
        session_service.end_session.assert_awaited_once_with("s1")

    @pytest.mark.asyncio
    async def test_collaborator_cannot_end(self, handler, session_service):
        """Only the creator may end a session."""
        from synced_playback.application.commands.end_session import EndSessionCommand

        with pytest.raises(PermissionDeniedError, match="end this session"):
            await handler.handle(EndSessionCommand(session_id="s1", user_id="bob"))
        session_service.end_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_anonymous_caller(self, handler):
        from synced_playback.application.commands.end_session import EndSessionCommand

        with pytest.raises(AuthenticationRequiredError):
            await handler.handle(EndSessionCommand(session_id="s1"))
