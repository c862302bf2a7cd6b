"""Session Application Service - creates and ends sessions and manages invites."""

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING

from ...domain.playback.commands import PlayIndexCommand
from ...domain.sessions.entities import PlaybackSession
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.events import SessionUpdated
from ...domain.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...domain.playback.repository import QueueRepository, ScheduleRepository
    from ...domain.sessions.repository import (
        InviteTokenRepository,
        PresenceRepository,
        SessionRepository,
    )
    from ..interfaces.command_publisher import CommandPublisher
    from ..interfaces.event_publisher import EventPublisher
    from .playback_actuator import PlaybackActuator
    from .queue_service import QueueApplicationService

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    return secrets.token_hex(12)


class SessionApplicationService:
    """Owns the session lifecycle.

    Ending is idempotent: ending an ended session only repeats the cleanup of
    coordination-store keys, which is harmless.
    """

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        queue_repository: QueueRepository,
        presence_repository: PresenceRepository,
        invite_token_repository: InviteTokenRepository,
        session_end_schedule: ScheduleRepository,
        queue_service: QueueApplicationService,
        playback_actuator: PlaybackActuator,
        command_publisher: CommandPublisher,
        event_publisher: EventPublisher,
        session_live_timeout: timedelta,
        clock: Clock = utcnow,
    ) -> None:
        self._session_repo = session_repository
        self._queue_repo = queue_repository
        self._presence_repo = presence_repository
        self._invite_repo = invite_token_repository
        self._session_end_schedule = session_end_schedule
        self._queue_service = queue_service
        self._actuator = playback_actuator
        self._command_publisher = command_publisher
        self._publisher = event_publisher
        self._session_live_timeout = session_live_timeout
        self._clock = clock

    async def create_session(
        self, creator_id: str | None, track_ids: Sequence[str], text: str | None = None
    ) -> PlaybackSession:
        """Start a live session playing the given tracks.

        The creator's other live sessions are ended first, so a user is live in
        at most one session at a time.

        Raises:
            AuthenticationRequiredError: If the caller is anonymous.
            ValidationError: If no track is given, or a track is unknown or too long.
        """
        if creator_id is None:
            raise AuthenticationRequiredError()
        await self._queue_service.validate_tracks(track_ids)

        for live in await self._session_repo.get_live_by_creator(creator_id):
            await self.end_session(live.id)

        now = self._clock()
        session = PlaybackSession(
            id=new_session_id(),
            creator_id=creator_id,
            text=text,
            collaborator_ids=[creator_id],
            created_at=now,
            last_creator_activity_at=now,
        )
        await self._session_repo.save(session)
        await self._queue_service.enqueue(session.id, creator_id, track_ids)
        await self._invite_repo.create(session.id)
        await self._session_end_schedule.arm(session.id, now + self._session_live_timeout)
        await self._command_publisher.publish(PlayIndexCommand(session_id=session.id, index=0))

        logger.info(LogTemplates.SESSION_CREATED, session.id, creator_id, len(track_ids))
        return session

    async def end_session(self, session_id: str) -> bool:
        """End a session and clean up its coordination state.

        The session-end deadline is removed last, so a failure part-way leaves
        it in place and the session-end scheduler retries on its next tick.

        Returns:
            True if this call ended a live session, False if it was already ended.
        """
        track_ids = await self._queue_service.track_ids(session_id)
        ended = await self._session_repo.archive_queue_and_end(session_id, track_ids)

        await self._actuator.remove(session_id)
        await self._presence_repo.clear(session_id)
        await self._queue_repo.delete(session_id)
        await self._invite_repo.delete(session_id)
        await self._session_end_schedule.cancel(session_id)

        if not ended:
            logger.debug(LogTemplates.SESSION_ALREADY_ENDED, session_id)
            return False

        logger.info(LogTemplates.SESSION_ENDED, session_id, len(track_ids))
        await self._publisher.publish(SessionUpdated(session_id=session_id, is_live=False))
        return True

    async def get_invite_token(self, session_id: str, user_id: str | None) -> str:
        """Return the invite token of a live session to one of its collaborators.

        Raises:
            AuthenticationRequiredError: If the caller is anonymous.
            EntityNotFoundError: If the session does not exist.
            PermissionDeniedError: If the caller is not a collaborator.
            InvalidOperationError: If the session has ended.
        """
        if user_id is None:
            raise AuthenticationRequiredError()
        session = await self._get_session(session_id)
        if not session.is_collaborator(user_id):
            raise PermissionDeniedError(ErrorMessages.INVITE_NOT_ALLOWED)

        token = await self._invite_repo.get(session_id)
        if token is None:
            raise InvalidOperationError(
                "get_invite_token", "ended", message=ErrorMessages.SESSION_NOT_LIVE
            )
        return token

    async def join_with_invite_token(self, session_id: str, user_id: str | None, token: str) -> bool:
        """Add the caller as a collaborator if the token matches.

        Returns:
            True if the caller is a collaborator of the live session afterwards.
        """
        if user_id is None:
            raise AuthenticationRequiredError()
        session = await self._get_session(session_id)
        if not session.is_live:
            return False

        expected = await self._invite_repo.get(session_id)
        if expected is None or not secrets.compare_digest(expected, token):
            return False

        await self._session_repo.add_collaborator(session_id, user_id)
        return True

    async def _get_session(self, session_id: str) -> PlaybackSession:
        session = await self._session_repo.get(session_id)
        if session is None:
            raise EntityNotFoundError("Session", session_id)
        return session
