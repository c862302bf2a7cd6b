"""Presence Application Service - tracks who is listening to a session."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.events import ListenerJoined, SessionListenersUpdated
from ...domain.shared.exceptions import EntityNotFoundError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.playback.repository import ScheduleRepository
    from ...domain.sessions.repository import PresenceRepository, SessionRepository
    from ..interfaces.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class PresenceService:
    """Records listener pings and detects (re)joins.

    A user is present while ``now - last_ping < activity_timeout``. A ping from
    someone not present counts as a join. Pings from the creator also push the
    session-end deadline forward.
    """

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        presence_repository: PresenceRepository,
        session_end_schedule: ScheduleRepository,
        event_publisher: EventPublisher,
        activity_timeout: timedelta,
        session_live_timeout: timedelta,
        clock: Clock = utcnow,
    ) -> None:
        self._session_repo = session_repository
        self._presence_repo = presence_repository
        self._session_end_schedule = session_end_schedule
        self._publisher = event_publisher
        self._activity_timeout = activity_timeout
        self._session_live_timeout = session_live_timeout
        self._clock = clock

    async def ping(self, session_id: str, user_id: str) -> bool:
        """Record that a user is still in the session.

        Returns:
            True if the ping was classified as a join.

        Raises:
            EntityNotFoundError: If the session does not exist.
        """
        session = await self._session_repo.get(session_id)
        if session is None:
            raise EntityNotFoundError("Session", session_id)

        # Presence does not apply to ended sessions.
        if not session.is_live:
            return False

        now = self._clock()
        if session.is_creator(user_id):
            await self._session_repo.touch_creator_activity(session_id, now)
            deadline = now + self._session_live_timeout
            await self._session_end_schedule.arm(session_id, deadline)
            logger.debug(LogTemplates.SESSION_DEADLINE_REFRESHED, session_id, deadline.isoformat())

        previous = await self._presence_repo.ping(session_id, user_id, now)
        just_joined = previous is None or now - previous >= self._activity_timeout
        if not just_joined:
            return False

        logger.info(LogTemplates.LISTENER_JOINED, user_id, session_id)
        await self._publisher.publish(ListenerJoined(session_id=session_id, user_id=user_id))
        await self._publisher.publish(
            SessionListenersUpdated(session_id=session_id, listeners=await self.listeners(session_id))
        )
        return True

    async def listeners(self, session_id: str) -> list[str]:
        """User IDs currently present, most recently seen first."""
        since = self._clock() - self._activity_timeout
        return await self._presence_repo.active_since(session_id, since)
