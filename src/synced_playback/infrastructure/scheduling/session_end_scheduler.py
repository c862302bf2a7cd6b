"""Session-end scheduler: ends sessions whose creator stopped pinging."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from synced_playback.domain.shared.datetime_utils import Clock, utcnow
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.services.session_service import SessionApplicationService
    from ...domain.playback.repository import ScheduleRepository

logger = logging.getLogger(__name__)


class SessionEndScheduler:
    """Polls the session-end schedule and ends every overdue session.

    No claim is needed: ending a session twice is a no-op.
    """

    def __init__(
        self,
        *,
        session_service: SessionApplicationService,
        session_end_schedule: ScheduleRepository,
        poll_interval_s: float = 60,
        clock: Clock = utcnow,
    ) -> None:
        self._session_service = session_service
        self._schedule = session_end_schedule
        self._poll_interval_s = poll_interval_s
        self._clock = clock
        self._running = False
        self._task: asyncio.Task[None] | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.SESSION_END_SCHEDULER_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="session-end-scheduler")
        logger.info(LogTemplates.SESSION_END_SCHEDULER_STARTED, self._poll_interval_s)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(LogTemplates.SESSION_END_SCHEDULER_STOPPED)

    @property
    def is_running(self) -> bool:
        return self._running

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.tick()
            except Exception:
                logger.exception(LogTemplates.SESSION_END_TICK_FAILED)

            try:
                await asyncio.sleep(self._poll_interval_s)
            except asyncio.CancelledError:
                break

    async def tick(self) -> int:
        """End every session whose deadline has passed.

        Returns:
            The number of sessions this call ended.
        """
        ended = 0
        for session_id in await self._schedule.due(self._clock()):
            logger.info(LogTemplates.SESSION_END_TRIGGERED, session_id)
            try:
                if await self._session_service.end_session(session_id):
                    ended += 1
            except Exception:
                logger.exception(LogTemplates.SESSION_END_FAILED, session_id)
        return ended
