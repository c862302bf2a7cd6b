"""Playback worker: the long-running process hosting both schedulers."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session_end_scheduler import SessionEndScheduler
    from .skip_scheduler import SkipScheduler

logger = logging.getLogger(__name__)


class PlaybackWorker:
    def __init__(
        self,
        *,
        skip_scheduler: SkipScheduler,
        session_end_scheduler: SessionEndScheduler,
    ) -> None:
        self._skip_scheduler = skip_scheduler
        self._session_end_scheduler = session_end_scheduler
        self._stop_event = asyncio.Event()

    def start(self) -> None:
        self._skip_scheduler.start()
        self._session_end_scheduler.start()

    async def stop(self) -> None:
        await self._skip_scheduler.stop()
        await self._session_end_scheduler.stop()

    def request_stop(self) -> None:
        self._stop_event.set()

    async def run(self) -> None:
        """Run both schedulers until :meth:`request_stop` is called."""
        self.start()
        try:
            await self._stop_event.wait()
        finally:
            await self.stop()

    @property
    def is_running(self) -> bool:
        return self._skip_scheduler.is_running or self._session_end_scheduler.is_running
