"""Track-end skip scheduler.

Runs two loops against the same actuator: a poll over the skip schedule for
due track ends, and a subscriber on the worker command channel. Any number of
instances may run; the claim on each schedule entry keeps execution
at-most-once per due time.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from synced_playback.domain.playback.commands import RescheduleCommand
from synced_playback.domain.playback.value_objects import Transition
from synced_playback.domain.shared.datetime_utils import Clock, from_epoch_ms, utcnow
from synced_playback.domain.shared.exceptions import PlaybackResolutionError
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...application.services.playback_actuator import PlaybackActuator
    from ...domain.playback.commands import WorkerCommand
    from ...domain.playback.repository import ScheduleRepository
    from ..redis.command_channel import RedisCommandListener

logger = logging.getLogger(__name__)


class SkipScheduler:
    def __init__(
        self,
        *,
        actuator: PlaybackActuator,
        skip_schedule: ScheduleRepository,
        command_listener: RedisCommandListener | None = None,
        poll_interval_ms: int = 1000,
        resubscribe_delay_s: float = 1.0,
        clock: Clock = utcnow,
    ) -> None:
        self._actuator = actuator
        self._schedule = skip_schedule
        self._listener = command_listener
        self._poll_interval_s = poll_interval_ms / 1000
        self._resubscribe_delay_s = resubscribe_delay_s
        self._clock = clock
        self._running = False
        self._tasks: list[asyncio.Task[None]] = []

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.SKIP_SCHEDULER_ALREADY_RUNNING)
            return

        self._running = True
        self._tasks = [asyncio.create_task(self._run_loop(), name="skip-scheduler-poll")]
        if self._listener is not None:
            self._tasks.append(
                asyncio.create_task(self._listen_loop(), name="skip-scheduler-commands")
            )
        logger.info(LogTemplates.SKIP_SCHEDULER_STARTED, int(self._poll_interval_s * 1000))

    async def stop(self) -> None:
        self._running = False

        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            with suppress(asyncio.CancelledError):
                await task
        self._tasks = []

        logger.info(LogTemplates.SKIP_SCHEDULER_STOPPED)

    @property
    def is_running(self) -> bool:
        return self._running

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.tick()
            except Exception:
                # Store outages are retried on the next tick.
                logger.exception(LogTemplates.SKIP_SCHEDULER_TICK_FAILED)

            try:
                await asyncio.sleep(self._poll_interval_s)
            except asyncio.CancelledError:
                break

    async def tick(self) -> int:
        """Run every due track end once.

        Sessions are processed independently: a failure in one is logged and
        re-armed without cancelling the others.

        Returns:
            The number of transitions this instance committed.
        """
        due = await self._schedule.due(self._clock())
        if not due:
            return 0

        results = await asyncio.gather(
            *(self._process_due(session_id) for session_id in due), return_exceptions=True
        )
        committed = 0
        for session_id, result in zip(due, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(LogTemplates.SKIP_JOB_FAILED, session_id, exc_info=result)
            elif result:
                committed += 1
        return committed

    async def _process_due(self, session_id: str) -> bool:
        logger.debug(LogTemplates.SKIP_JOB_TRIGGERED, session_id)
        try:
            committed = await self._run_transition(session_id, Transition.track_ended())
        except Exception:
            # The claim already removed the entry; put it back so the next tick
            # retries. A deadline armed meanwhile by a newer commit is kept.
            logger.exception(LogTemplates.SKIP_JOB_FAILED, session_id)
            await self._schedule.arm_if_absent(session_id, self._clock())
            return False
        if committed:
            logger.info(LogTemplates.SKIP_JOB_DONE, session_id)
        return committed

    async def _listen_loop(self) -> None:
        listener = self._listener
        if listener is None:
            return
        while self._running:
            try:
                async for command in listener.listen():
                    await self.handle_command(command)
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception(LogTemplates.COMMAND_LISTENER_FAILED)
                try:
                    await asyncio.sleep(self._resubscribe_delay_s)
                except asyncio.CancelledError:
                    break
        logger.info(LogTemplates.COMMAND_LISTENER_STOPPED)

    async def handle_command(self, command: WorkerCommand) -> bool:
        """Apply one command received on the worker channel.

        Returns:
            True if the command changed the schedule or the now-playing state.
        """
        logger.info(LogTemplates.COMMAND_RECEIVED, command.action, command.session_id)

        if isinstance(command, RescheduleCommand):
            at = from_epoch_ms(command.ended_at_ms)
            await self._schedule.arm(command.session_id, at)
            logger.debug(LogTemplates.SKIP_ARMED, command.session_id, at.isoformat())
            return True

        return await self._run_transition(command.session_id, command.to_transition())

    async def _run_transition(self, session_id: str, transition: Transition) -> bool:
        try:
            state = await self._actuator.actuate(session_id, transition)
        except PlaybackResolutionError as e:
            # Left for the next trigger; the previous state stays in place.
            logger.error(LogTemplates.TRANSITION_FAILED, transition, session_id, e.detail)
            return False
        return state is not None
