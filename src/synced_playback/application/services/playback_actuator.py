"""Playback Actuator - computes, commits and announces now-playing transitions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.playback.entities import NowPlayingItem, NowPlayingState
from ...domain.playback.services import PlaybackDomainService
from ...domain.playback.value_objects import Transition, TransitionKind
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.events import NowPlayingUpdated
from ...domain.shared.exceptions import PlaybackResolutionError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.playback.repository import (
        NowPlayingRepository,
        QueueRepository,
        ScheduleRepository,
        TrackRepository,
    )
    from ..interfaces.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class PlaybackActuator:
    """The only writer of now-playing state.

    Both the time-driven and the command-driven paths enter through
    :meth:`actuate`, which applies the claim discipline before executing.
    """

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        now_playing_repository: NowPlayingRepository,
        skip_schedule: ScheduleRepository,
        track_repository: TrackRepository,
        event_publisher: EventPublisher,
        clock: Clock = utcnow,
    ) -> None:
        self._queue_repo = queue_repository
        self._now_playing_repo = now_playing_repository
        self._skip_schedule = skip_schedule
        self._track_repo = track_repository
        self._publisher = event_publisher
        self._clock = clock

    async def actuate(self, session_id: str, transition: Transition) -> NowPlayingState | None:
        """Run a transition if this caller owns it.

        A scheduled transition runs only if it wins the claim on the session's
        track-end entry. A commanded transition cancels that entry first so a
        natural track end racing it cannot fire as well.

        Returns:
            The committed state, or None if the claim was lost or there was
            nothing to move.

        Raises:
            PlaybackResolutionError: If the target item or its track cannot be
                resolved. No state is written in that case.
        """
        if transition.is_scheduled:
            claim = await self._skip_schedule.claim_due(session_id, self._clock())
            if not claim.is_claimed:
                logger.debug(LogTemplates.SKIP_JOB_ALREADY_HANDLED, session_id)
                return None
        else:
            await self._skip_schedule.cancel(session_id)

        return await self._execute(session_id, transition)

    async def _execute(self, session_id: str, transition: Transition) -> NowPlayingState | None:
        match transition.kind:
            case TransitionKind.SKIP_FORWARD:
                return await self.skip_forward(session_id)
            case TransitionKind.SKIP_BACKWARD:
                return await self.skip_backward(session_id)
            case TransitionKind.PLAY_INDEX:
                return await self.play_index(session_id, transition.index or 0)
            case TransitionKind.PLAY_UID:
                return await self.play_uid(session_id, transition.uid or "")

    async def skip_forward(self, session_id: str) -> NowPlayingState | None:
        state = await self._now_playing_repo.get(session_id)
        if state is None:
            logger.debug(LogTemplates.TRANSITION_NO_STATE, session_id, TransitionKind.SKIP_FORWARD)
            return None
        length = await self._queue_repo.length(session_id)
        next_index = PlaybackDomainService.next_forward_index(state.playing_index, length)
        return await self.set_by_index_or_uid(session_id, next_index)

    async def skip_backward(self, session_id: str) -> NowPlayingState | None:
        state = await self._now_playing_repo.get(session_id)
        if state is None:
            logger.debug(LogTemplates.TRANSITION_NO_STATE, session_id, TransitionKind.SKIP_BACKWARD)
            return None
        next_index = PlaybackDomainService.next_backward_index(state.playing_index)
        return await self.set_by_index_or_uid(session_id, next_index)

    async def play_index(self, session_id: str, index: int) -> NowPlayingState:
        return await self.set_by_index_or_uid(session_id, index)

    async def play_uid(self, session_id: str, uid: str) -> NowPlayingState:
        return await self.set_by_index_or_uid(session_id, uid)

    async def set_by_index_or_uid(self, session_id: str, index_or_uid: int | str) -> NowPlayingState:
        """Point the session at a queue item and start it now.

        Args:
            session_id: The session.
            index_or_uid: Queue position (int) or queue item uid (str).

        Returns:
            The committed state.

        Raises:
            PlaybackResolutionError: If the index, uid, queue item or track
                cannot be resolved.
        """
        if isinstance(index_or_uid, str):
            uid = index_or_uid
            found_index = await self._queue_repo.index_of(session_id, uid)
            if found_index is None:
                raise PlaybackResolutionError(
                    session_id, ErrorMessages.QUEUE_INDEX_UNRESOLVED.format(uid=uid)
                )
            index = found_index
        else:
            index = index_or_uid
            found_uid = await self._queue_repo.uid_at(session_id, index)
            if found_uid is None:
                raise PlaybackResolutionError(
                    session_id, ErrorMessages.QUEUE_UID_UNRESOLVED.format(index=index)
                )
            uid = found_uid

        item = await self._queue_repo.get_item(session_id, uid)
        if item is None:
            raise PlaybackResolutionError(
                session_id, ErrorMessages.QUEUE_ITEM_UNRESOLVED.format(uid=uid)
            )

        duration_ms = await self._track_repo.get_duration_ms(item.track_id)
        if duration_ms is None:
            raise PlaybackResolutionError(
                session_id, ErrorMessages.TRACK_UNRESOLVED.format(track_id=item.track_id)
            )

        state = NowPlayingState.start(
            index=index,
            uid=uid,
            duration_ms=duration_ms,
            now=self._clock(),
        )
        await self._now_playing_repo.commit(session_id, state)
        logger.info(LogTemplates.NOW_PLAYING_SET, session_id, index, uid, state.ended_at.isoformat())

        await self.notify_update(session_id, NowPlayingItem.current(item, state))
        return state

    async def notify_update(self, session_id: str, current: NowPlayingItem | None = None) -> None:
        """Publish the current item and, best-effort, the one after it."""
        if current is None:
            state = await self._now_playing_repo.get(session_id)
            if state is None:
                return
            item = await self._queue_repo.get_item(session_id, state.playing_uid)
            if item is None:
                return
            current = NowPlayingItem.current(item, state)

        upcoming: NowPlayingItem | None = None
        next_index = current.index + 1
        next_item = await self._queue_repo.item_at(session_id, next_index)
        if next_item is not None and next_item.uid:
            upcoming = NowPlayingItem.upcoming(next_item, next_index)

        await self._publisher.publish(
            NowPlayingUpdated(session_id=session_id, current=current, next=upcoming)
        )

    async def remove(self, session_id: str) -> None:
        """Drop the session's state and its pending track-end entry."""
        await self._now_playing_repo.remove(session_id)
        await self._skip_schedule.cancel(session_id)
        logger.debug(LogTemplates.NOW_PLAYING_REMOVED, session_id)
