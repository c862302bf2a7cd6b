"""Queue Application Service - validates and appends tracks to session queues."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.playback.entities import QueueItem
from ...domain.playback.services import PlaybackDomainService
from ...domain.shared.events import QueueUpdated
from ...domain.shared.exceptions import ValidationError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ...domain.playback.repository import QueueRepository, TrackRepository
    from ..interfaces.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class QueueApplicationService:
    """Appends tracks to a session queue.

    Permission checks belong to the callers; this service only guarantees that
    every queued track exists in the catalogue and is short enough to play.
    """

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        track_repository: TrackRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._queue_repo = queue_repository
        self._track_repo = track_repository
        self._publisher = event_publisher

    async def validate_tracks(self, track_ids: Sequence[str]) -> None:
        """Check every track before anything is written.

        Raises:
            ValidationError: If the list is empty, or a track is unknown or
                too long.
        """
        if not track_ids:
            raise ValidationError(ErrorMessages.TRACKS_REQUIRED, field="tracks")
        for track_id in track_ids:
            duration_ms = await self._track_repo.get_duration_ms(track_id)
            if duration_ms is None:
                raise ValidationError(
                    ErrorMessages.TRACK_NOT_FOUND.format(track_id=track_id), field="tracks"
                )
            if not PlaybackDomainService.validate_track_duration(duration_ms):
                raise ValidationError(
                    ErrorMessages.TRACK_TOO_LONG.format(track_id=track_id), field="tracks"
                )

    async def enqueue(
        self, session_id: str, creator_id: str, track_ids: Sequence[str]
    ) -> list[QueueItem]:
        """Validate and append tracks, then announce the new queue.

        Returns:
            The appended items with their assigned uids.
        """
        await self.validate_tracks(track_ids)
        items = [
            QueueItem(track_id=track_id, creator_id=creator_id).ensure_uid()
            for track_id in track_ids
        ]
        length = await self._queue_repo.push(session_id, items)
        logger.info(LogTemplates.QUEUE_PUSHED, len(items), session_id)

        await self._publisher.publish(
            QueueUpdated(session_id=session_id, items=await self._queue_repo.range(session_id))
        )
        logger.debug("Queue of session %s now holds %s items", session_id, length)
        return items

    async def get_queue(self, session_id: str, start: int = 0, stop: int = -1) -> list[QueueItem]:
        return await self._queue_repo.range(session_id, start, stop)

    async def track_ids(self, session_id: str) -> list[str]:
        """Track IDs of the whole queue in order."""
        return [item.track_id for item in await self._queue_repo.range(session_id)]
