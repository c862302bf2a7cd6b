"""Query for retrieving a session queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from synced_playback.domain.playback.entities import QueueItem
from synced_playback.domain.shared.types import NonNegativeInt, SessionIdStr

if TYPE_CHECKING:
    from ...domain.playback.repository import NowPlayingRepository, QueueRepository


class GetQueueQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr
    start: int = 0
    stop: int = -1


class QueueInfo(BaseModel):

    session_id: SessionIdStr
    items: list[QueueItem] = Field(default_factory=list)
    playing_index: NonNegativeInt | None = None

    @property
    def length(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0


class GetQueueHandler:

    def __init__(
        self,
        *,
        queue_repository: QueueRepository,
        now_playing_repository: NowPlayingRepository,
    ) -> None:
        self._queue_repo = queue_repository
        self._now_playing_repo = now_playing_repository

    async def handle(self, query: GetQueueQuery) -> QueueInfo:
        items = await self._queue_repo.range(query.session_id, query.start, query.stop)
        state = await self._now_playing_repo.get(query.session_id)
        return QueueInfo(
            session_id=query.session_id,
            items=items,
            playing_index=state.playing_index if state else None,
        )
