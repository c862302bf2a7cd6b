"""Query for retrieving what a session is playing now and next."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.playback.entities import NowPlayingItem
from ...domain.shared.datetime_utils import Clock, utcnow
from ...domain.shared.types import SessionIdStr

if TYPE_CHECKING:
    from ...domain.playback.repository import NowPlayingRepository, QueueRepository


class GetNowPlayingQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr
    show_played: bool = False


class NowPlayingInfo(BaseModel):

    session_id: SessionIdStr
    current: NowPlayingItem
    next: NowPlayingItem | None = None


class GetNowPlayingHandler:
    """Reads the now-playing state and resolves its queue items.

    An item whose ``ended_at`` has passed is hidden unless ``show_played`` is
    set; that happens briefly between a track ending and the worker advancing.
    """

    def __init__(
        self,
        *,
        now_playing_repository: NowPlayingRepository,
        queue_repository: QueueRepository,
        clock: Clock = utcnow,
    ) -> None:
        self._now_playing_repo = now_playing_repository
        self._queue_repo = queue_repository
        self._clock = clock

    async def handle(self, query: GetNowPlayingQuery) -> NowPlayingInfo | None:
        state = await self._now_playing_repo.get(query.session_id)
        if state is None:
            return None
        if not query.show_played and state.has_ended(self._clock()):
            return None

        item = await self._queue_repo.get_item(query.session_id, state.playing_uid)
        if item is None:
            return None

        next_index = state.playing_index + 1
        next_item = await self._queue_repo.item_at(query.session_id, next_index)
        return NowPlayingInfo(
            session_id=query.session_id,
            current=NowPlayingItem.current(item, state),
            next=NowPlayingItem.upcoming(next_item, next_index) if next_item else None,
        )
