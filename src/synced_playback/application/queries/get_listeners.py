"""Query for retrieving who is listening to a session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from synced_playback.domain.shared.types import SessionIdStr, UserIdStr

if TYPE_CHECKING:
    from ..services.presence_service import PresenceService


class GetListenersQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr


class ListenersInfo(BaseModel):

    session_id: SessionIdStr
    listeners: list[UserIdStr] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.listeners)


class GetListenersHandler:

    def __init__(self, *, presence_service: PresenceService) -> None:
        self._presence_service = presence_service

    async def handle(self, query: GetListenersQuery) -> ListenersInfo:
        listeners = await self._presence_service.listeners(query.session_id)
        return ListenersInfo(session_id=query.session_id, listeners=listeners)
