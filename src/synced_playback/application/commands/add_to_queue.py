"""Command and handler for appending tracks to a live session's queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from ...domain.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
)
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.types import SessionIdStr, TrackIdStr, UserIdStr

if TYPE_CHECKING:
    from ...domain.playback.entities import QueueItem
    from ...domain.sessions.repository import SessionRepository
    from ..services.queue_service import QueueApplicationService


class AddToQueueCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr
    user_id: UserIdStr | None = None
    track_ids: list[TrackIdStr] = Field(default_factory=list)


class AddToQueueHandler:

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        queue_service: QueueApplicationService,
    ) -> None:
        self._session_repo = session_repository
        self._queue_service = queue_service

    async def handle(self, command: AddToQueueCommand) -> list[QueueItem]:
        if command.user_id is None:
            raise AuthenticationRequiredError()
        session = await self._session_repo.get(command.session_id)
        if session is None:
            raise EntityNotFoundError("Session", command.session_id)
        if not session.is_live:
            raise InvalidOperationError(
                "add_to_queue", "ended", message=ErrorMessages.SESSION_NOT_LIVE
            )
        if not session.is_collaborator(command.user_id):
            raise PermissionDeniedError(ErrorMessages.NOT_COLLABORATOR)
        return await self._queue_service.enqueue(
            command.session_id, command.user_id, command.track_ids
        )
