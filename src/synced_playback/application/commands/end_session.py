"""Command and handler for the creator ending their session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.shared.exceptions import (
    AuthenticationRequiredError,
    EntityNotFoundError,
    PermissionDeniedError,
)
from ...domain.shared.messages import ErrorMessages
from ...domain.shared.types import SessionIdStr, UserIdStr

if TYPE_CHECKING:
    from ...domain.sessions.repository import SessionRepository
    from ..services.session_service import SessionApplicationService


class EndSessionCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr
    user_id: UserIdStr | None = None


class EndSessionHandler:

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        session_service: SessionApplicationService,
    ) -> None:
        self._session_repo = session_repository
        self._session_service = session_service

    async def handle(self, command: EndSessionCommand) -> bool:
        """End the session if the caller created it.

        Returns:
            True if the session was live and has now ended.
        """
        if command.user_id is None:
            raise AuthenticationRequiredError()
        session = await self._session_repo.get(command.session_id)
        if session is None:
            raise EntityNotFoundError("Session", command.session_id)
        if not session.is_creator(command.user_id):
            raise PermissionDeniedError(ErrorMessages.NOT_CREATOR)
        return await self._session_service.end_session(command.session_id)
