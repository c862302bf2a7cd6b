"""
Skip Track Command

Command and handler for asking the worker to move playback forward or back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ...domain.playback.commands import SkipBackwardCommand, SkipForwardCommand
from ...domain.shared.exceptions import AuthenticationRequiredError, PermissionDeniedError
from ...domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ...domain.playback.commands import TransitionCommand
    from ...domain.playback.repository import NowPlayingRepository, QueueRepository
    from ...domain.sessions.repository import SessionRepository
    from ..interfaces.command_publisher import CommandPublisher

logger = logging.getLogger(__name__)


class SkipStatus(Enum):
    """Status codes for skip results."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"
    ERROR = "error"


@dataclass
class SkipTrackCommand:
    """Command to skip to the next (or previous) queue item."""

    session_id: str
    user_id: str | None
    backward: bool = False

    def __post_init__(self) -> None:
        if not self.session_id:
            raise ValueError("Session ID must not be empty")


@dataclass
class SkipResult:
    """Result of a skip or jump request.

    A successful result means the command was handed to the worker, not that
    the transition has already happened.
    """

    status: SkipStatus
    message: str
    command: TransitionCommand | None = None

    @property
    def is_success(self) -> bool:
        return self.status == SkipStatus.SUCCESS

    @classmethod
    def success(cls, command: TransitionCommand) -> SkipResult:
        return cls(status=SkipStatus.SUCCESS, message="Playback change requested", command=command)

    @classmethod
    def error(cls, status: SkipStatus, message: str) -> SkipResult:
        return cls(status=status, message=message)


async def ensure_collaborator(
    session_repository: SessionRepository, session_id: str, user_id: str | None
) -> str:
    """Reject anonymous callers and callers outside the session's collaborators.

    Returns:
        The authenticated user ID.
    """
    if user_id is None:
        raise AuthenticationRequiredError()
    collaborators = await session_repository.get_collaborators(session_id)
    if user_id not in collaborators:
        raise PermissionDeniedError(ErrorMessages.NOT_COLLABORATOR)
    return user_id


class SkipTrackHandler:
    """Handler for SkipTrackCommand.

    Checks permissions and that something is playing, then publishes the
    skip on the worker channel. The worker performs the transition.
    """

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        now_playing_repository: NowPlayingRepository,
        queue_repository: QueueRepository,
        command_publisher: CommandPublisher,
    ) -> None:
        self._session_repo = session_repository
        self._now_playing_repo = now_playing_repository
        self._queue_repo = queue_repository
        self._command_publisher = command_publisher

    async def handle(self, command: SkipTrackCommand) -> SkipResult:
        """Execute the skip track command.

        Args:
            command: The skip track command.

        Returns:
            The result of the operation.

        Raises:
            AuthenticationRequiredError: If the caller is anonymous.
            PermissionDeniedError: If the caller is not a collaborator.
        """
        await ensure_collaborator(self._session_repo, command.session_id, command.user_id)

        state = await self._now_playing_repo.get(command.session_id)
        if state is None:
            return SkipResult.error(SkipStatus.NOTHING_PLAYING, ErrorMessages.NOTHING_PLAYING)

        if await self._queue_repo.length(command.session_id) == 0:
            return SkipResult.error(SkipStatus.ERROR, ErrorMessages.PLAYBACK_ADVANCE_FAILED)

        worker_command: TransitionCommand
        if command.backward:
            worker_command = SkipBackwardCommand(session_id=command.session_id)
        else:
            worker_command = SkipForwardCommand(session_id=command.session_id)

        await self._command_publisher.publish(worker_command)
        logger.debug(LogTemplates.COMMAND_PUBLISHED, worker_command.action, command.session_id)
        return SkipResult.success(worker_command)
