"""Command and handler for jumping to a specific queue item."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...domain.playback.commands import PlayIndexCommand, PlayUidCommand
from ...domain.shared.messages import ErrorMessages, LogTemplates
from .skip_track import SkipResult, SkipStatus, ensure_collaborator

if TYPE_CHECKING:
    from ...domain.playback.commands import TransitionCommand
    from ...domain.playback.repository import QueueRepository
    from ...domain.sessions.repository import SessionRepository
    from ..interfaces.command_publisher import CommandPublisher

logger = logging.getLogger(__name__)


@dataclass
class PlayQueueItemCommand:
    """Command to play a queue item picked by uid or by position."""

    session_id: str
    user_id: str | None
    uid: str | None = None
    index: int | None = None

    def __post_init__(self) -> None:
        if (self.uid is None) == (self.index is None):
            raise ValueError("Exactly one of uid or index is required")
        if self.index is not None and self.index < 0:
            raise ValueError(ErrorMessages.INVALID_QUEUE_POSITION)


class PlayQueueItemHandler:

    def __init__(
        self,
        *,
        session_repository: SessionRepository,
        queue_repository: QueueRepository,
        command_publisher: CommandPublisher,
    ) -> None:
        self._session_repo = session_repository
        self._queue_repo = queue_repository
        self._command_publisher = command_publisher

    async def handle(self, command: PlayQueueItemCommand) -> SkipResult:
        await ensure_collaborator(self._session_repo, command.session_id, command.user_id)

        # Resolution details stay internal; callers only learn that it failed.
        worker_command: TransitionCommand
        if command.uid is not None:
            if await self._queue_repo.index_of(command.session_id, command.uid) is None:
                return SkipResult.error(SkipStatus.ERROR, ErrorMessages.PLAYBACK_ADVANCE_FAILED)
            worker_command = PlayUidCommand(session_id=command.session_id, uid=command.uid)
        else:
            assert command.index is not None
            if await self._queue_repo.uid_at(command.session_id, command.index) is None:
                return SkipResult.error(SkipStatus.ERROR, ErrorMessages.PLAYBACK_ADVANCE_FAILED)
            worker_command = PlayIndexCommand(session_id=command.session_id, index=command.index)

        await self._command_publisher.publish(worker_command)
        logger.debug(LogTemplates.COMMAND_PUBLISHED, worker_command.action, command.session_id)
        return SkipResult.success(worker_command)
