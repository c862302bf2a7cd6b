"""Reaction Application Service - reactions on the currently playing item."""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from ...domain.playback.value_objects import ReactionType
from ...domain.shared.events import NowPlayingReactionsUpdated
from ...domain.shared.exceptions import AuthenticationRequiredError
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ...domain.playback.repository import NowPlayingRepository, ReactionRepository
    from ..interfaces.event_publisher import EventPublisher

logger = logging.getLogger(__name__)


class ReactionService:
    """Reads and writes reactions keyed by the current ``playing_uid``.

    Reactions left on an earlier item are never read again once playback has
    moved on, so they need no cleanup.
    """

    def __init__(
        self,
        *,
        now_playing_repository: NowPlayingRepository,
        reaction_repository: ReactionRepository,
        event_publisher: EventPublisher,
    ) -> None:
        self._now_playing_repo = now_playing_repository
        self._reaction_repo = reaction_repository
        self._publisher = event_publisher

    async def react(self, session_id: str, user_id: str | None, reaction: str | None) -> bool:
        """Set or clear a user's reaction on the current item.

        Args:
            session_id: The session.
            user_id: The reacting user; None for anonymous callers.
            reaction: One of the allowed symbols, or None/empty to clear.

        Returns:
            False if nothing is playing, True otherwise.

        Raises:
            AuthenticationRequiredError: If the caller is anonymous.
            ValidationError: If the symbol is not an allowed reaction.
        """
        if user_id is None:
            raise AuthenticationRequiredError()
        parsed = ReactionType.parse(reaction) if reaction else None

        state = await self._now_playing_repo.get(session_id)
        if state is None:
            return False

        if parsed is None:
            await self._reaction_repo.remove(session_id, state.playing_uid, user_id)
        else:
            await self._reaction_repo.set(session_id, state.playing_uid, user_id, parsed.value)
            logger.debug(LogTemplates.REACTION_SET, user_id, parsed.value, session_id)

        reactions = await self._reaction_repo.all(session_id, state.playing_uid)
        await self._publisher.publish(
            NowPlayingReactionsUpdated(
                session_id=session_id,
                uid=state.playing_uid,
                tallies=self.tally(reactions),
                reactions=reactions,
            )
        )
        return True

    async def all_reactions(self, session_id: str) -> dict[str, str]:
        """Reactions by user ID for the current item only."""
        state = await self._now_playing_repo.get(session_id)
        if state is None:
            return {}
        return await self._reaction_repo.all(session_id, state.playing_uid)

    @staticmethod
    def tally(reactions: dict[str, str]) -> dict[str, int]:
        counts = Counter(reactions.values())
        return {reaction.value: counts.get(reaction.value, 0) for reaction in ReactionType}
