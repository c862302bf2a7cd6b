"""Core domain entities for the sessions bounded context."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from synced_playback.domain.shared.constants import PlaybackConstants
from synced_playback.domain.shared.datetime_utils import utcnow
from synced_playback.domain.shared.types import (
    SessionIdStr,
    SessionTextStr,
    TrackIdStr,
    UserIdStr,
    UtcDatetimeField,
)


class PlaybackSession(BaseModel):
    """Aggregate root for a shared listening session.

    ``is_live`` flips from True to False exactly once. ``track_ids`` stays
    empty while live and receives the archived queue order when the session
    ends.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: SessionIdStr
    creator_id: UserIdStr
    text: SessionTextStr | None = None
    is_live: bool = True
    collaborator_ids: list[UserIdStr] = Field(default_factory=list)
    track_ids: list[TrackIdStr] = Field(default_factory=list)
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    last_creator_activity_at: UtcDatetimeField = Field(default_factory=utcnow)

    @field_validator("text", mode="before")
    @classmethod
    def _trim_text(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()[: PlaybackConstants.SESSION_TEXT_MAX_LENGTH]
        return v or None

    def is_creator(self, user_id: str | None) -> bool:
        return user_id is not None and user_id == self.creator_id

    def is_collaborator(self, user_id: str | None) -> bool:
        return user_id is not None and user_id in self.collaborator_ids

    def add_collaborator(self, user_id: str) -> bool:
        """Add a collaborator. Returns False if already a member."""
        if user_id in self.collaborator_ids:
            return False
        self.collaborator_ids = [*self.collaborator_ids, user_id]
        return True

    def touch_creator_activity(self, at: datetime | None = None) -> None:
        self.last_creator_activity_at = at or utcnow()

    def end(self, track_ids: list[str]) -> bool:
        """Mark the session ended, archiving the final queue order.

        Returns:
            True if the session was live, False if it had already ended.
        """
        if not self.is_live:
            return False
        self.is_live = False
        self.track_ids = list(track_ids)
        return True
