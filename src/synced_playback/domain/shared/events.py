"""Domain events fanned out to session subscribers.

Each event belongs to one session and is published on the channel named by
its ``CHANNEL`` suffixed with the session id.
"""

from __future__ import annotations

from typing import ClassVar, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from synced_playback.domain.playback.entities import NowPlayingItem, QueueItem
from synced_playback.domain.shared.constants import PubSubChannels
from synced_playback.domain.shared.datetime_utils import utcnow
from synced_playback.domain.shared.types import (
    NonEmptyStr,
    NonNegativeInt,
    SessionIdStr,
    UserIdStr,
    UtcDatetimeField,
)


class DomainEvent(BaseModel):
    """Base class for all session-scoped domain events."""

    model_config = ConfigDict(frozen=True)

    CHANNEL: ClassVar[str]

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)
    session_id: SessionIdStr

    @property
    def channel(self) -> str:
        return PubSubChannels.for_session(self.CHANNEL, self.session_id)


# === Playback Events ===


class NowPlayingUpdated(DomainEvent):
    CHANNEL: ClassVar[str] = PubSubChannels.NOW_PLAYING_UPDATED

    event_type: Literal["NowPlayingUpdated"] = "NowPlayingUpdated"
    current: NowPlayingItem | None = None
    next: NowPlayingItem | None = None


class NowPlayingReactionsUpdated(DomainEvent):
    CHANNEL: ClassVar[str] = PubSubChannels.NOW_PLAYING_REACTIONS_UPDATED

    event_type: Literal["NowPlayingReactionsUpdated"] = "NowPlayingReactionsUpdated"
    uid: NonEmptyStr
    tallies: dict[str, NonNegativeInt] = Field(default_factory=dict)
    reactions: dict[str, str] = Field(default_factory=dict)


class QueueUpdated(DomainEvent):
    CHANNEL: ClassVar[str] = PubSubChannels.QUEUE_UPDATED

    event_type: Literal["QueueUpdated"] = "QueueUpdated"
    items: list[QueueItem] = Field(default_factory=list)


# === Session Events ===


class SessionUpdated(DomainEvent):
    CHANNEL: ClassVar[str] = PubSubChannels.SESSION_UPDATED

    event_type: Literal["SessionUpdated"] = "SessionUpdated"
    is_live: bool


class SessionListenersUpdated(DomainEvent):
    CHANNEL: ClassVar[str] = PubSubChannels.SESSION_LISTENERS_UPDATED

    event_type: Literal["SessionListenersUpdated"] = "SessionListenersUpdated"
    listeners: list[UserIdStr] = Field(default_factory=list)


class ListenerJoined(DomainEvent):
    """The "join" chat message shown when a listener (re)enters a session."""

    CHANNEL: ClassVar[str] = PubSubChannels.MESSAGE_ADDED

    event_type: Literal["ListenerJoined"] = "ListenerJoined"
    user_id: UserIdStr
