"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, model_validator

from synced_playback.domain.playback.value_objects import new_queue_uid
from synced_playback.domain.shared.types import (
    DurationMs,
    NonEmptyStr,
    QueueIndex,
    QueueUidStr,
    TrackIdStr,
    UserIdStr,
    UtcDatetimeField,
)


class Track(BaseModel):
    """The slice of track metadata the engine needs: how long it plays."""

    model_config = ConfigDict(frozen=True, strict=True)

    id: TrackIdStr
    title: NonEmptyStr
    duration_ms: DurationMs


class QueueItem(BaseModel):
    """An entry of a session queue.

    ``uid`` is the stable handle of the item. It survives index shifts caused
    by edits elsewhere in the queue and is what the now-playing state points at.
    """

    model_config = ConfigDict(frozen=True)

    uid: QueueUidStr | None = None
    track_id: TrackIdStr
    creator_id: UserIdStr

    def ensure_uid(self) -> QueueItem:
        """Return this item, or a copy carrying a fresh uid if it has none."""
        if self.uid:
            return self
        return self.model_copy(update={"uid": new_queue_uid()})


class NowPlayingState(BaseModel):
    """The single authority for what a session is playing.

    Always replaced as a whole; there are no partial updates.
    """

    model_config = ConfigDict(frozen=True)

    playing_index: QueueIndex
    playing_uid: QueueUidStr
    played_at: UtcDatetimeField
    ended_at: UtcDatetimeField

    @model_validator(mode="after")
    def _ended_after_played(self) -> NowPlayingState:
        if self.ended_at < self.played_at:
            raise ValueError("ended_at must not be before played_at")
        return self

    @classmethod
    def start(
        cls, *, index: int, uid: str, duration_ms: int, now: datetime
    ) -> NowPlayingState:
        return cls(
            playing_index=index,
            playing_uid=uid,
            played_at=now,
            ended_at=now + timedelta(milliseconds=duration_ms),
        )

    @property
    def duration_ms(self) -> int:
        return (self.ended_at - self.played_at) // timedelta(milliseconds=1)

    def has_ended(self, now: datetime) -> bool:
        return self.ended_at <= now


class NowPlayingItem(BaseModel):
    """Read model of the current (or next) queue item sent to subscribers."""

    model_config = ConfigDict(frozen=True)

    uid: QueueUidStr
    track_id: TrackIdStr
    creator_id: UserIdStr
    index: QueueIndex
    played_at: UtcDatetimeField | None = None
    ended_at: UtcDatetimeField | None = None

    @classmethod
    def current(cls, item: QueueItem, state: NowPlayingState) -> NowPlayingItem:
        return cls(
            uid=state.playing_uid,
            track_id=item.track_id,
            creator_id=item.creator_id,
            index=state.playing_index,
            played_at=state.played_at,
            ended_at=state.ended_at,
        )

    @classmethod
    def upcoming(cls, item: QueueItem, index: int) -> NowPlayingItem:
        return cls(uid=item.uid, track_id=item.track_id, creator_id=item.creator_id, index=index)
