"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from enum import Enum, StrEnum

from synced_playback.domain.shared.constants import PlaybackConstants
from synced_playback.domain.shared.exceptions import ValidationError
from synced_playback.domain.shared.messages import ErrorMessages


def new_queue_uid() -> str:
    """Return a short random URL-safe token for a queue item."""
    return secrets.token_urlsafe(PlaybackConstants.QUEUE_UID_BYTES)


class ReactionType(StrEnum):
    """The closed set of reactions listeners can leave on the current item."""

    HEART = "❤️"
    SPARKLES = "✨"
    FIRE = "🔥"
    CRYING = "😢"

    @classmethod
    def parse(cls, value: str) -> ReactionType:
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(ErrorMessages.REACTION_NOT_ALLOWED, field="reaction") from None


class ClaimResult(Enum):
    """Outcome of an atomic remove-if-present on a schedule entry.

    ALREADY_HANDLED means another scheduler instance (or a cancel) removed
    the entry first. It is an expected outcome, not a failure.
    """

    CLAIMED = "claimed"
    ALREADY_HANDLED = "already_handled"

    @classmethod
    def from_removed_count(cls, removed: int) -> ClaimResult:
        return cls.CLAIMED if removed > 0 else cls.ALREADY_HANDLED

    @property
    def is_claimed(self) -> bool:
        return self is ClaimResult.CLAIMED


class TransitionKind(StrEnum):
    SKIP_FORWARD = "skipForward"
    SKIP_BACKWARD = "skipBackward"
    PLAY_INDEX = "playIndex"
    PLAY_UID = "playUid"


class TransitionTrigger(Enum):
    """What asked for a transition.

    SCHEDULE transitions only run if they win the claim on the skip entry.
    COMMAND transitions cancel the pending entry and run regardless.
    """

    SCHEDULE = "schedule"
    COMMAND = "command"


@dataclass(frozen=True)
class Transition:
    """A requested move of the now-playing pointer."""

    kind: TransitionKind
    trigger: TransitionTrigger = TransitionTrigger.COMMAND
    index: int | None = None
    uid: str | None = None

    def __post_init__(self) -> None:
        if self.kind is TransitionKind.PLAY_INDEX:
            if self.index is None or self.index < 0:
                raise ValueError(ErrorMessages.INVALID_QUEUE_POSITION)
        if self.kind is TransitionKind.PLAY_UID and not self.uid:
            raise ValueError("uid is required to play a queue item")

    @classmethod
    def track_ended(cls) -> Transition:
        return cls(TransitionKind.SKIP_FORWARD, trigger=TransitionTrigger.SCHEDULE)

    @classmethod
    def skip_forward(cls) -> Transition:
        return cls(TransitionKind.SKIP_FORWARD)

    @classmethod
    def skip_backward(cls) -> Transition:
        return cls(TransitionKind.SKIP_BACKWARD)

    @classmethod
    def play_index(cls, index: int) -> Transition:
        return cls(TransitionKind.PLAY_INDEX, index=index)

    @classmethod
    def play_uid(cls, uid: str) -> Transition:
        return cls(TransitionKind.PLAY_UID, uid=uid)

    @property
    def is_scheduled(self) -> bool:
        return self.trigger is TransitionTrigger.SCHEDULE

    def __str__(self) -> str:
        if self.kind is TransitionKind.PLAY_INDEX:
            return f"{self.kind.value}({self.index})"
        if self.kind is TransitionKind.PLAY_UID:
            return f"{self.kind.value}({self.uid})"
        return self.kind.value
