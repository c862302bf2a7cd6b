"""Typed commands carried on the playback worker channel.

Request-side processes never mutate the now-playing state themselves; they
publish one of these and a worker performs the transition. Commands are
serialized as JSON and discriminated by ``action``.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from synced_playback.domain.playback.value_objects import Transition
from synced_playback.domain.shared.types import EpochMillis, QueueIndex, QueueUidStr, SessionIdStr


class _WorkerCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: SessionIdStr


class SkipForwardCommand(_WorkerCommand):
    action: Literal["skipForward"] = "skipForward"

    def to_transition(self) -> Transition:
        return Transition.skip_forward()


class SkipBackwardCommand(_WorkerCommand):
    action: Literal["skipBackward"] = "skipBackward"

    def to_transition(self) -> Transition:
        return Transition.skip_backward()


class PlayIndexCommand(_WorkerCommand):
    action: Literal["playIndex"] = "playIndex"
    index: QueueIndex

    def to_transition(self) -> Transition:
        return Transition.play_index(self.index)


class PlayUidCommand(_WorkerCommand):
    action: Literal["playUid"] = "playUid"
    uid: QueueUidStr

    def to_transition(self) -> Transition:
        return Transition.play_uid(self.uid)


class RescheduleCommand(_WorkerCommand):
    """Move the pending track-end entry of a session to a new instant."""

    action: Literal["reschedule"] = "reschedule"
    ended_at_ms: EpochMillis


TransitionCommand = SkipForwardCommand | SkipBackwardCommand | PlayIndexCommand | PlayUidCommand

WorkerCommand = Annotated[
    SkipForwardCommand
    | SkipBackwardCommand
    | PlayIndexCommand
    | PlayUidCommand
    | RescheduleCommand,
    Field(discriminator="action"),
]

_worker_command_adapter: TypeAdapter[WorkerCommand] = TypeAdapter(WorkerCommand)


def parse_worker_command(raw: str | bytes) -> WorkerCommand:
    """Parse a command received on the worker channel.

    Raises:
        pydantic.ValidationError: If the payload is not a known command.
    """
    return _worker_command_adapter.validate_json(raw)


def dump_worker_command(command: WorkerCommand) -> str:
    return command.model_dump_json()
