"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from synced_playback.application.commands.add_to_queue import AddToQueueCommand, AddToQueueHandler
from synced_playback.application.commands.end_session import EndSessionCommand, EndSessionHandler
from synced_playback.application.commands.play_queue_item import (
    PlayQueueItemCommand,
    PlayQueueItemHandler,
)
from synced_playback.application.commands.skip_track import (
    SkipResult,
    SkipStatus,
    SkipTrackCommand,
    SkipTrackHandler,
)

__all__ = [
    # Skip
    "SkipTrackCommand",
    "SkipTrackHandler",
    "SkipResult",
    "SkipStatus",
    # Jump
    "PlayQueueItemCommand",
    "PlayQueueItemHandler",
    # Queue
    "AddToQueueCommand",
    "AddToQueueHandler",
    # Session
    "EndSessionCommand",
    "EndSessionHandler",
]
