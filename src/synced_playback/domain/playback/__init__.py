"""
Playback Bounded Context

Domain logic for session queues, the now-playing state and track-end scheduling.
"""

from synced_playback.domain.playback.entities import (
    NowPlayingItem,
    NowPlayingState,
    QueueItem,
    Track,
)
from synced_playback.domain.playback.repository import (
    NowPlayingRepository,
    QueueRepository,
    ReactionRepository,
    ScheduleRepository,
    TrackRepository,
)
from synced_playback.domain.playback.services import PlaybackDomainService
from synced_playback.domain.playback.value_objects import (
    ClaimResult,
    ReactionType,
    Transition,
    TransitionKind,
    TransitionTrigger,
)

__all__ = [
    # Entities
    "Track",
    "QueueItem",
    "NowPlayingState",
    "NowPlayingItem",
    # Value Objects
    "ClaimResult",
    "ReactionType",
    "Transition",
    "TransitionKind",
    "TransitionTrigger",
    # Repositories
    "QueueRepository",
    "NowPlayingRepository",
    "ScheduleRepository",
    "ReactionRepository",
    "TrackRepository",
    # Services
    "PlaybackDomainService",
]
