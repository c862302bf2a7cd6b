"""
Sessions Bounded Context

Domain logic for session lifecycle, collaborators, presence and invites.
"""

from synced_playback.domain.sessions.entities import PlaybackSession
from synced_playback.domain.sessions.repository import (
    InviteTokenRepository,
    PresenceRepository,
    SessionRepository,
)

__all__ = [
    "PlaybackSession",
    "SessionRepository",
    "PresenceRepository",
    "InviteTokenRepository",
]
