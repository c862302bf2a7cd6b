"""SQLite repository implementations."""

from synced_playback.infrastructure.persistence.repositories.session_repository import (
    SQLiteSessionRepository,
)
from synced_playback.infrastructure.persistence.repositories.track_repository import (
    SQLiteTrackRepository,
)

__all__ = [
    "SQLiteSessionRepository",
    "SQLiteTrackRepository",
]
