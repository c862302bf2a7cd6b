"""SQLite implementation of the track catalogue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from synced_playback.domain.playback.entities import Track
from synced_playback.domain.playback.repository import TrackRepository
from synced_playback.domain.shared.constants import DatabaseTables
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


class SQLiteTrackRepository(TrackRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, track_id: str) -> Track | None:
        row = await self._db.fetch_one(
            f"SELECT id, title, duration_ms FROM {DatabaseTables.TRACKS} WHERE id = ?",
            (track_id,),
        )
        if row is None:
            return None
        return Track(id=row["id"], title=row["title"], duration_ms=row["duration_ms"])

    async def get_duration_ms(self, track_id: str) -> int | None:
        row = await self._db.fetch_one(
            f"SELECT duration_ms FROM {DatabaseTables.TRACKS} WHERE id = ?",
            (track_id,),
        )
        return int(row["duration_ms"]) if row else None

    async def save(self, track: Track) -> None:
        await self._db.execute(
            f"""
            INSERT INTO {DatabaseTables.TRACKS} (id, title, duration_ms) VALUES (?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title,
                duration_ms = excluded.duration_ms
            """,
            (track.id, track.title, track.duration_ms),
        )
        logger.debug(LogTemplates.TRACK_SAVED, track.id)
