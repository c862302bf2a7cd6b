"""SQLite implementation of the session repository."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from synced_playback.domain.sessions.entities import PlaybackSession
from synced_playback.domain.sessions.repository import SessionRepository
from synced_playback.domain.shared.constants import DatabaseTables
from synced_playback.domain.shared.datetime_utils import UtcDateTime
from synced_playback.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    import aiosqlite

    from ..database import Database

logger = logging.getLogger(__name__)

_SESSIONS = DatabaseTables.SESSIONS
_COLLABORATORS = DatabaseTables.SESSION_COLLABORATORS
_TRACKS = DatabaseTables.SESSION_TRACKS


class SQLiteSessionRepository(SessionRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, session_id: str) -> PlaybackSession | None:
        row = await self._db.fetch_one(f"SELECT * FROM {_SESSIONS} WHERE id = ?", (session_id,))
        if row is None:
            return None
        return await self._row_to_session(row)

    async def save(self, session: PlaybackSession) -> None:
        async with self._db.transaction() as conn:
            await conn.execute(
                f"""
                INSERT INTO {_SESSIONS} (
                    id, creator_id, text, is_live, created_at, last_creator_activity_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    text = excluded.text,
                    is_live = excluded.is_live,
                    last_creator_activity_at = excluded.last_creator_activity_at
                """,
                (
                    session.id,
                    session.creator_id,
                    session.text,
                    int(session.is_live),
                    UtcDateTime(session.created_at).iso,
                    UtcDateTime(session.last_creator_activity_at).iso,
                ),
            )

            await conn.execute(f"DELETE FROM {_COLLABORATORS} WHERE session_id = ?", (session.id,))
            await conn.executemany(
                f"INSERT INTO {_COLLABORATORS} (session_id, user_id, position) VALUES (?, ?, ?)",
                [
                    (session.id, user_id, pos)
                    for pos, user_id in enumerate(session.collaborator_ids)
                ],
            )

            await self._replace_tracks(conn, session.id, session.track_ids)

        logger.debug(LogTemplates.SESSION_SAVED, session.id)

    async def get_collaborators(self, session_id: str) -> list[str]:
        rows = await self._db.fetch_all(
            f"SELECT user_id FROM {_COLLABORATORS} WHERE session_id = ? ORDER BY position ASC",
            (session_id,),
        )
        return [row["user_id"] for row in rows]

    async def add_collaborator(self, session_id: str, user_id: str) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                f"""
                INSERT OR IGNORE INTO {_COLLABORATORS} (session_id, user_id, position)
                SELECT ?, ?, COALESCE(MAX(position) + 1, 0)
                FROM {_COLLABORATORS} WHERE session_id = ?
                """,
                (session_id, user_id, session_id),
            )
            return cursor.rowcount > 0

    async def get_live_by_creator(self, creator_id: str) -> list[PlaybackSession]:
        rows = await self._db.fetch_all(
            f"""
            SELECT * FROM {_SESSIONS}
            WHERE creator_id = ? AND is_live = 1
            ORDER BY created_at DESC
            """,
            (creator_id,),
        )
        return [await self._row_to_session(row) for row in rows]

    async def touch_creator_activity(self, session_id: str, at: datetime) -> None:
        await self._db.execute(
            f"UPDATE {_SESSIONS} SET last_creator_activity_at = ? WHERE id = ?",
            (UtcDateTime(at).iso, session_id),
        )

    async def archive_queue_and_end(self, session_id: str, track_ids: list[str]) -> bool:
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                f"UPDATE {_SESSIONS} SET is_live = 0 WHERE id = ? AND is_live = 1",
                (session_id,),
            )
            # Only the call that flipped the flag writes the archive.
            if cursor.rowcount == 0:
                return False
            await self._replace_tracks(conn, session_id, track_ids)
            return True

    @staticmethod
    async def _replace_tracks(
        conn: aiosqlite.Connection, session_id: str, track_ids: list[str]
    ) -> None:
        await conn.execute(f"DELETE FROM {_TRACKS} WHERE session_id = ?", (session_id,))
        await conn.executemany(
            f"INSERT INTO {_TRACKS} (session_id, position, track_id) VALUES (?, ?, ?)",
            [(session_id, pos, track_id) for pos, track_id in enumerate(track_ids)],
        )

    async def _row_to_session(self, row: dict[str, Any]) -> PlaybackSession:
        collaborators = await self.get_collaborators(row["id"])
        track_rows = await self._db.fetch_all(
            f"SELECT track_id FROM {_TRACKS} WHERE session_id = ? ORDER BY position ASC",
            (row["id"],),
        )
        return PlaybackSession(
            id=row["id"],
            creator_id=row["creator_id"],
            text=row["text"],
            is_live=bool(row["is_live"]),
            collaborator_ids=collaborators,
            track_ids=[r["track_id"] for r in track_rows],
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            last_creator_activity_at=UtcDateTime.from_iso(row["last_creator_activity_at"]).dt,
        )
