"""Centralized constants for store keys, channels, database schema, and other shared values.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class RedisKeys:
    """Coordination store key layout.

    Every key except the two schedules is scoped to a single session, so
    writes for different sessions never touch the same key.
    """

    SKIP_SCHEDULE = "npSkipScheduler"
    SESSION_END_SCHEDULE = "sessionEndScheduler"

    @staticmethod
    def queue_list(session_id: str) -> str:
        return f"queue:{session_id}:list"

    @staticmethod
    def queue_data(session_id: str) -> str:
        return f"queue:{session_id}:data"

    @staticmethod
    def now_playing_state(session_id: str) -> str:
        return f"nowPlaying:{session_id}:state"

    @staticmethod
    def now_playing_reactions(session_id: str, uid: str) -> str:
        return f"nowPlaying:{session_id}:reactions:{uid}"

    @staticmethod
    def listener_presences(session_id: str) -> str:
        return f"session:{session_id}:listenerPresences"

    @staticmethod
    def invite_token(session_id: str) -> str:
        return f"session:{session_id}:inviteToken"


class PubSubChannels:
    """Publish/subscribe channel names.

    Event channels are suffixed with the session id when published so that
    subscribers can listen to a single session.
    """

    WORKER = "PLAYBACK_WORKER"
    NOW_PLAYING_UPDATED = "NOW_PLAYING_UPDATED"
    NOW_PLAYING_REACTIONS_UPDATED = "NOW_PLAYING_REACTIONS_UPDATED"
    SESSION_UPDATED = "SESSION_UPDATED"
    SESSION_LISTENERS_UPDATED = "SESSION_LISTENERS_UPDATED"
    QUEUE_UPDATED = "QUEUE_UPDATED"
    MESSAGE_ADDED = "MESSAGE_ADDED"

    @staticmethod
    def for_session(channel: str, session_id: str) -> str:
        return f"{channel}:{session_id}"


class PlaybackConstants:
    """Timing and sizing constants for playback coordination."""

    QUEUE_UID_BYTES = 6
    INVITE_TOKEN_BYTES = 16
    SESSION_TEXT_MAX_LENGTH = 60
    MAX_TRACK_DURATION_MS = 7 * 60 * 1000


class DatabaseTables:
    """Database table names.

    Centralizing table names prevents typos in SQL queries and makes
    schema changes easier to track.
    """

    SESSIONS = "sessions"
    SESSION_COLLABORATORS = "session_collaborators"
    SESSION_TRACKS = "session_tracks"
    TRACKS = "tracks"


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These pragmas are applied to each connection to ensure consistent behavior.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
