"""
Sessions Domain Repository Interfaces

Contracts for the session document store and the per-session presence and
invite-token records kept in the coordination store.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from synced_playback.domain.sessions.entities import PlaybackSession


class SessionRepository(ABC):
    """Abstract repository for session documents."""

    @abstractmethod
    async def get(self, session_id: str) -> PlaybackSession | None:
        """Retrieve a session by ID.

        Args:
            session_id: The session ID.

        Returns:
            The session if found, None otherwise.
        """
        ...

    @abstractmethod
    async def save(self, session: PlaybackSession) -> None:
        """Insert or replace a session, including its collaborators and tracks.

        Args:
            session: The session to save.
        """
        ...

    @abstractmethod
    async def get_collaborators(self, session_id: str) -> list[str]:
        """Return the user IDs allowed to manage the session's queue."""
        ...

    @abstractmethod
    async def add_collaborator(self, session_id: str, user_id: str) -> bool:
        """Add a collaborator.

        Returns:
            True if the user was added, False if already a collaborator.
        """
        ...

    @abstractmethod
    async def get_live_by_creator(self, creator_id: str) -> list[PlaybackSession]:
        """Return the live sessions created by a user, newest first."""
        ...

    @abstractmethod
    async def touch_creator_activity(self, session_id: str, at: datetime) -> None:
        """Record the last time the creator was seen in the session."""
        ...

    @abstractmethod
    async def archive_queue_and_end(self, session_id: str, track_ids: list[str]) -> bool:
        """Flip the session to not live and store its final track order.

        Args:
            session_id: The session ID.
            track_ids: Track IDs in queue order.

        Returns:
            True if the session was live and is now ended, False if it was
            already ended or does not exist.
        """
        ...


class PresenceRepository(ABC):
    """Per-session last-ping timestamps of listeners."""

    @abstractmethod
    async def ping(self, session_id: str, user_id: str, at: datetime) -> datetime | None:
        """Record a ping and return the previous one, read and written atomically."""
        ...

    @abstractmethod
    async def active_since(self, session_id: str, since: datetime) -> list[str]:
        """User IDs whose last ping is strictly after ``since``, most recent first."""
        ...

    @abstractmethod
    async def clear(self, session_id: str) -> None: ...


class InviteTokenRepository(ABC):
    """The single pending invite token of a session."""

    @abstractmethod
    async def get(self, session_id: str) -> str | None: ...

    @abstractmethod
    async def create(self, session_id: str) -> str:
        """Return the session's token, creating one if there is none."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None: ...
