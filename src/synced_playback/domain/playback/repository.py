"""
Playback Domain Repository Interfaces

Abstract base classes defining the contracts for the coordination store
and the track catalogue. Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime

from synced_playback.domain.playback.entities import NowPlayingState, QueueItem, Track
from synced_playback.domain.playback.value_objects import ClaimResult


class QueueRepository(ABC):
    """Ordered per-session list of queue items keyed by uid.

    Nothing here triggers scheduling; that is the actuator's job.
    """

    @abstractmethod
    async def push(self, session_id: str, items: Sequence[QueueItem]) -> int:
        """Append items, assigning a fresh uid to any item lacking one.

        Returns:
            The queue length after the push.
        """
        ...

    @abstractmethod
    async def length(self, session_id: str) -> int: ...

    @abstractmethod
    async def uid_at(self, session_id: str, index: int) -> str | None: ...

    @abstractmethod
    async def index_of(self, session_id: str, uid: str) -> int | None: ...

    @abstractmethod
    async def get_item(self, session_id: str, uid: str) -> QueueItem | None:
        """Look up item data by uid, regardless of its position."""
        ...

    @abstractmethod
    async def item_at(self, session_id: str, index: int) -> QueueItem | None: ...

    @abstractmethod
    async def range(self, session_id: str, start: int = 0, stop: int = -1) -> list[QueueItem]:
        """Return items between two inclusive positions (``-1`` is the last item)."""
        ...

    @abstractmethod
    async def delete(self, session_id: str) -> None: ...


class NowPlayingRepository(ABC):
    """Storage of the per-session now-playing state."""

    @abstractmethod
    async def get(self, session_id: str) -> NowPlayingState | None: ...

    @abstractmethod
    async def commit(self, session_id: str, state: NowPlayingState) -> None:
        """Replace the state and re-arm the track-end entry in one atomic write.

        Readers never observe the new state without its schedule entry, nor a
        state merged from two transitions.
        """
        ...

    @abstractmethod
    async def remove(self, session_id: str) -> None: ...


class ScheduleRepository(ABC):
    """A shared priority queue of per-session deadlines.

    One entry per member; arming an armed member moves its deadline. The
    claim discipline lives here and only here: the member whose removal
    actually deleted something owns the due work.
    """

    @abstractmethod
    async def arm(self, member: str, at: datetime) -> None: ...

    @abstractmethod
    async def arm_if_absent(self, member: str, at: datetime) -> bool:
        """Arm the member unless it already has an entry.

        Returns:
            True if an entry was added.
        """
        ...

    @abstractmethod
    async def due(self, now: datetime) -> list[str]:
        """Members whose deadline is at or before ``now``."""
        ...

    @abstractmethod
    async def claim(self, member: str) -> ClaimResult:
        """Atomically remove the member's entry if present."""
        ...

    @abstractmethod
    async def claim_due(self, member: str, now: datetime) -> ClaimResult:
        """Claim the member only if its deadline is at or before ``now``.

        An entry re-armed for a later instant is left alone, so a caller acting
        on a stale ``due`` listing cannot consume the next deadline.
        """
        ...

    @abstractmethod
    async def deadline(self, member: str) -> datetime | None: ...

    async def cancel(self, member: str) -> ClaimResult:
        """Cancel a pending entry. Same primitive as a claim."""
        return await self.claim(member)


class ReactionRepository(ABC):
    """Per (session, queue uid) mapping of user id to reaction symbol."""

    @abstractmethod
    async def set(self, session_id: str, uid: str, user_id: str, reaction: str) -> None: ...

    @abstractmethod
    async def remove(self, session_id: str, uid: str, user_id: str) -> None: ...

    @abstractmethod
    async def all(self, session_id: str, uid: str) -> dict[str, str]: ...


class TrackRepository(ABC):
    """Track catalogue; the engine only needs durations."""

    @abstractmethod
    async def get(self, track_id: str) -> Track | None: ...

    @abstractmethod
    async def get_duration_ms(self, track_id: str) -> int | None:
        """Return the track's duration, or None if the track is unknown."""
        ...

    @abstractmethod
    async def save(self, track: Track) -> None: ...
