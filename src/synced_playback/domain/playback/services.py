"""
Playback Domain Services

Pure rules for moving the now-playing pointer around a session queue.
"""

from __future__ import annotations

from synced_playback.domain.shared.constants import PlaybackConstants


class PlaybackDomainService:
    """Index arithmetic for queue transitions.

    The queue is a loop: moving forward past the last item starts over, while
    moving backward stops at the first item.
    """

    @classmethod
    def next_forward_index(cls, playing_index: int, queue_length: int) -> int:
        """Compute the index after ``playing_index``.

        Args:
            playing_index: The index currently playing.
            queue_length: Number of items in the queue.

        Returns:
            ``0`` if the current item is the last one (or beyond it), otherwise
            the following index.
        """
        if playing_index >= queue_length - 1:
            return 0
        return playing_index + 1

    @classmethod
    def next_backward_index(cls, playing_index: int) -> int:
        """Compute the index before ``playing_index``, clamped at zero."""
        return max(playing_index - 1, 0)

    @classmethod
    def validate_track_duration(cls, duration_ms: int) -> bool:
        """Check that a track is short enough to be queued.

        Args:
            duration_ms: The track duration in milliseconds.

        Returns:
            True if the duration does not exceed the maximum.
        """
        return duration_ms <= PlaybackConstants.MAX_TRACK_DURATION_MS
