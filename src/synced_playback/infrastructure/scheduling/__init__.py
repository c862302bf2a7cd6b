"""Long-running scheduling loops."""

from synced_playback.infrastructure.scheduling.session_end_scheduler import SessionEndScheduler
from synced_playback.infrastructure.scheduling.skip_scheduler import SkipScheduler
from synced_playback.infrastructure.scheduling.worker import PlaybackWorker

__all__ = [
    "SkipScheduler",
    "SessionEndScheduler",
    "PlaybackWorker",
]
