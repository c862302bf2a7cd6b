"""
Application Queries (CQRS Read Side)

Query objects and handlers for read operations.
Queries do not modify state, only retrieve data.
"""

from synced_playback.application.queries.get_listeners import (
    GetListenersHandler,
    GetListenersQuery,
    ListenersInfo,
)
from synced_playback.application.queries.get_now_playing import (
    GetNowPlayingHandler,
    GetNowPlayingQuery,
    NowPlayingInfo,
)
from synced_playback.application.queries.get_queue import GetQueueHandler, GetQueueQuery, QueueInfo

__all__ = [
    "GetNowPlayingQuery",
    "GetNowPlayingHandler",
    "NowPlayingInfo",
    "GetQueueQuery",
    "GetQueueHandler",
    "QueueInfo",
    "GetListenersQuery",
    "GetListenersHandler",
    "ListenersInfo",
]
