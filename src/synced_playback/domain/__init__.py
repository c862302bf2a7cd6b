# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, exceptions and events
- playback/: Queue, now-playing state and scheduling rules
- sessions/: Session lifecycle, presence and invites
"""

from synced_playback.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
