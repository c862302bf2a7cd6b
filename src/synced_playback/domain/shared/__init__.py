"""
Shared Domain Kernel

Contains types, exceptions and events shared across all bounded contexts.
"""

from synced_playback.domain.shared.exceptions import (
    AuthenticationRequiredError,
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
    PlaybackResolutionError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "InvalidOperationError",
    "AuthenticationRequiredError",
    "PermissionDeniedError",
    "PlaybackResolutionError",
]
