"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class AuthenticationRequiredError(DomainError):
    """Raised when an anonymous caller attempts an authenticated action."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "Authentication required", code="UNAUTHENTICATED")


class PermissionDeniedError(DomainError):
    """Raised when the caller is not allowed to act on a session."""

    def __init__(self, action: str, message: str | None = None) -> None:
        msg = message or f"You are not allowed to {action}"
        super().__init__(msg, code="FORBIDDEN")
        self.action = action


class PlaybackResolutionError(DomainError):
    """Raised when a transition cannot resolve its queue item or track.

    Indicates an inconsistent queue or an unknown track. The transition is
    abandoned and the previous now-playing state is left untouched.
    """

    def __init__(self, session_id: str, detail: str) -> None:
        super().__init__(
            f"Cannot resolve playback for session '{session_id}': {detail}",
            code="PLAYBACK_RESOLUTION",
        )
        self.session_id = session_id
        self.detail = detail
