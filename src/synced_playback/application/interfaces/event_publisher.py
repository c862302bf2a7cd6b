"""Port interface for fanning out domain events to session subscribers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.shared.events import DomainEvent


class EventPublisher(ABC):
    """Interface for delivering events to everyone subscribed to a session."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> int:
        """Publish an event on its session-scoped channel.

        Returns:
            The number of subscribers that received it.
        """
        ...
