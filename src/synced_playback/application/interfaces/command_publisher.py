"""Port interface for handing playback commands to the worker."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.playback.commands import WorkerCommand


class CommandPublisher(ABC):
    """Interface for publishing commands on the worker channel."""

    @abstractmethod
    async def publish(self, command: WorkerCommand) -> None: ...
