"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from synced_playback.application.interfaces.command_publisher import CommandPublisher
from synced_playback.application.interfaces.event_publisher import EventPublisher

__all__ = [
    "EventPublisher",
    "CommandPublisher",
]
