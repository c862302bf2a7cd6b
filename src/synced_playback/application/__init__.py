"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: CQRS write operations (SkipTrackCommand, AddToQueueCommand, etc.)
- queries/: CQRS read operations (GetNowPlayingQuery, GetQueueQuery, etc.)
- services/: Application services, including the playback actuator
- interfaces/: Port interfaces for infrastructure adapters
"""
