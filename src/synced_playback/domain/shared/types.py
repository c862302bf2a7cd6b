"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across bounded contexts is defined here once,
so models can simply annotate their fields::

    from synced_playback.domain.shared.types import NonEmptyStr, QueueIndex

    class MyModel(BaseModel):
        session_id: NonEmptyStr
        index: QueueIndex
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AfterValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

EpochMillis = Annotated[int, Field(ge=0)]
"""Milliseconds since the Unix epoch."""

DurationMs = Annotated[int, Field(ge=0, le=86_400_000)]
"""Track duration in milliseconds: 0 … 24 hours."""

QueueIndex = Annotated[int, Field(ge=0)]
"""Zero-based queue position."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

SessionIdStr = Annotated[str, Field(min_length=1, max_length=64)]
"""Session identifier as stored in the document store."""

UserIdStr = Annotated[str, Field(min_length=1, max_length=64)]
"""User identifier."""

TrackIdStr = Annotated[str, Field(min_length=1, max_length=128)]
"""Platform-qualified track identifier (e.g. ``spotify:4uLU6hMC``)."""

QueueUidStr = Annotated[str, Field(pattern=r"^[A-Za-z0-9_-]{4,32}$")]
"""Random per-queue-item token."""

SessionTextStr = Annotated[str, Field(max_length=60)]
"""Session caption."""


# ── Settings-specific constraints ──────────────────────────────────

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""Database busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""Database connection timeout in seconds: 1 … 60."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, AfterValidator(_ensure_utc)]
"""Timezone-aware datetime (or ISO string with an offset), normalised to UTC."""
