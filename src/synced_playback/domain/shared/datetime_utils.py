"""Date/time helpers.

Goal: centralize all date/time serialization + parsing.

- Always store and operate on timezone-aware UTC datetimes.
- Scheduling scores in the coordination store are epoch milliseconds.
- Documents in SQLite are ISO 8601 strings.

This module is intentionally dependency-free and safe to use in any layer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from ...domain.shared.messages import ErrorMessages

Clock = Callable[[], datetime]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """A tiny value-object wrapper around a timezone-aware UTC `datetime`."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        # Normalize to UTC
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    # ---- Constructors ----

    @classmethod
    def from_iso(cls, value: str) -> UtcDateTime:
        # Accepts: '...+00:00' or '...Z'
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return cls(datetime.fromisoformat(value))

    @classmethod
    def from_unix_millis(cls, millis: int | float) -> UtcDateTime:
        return cls(_EPOCH + timedelta(milliseconds=int(millis)))

    # ---- Computed fields / formats ----

    @property
    def iso(self) -> str:
        """RFC3339/ISO8601 with explicit offset (+00:00)."""
        return self.dt.isoformat()

    @property
    def iso_z(self) -> str:
        """RFC3339 with trailing 'Z'."""
        return self.dt.isoformat().replace("+00:00", "Z")

    @property
    def unix_millis(self) -> int:
        # Exact integer ms; float timestamps can round down by one.
        return (self.dt - _EPOCH) // _ONE_MS


def utcnow() -> datetime:
    """Preferred replacement for `datetime.now(UTC)`.

    Returns a timezone-aware datetime in UTC.
    """
    return datetime.now(UTC)


def to_epoch_ms(value: datetime) -> int:
    return UtcDateTime(value).unix_millis


def from_epoch_ms(value: int | float | str) -> datetime:
    return UtcDateTime.from_unix_millis(float(value)).dt
