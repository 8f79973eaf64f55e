"""
Injected identifier and time sources.

Factories and persistence adapters never call datetime.now() or uuid4()
directly; they receive a Clock and an IdGenerator so tests can pin both.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Protocol


def ensure_utc(value: datetime) -> datetime:
    """Normalize datetimes to UTC for deterministic comparisons."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> datetime:
        """Return the current timezone-aware UTC time."""
        ...


class IdGenerator(Protocol):
    """Source of new record identities."""

    def new_id(self) -> str:
        """Return an identity that has never been returned before."""
        ...


class SystemClock:
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class UuidIdGenerator:
    """Random UUID4 identities rendered as strings."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
