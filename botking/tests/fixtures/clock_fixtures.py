"""Deterministic clock and id sources for tests."""

from datetime import UTC, datetime, timedelta

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class StepClock:
    """Clock that advances by a fixed step on every reading."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)):
        self.current = start
        self.step = step
        self.readings = 0

    def now(self) -> datetime:
        value = self.current
        self.current += self.step
        self.readings += 1
        return value


class SequentialIdGenerator:
    """Produces prefix-1, prefix-2, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.issued = 0

    def new_id(self) -> str:
        self.issued += 1
        return f"{self.prefix}-{self.issued}"
