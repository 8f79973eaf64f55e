"""Per-identity sync state for artifacts handled by the orchestrator."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.clock import Clock, SystemClock

logger = get_logger(__name__)

DEFAULT_CAPACITY = 10_000


class SyncState(StrEnum):
    TRANSIENT = "transient"
    PERSISTED = "persisted"
    STALE = "stale"


@dataclass(frozen=True, slots=True)
class SyncEntry:
    kind: str
    identity: str
    state: SyncState
    synced_at: datetime


class SyncTracker:
    """
    Tracks whether each persisted identity matches the store.

    An identity is TRANSIENT until it is saved or loaded. It becomes STALE
    when the caller reports an outside change, and PERSISTED again once it
    is reloaded or updated.

    At most `capacity` identities are kept; the least recently synced one is
    dropped first and reads as TRANSIENT afterwards.
    """

    def __init__(self, clock: Clock | None = None, capacity: int = DEFAULT_CAPACITY):
        self._clock = clock or SystemClock()
        self._capacity = capacity
        self._entries: dict[tuple[str, str], SyncEntry] = {}

    def state_of(self, kind: str, identity: str | None) -> SyncState:
        if identity is None:
            return SyncState.TRANSIENT
        entry = self._entries.get((kind, identity))
        return entry.state if entry else SyncState.TRANSIENT

    def entry(self, kind: str, identity: str) -> SyncEntry | None:
        return self._entries.get((kind, identity))

    def mark_persisted(self, kind: str, identity: str) -> None:
        previous = self.state_of(kind, identity)
        # Re-inserting keeps dict order equal to sync recency
        self._entries.pop((kind, identity), None)
        self._entries[(kind, identity)] = SyncEntry(kind, identity, SyncState.PERSISTED, self._clock.now())
        self._evict()
        if previous is not SyncState.PERSISTED:
            logger.debug("Sync state changed", kind=kind, identity=identity, previous=previous, state="persisted")

    def mark_stale(self, kind: str, identity: str) -> bool:
        """Flag a persisted identity as out of date; returns False for unknown identities."""
        entry = self._entries.get((kind, identity))
        if entry is None:
            logger.debug("Ignoring stale mark for untracked identity", kind=kind, identity=identity)
            return False
        if entry.state is SyncState.PERSISTED:
            self._entries[(kind, identity)] = SyncEntry(kind, identity, SyncState.STALE, entry.synced_at)
            logger.debug("Sync state changed", kind=kind, identity=identity, previous="persisted", state="stale")
        return True

    def forget(self, kind: str, identity: str) -> None:
        self._entries.pop((kind, identity), None)

    def __len__(self) -> int:
        return len(self._entries)

    def _evict(self) -> None:
        while len(self._entries) > self._capacity:
            (kind, identity), _ = next(iter(self._entries.items()))
            del self._entries[(kind, identity)]
            logger.debug("Evicted sync entry", kind=kind, identity=identity)

    def stale_identities(self, kind: str) -> list[str]:
        return [
            identity
            for (entry_kind, identity), entry in self._entries.items()
            if entry_kind == kind and entry.state is SyncState.STALE
        ]

    def counts(self) -> dict[str, int]:
        tally = Counter(entry.state.value for entry in self._entries.values())
        return {state.value: tally.get(state.value, 0) for state in (SyncState.PERSISTED, SyncState.STALE)}
