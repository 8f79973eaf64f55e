"""
Unit tests for SyncTracker.
"""

from botking.sync import SyncState, SyncTracker
from botking.tests.fixtures.clock_fixtures import BASE_TIME


class TestSyncTracker:
    def test_unknown_identity_is_transient(self, clock):
        tracker = SyncTracker(clock)

        assert tracker.state_of("bot", "bot-1") is SyncState.TRANSIENT
        assert tracker.state_of("bot", None) is SyncState.TRANSIENT
        assert tracker.entry("bot", "bot-1") is None

    def test_persisted_then_stale(self, clock):
        tracker = SyncTracker(clock)
        tracker.mark_persisted("bot", "bot-1")

        assert tracker.mark_stale("bot", "bot-1")
        entry = tracker.entry("bot", "bot-1")

        assert entry.state is SyncState.STALE
        assert entry.synced_at == BASE_TIME
        assert tracker.stale_identities("bot") == ["bot-1"]
        assert tracker.stale_identities("item") == []

    def test_kinds_are_separate(self, clock):
        tracker = SyncTracker(clock)
        tracker.mark_persisted("bot", "shared-id")

        assert tracker.state_of("item", "shared-id") is SyncState.TRANSIENT
        assert not tracker.mark_stale("item", "shared-id")

    def test_forget_and_counts(self, clock):
        tracker = SyncTracker(clock)
        tracker.mark_persisted("bot", "bot-1")
        tracker.mark_persisted("bot", "bot-2")
        tracker.mark_stale("bot", "bot-2")

        assert tracker.counts() == {"persisted": 1, "stale": 1}

        tracker.forget("bot", "bot-2")

        assert tracker.counts() == {"persisted": 1, "stale": 0}
        assert tracker.state_of("bot", "bot-2") is SyncState.TRANSIENT

    def test_capacity_drops_least_recently_synced(self, clock):
        tracker = SyncTracker(clock, capacity=2)
        tracker.mark_persisted("bot", "bot-1")
        tracker.mark_persisted("bot", "bot-2")
        tracker.mark_persisted("bot", "bot-1")

        tracker.mark_persisted("bot", "bot-3")

        assert len(tracker) == 2
        assert tracker.state_of("bot", "bot-2") is SyncState.TRANSIENT
        assert tracker.state_of("bot", "bot-1") is SyncState.PERSISTED
        assert tracker.state_of("bot", "bot-3") is SyncState.PERSISTED
