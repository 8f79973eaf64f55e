"""
Unit tests for AutoSyncOrchestrator save, load, update and batch paths.
"""

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from botking.error_types import ErrorMessages, ErrorType
from botking.exceptions import PersistenceError
from botking.persistence.tables import ROBOTS
from botking.sync import ArtifactKind, AutoSyncOrchestrator, SyncState
from botking.tests.fixtures.clock_fixtures import BASE_TIME
from botking.validators import Err, Ok


@pytest.fixture
def mining_bot(bot_factory):
    return bot_factory.create_worker_artifact("Mining Bot Alpha", "user123", "MINING")


class TestSaveAndLoad:
    """Test the save and load pipeline for bots, items and accounts."""

    @pytest.mark.asyncio
    async def test_save_mining_bot(self, orchestrator, memory_store, mining_bot):
        """Test that a saved worker bot lands in the robots table with a generated id."""
        result = await orchestrator.save_bot_artifact(mining_bot)

        assert isinstance(result, Ok)
        record = result.value
        assert record["id"] == "id-1"
        assert record["user_id"] == "user123"
        assert record["soul_chip"] is None
        assert record["created_at"] == BASE_TIME
        assert await memory_store.find(ROBOTS, {"id": "id-1"}) == record

    @pytest.mark.asyncio
    async def test_load_returns_equal_artifact(self, orchestrator, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()

        loaded = await orchestrator.load_bot_artifact(record["id"])

        assert loaded == replace(
            mining_bot, id=record["id"], created_at=record["created_at"], updated_at=record["updated_at"]
        )
        assert loaded.total_attack == mining_bot.total_attack

    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, orchestrator):
        assert await orchestrator.load_bot_artifact("nope") is None
        assert await orchestrator.load_item_artifact("nope") is None
        assert await orchestrator.load_account_artifact("nope") is None

    @pytest.mark.asyncio
    async def test_save_persisted_artifact_conflicts(self, orchestrator, mining_bot):
        result = await orchestrator.save_bot_artifact(replace(mining_bot, id="bot-9"))

        assert isinstance(result, Err)
        assert result.error_type is ErrorType.RESOURCE_CONFLICT
        assert result.messages == [ErrorMessages.ALREADY_PERSISTED]

    @pytest.mark.asyncio
    async def test_save_invalid_bot_is_rejected(self, orchestrator, memory_store, mining_bot):
        result = await orchestrator.save_bot_artifact(replace(mining_bot, name=""))

        assert result.error_type is ErrorType.BUSINESS_RULE_VIOLATION
        assert result.messages == ["Bot name is required"]
        assert await memory_store.find_many(ROBOTS, {}) == []

    @pytest.mark.asyncio
    async def test_save_item_and_account(self, orchestrator, item_factory, account_factory):
        gem = item_factory.create_gem_artifact("Ruby", "RUBY", 150, user_id="user123")
        account = account_factory.create_oauth_account("user123", "github", "gh-42", access_token="at-1")

        item_record = (await orchestrator.save_item_artifact(gem)).unwrap()
        account_record = (await orchestrator.save_account_artifact(account)).unwrap()

        assert (await orchestrator.load_item_artifact(item_record["id"])).gem_type == gem.gem_type
        loaded_account = await orchestrator.load_account_artifact(account_record["id"])
        assert loaded_account.access_token == "at-1"

    @pytest.mark.asyncio
    async def test_duplicate_account_propagates_persistence_error(self, orchestrator, account_factory):
        account = account_factory.create_oauth_account("user123", "github", "gh-42")
        await orchestrator.save_account_artifact(account)

        with pytest.raises(PersistenceError):
            await orchestrator.save_account_artifact(replace(account, user_id="user999"))


class TestUpdate:
    """Test last-writer-wins updates."""

    @pytest.mark.asyncio
    async def test_update_renames_bot(self, orchestrator, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        loaded = await orchestrator.load_bot_artifact(record["id"])

        result = await orchestrator.update_bot_artifact(loaded.renamed("Mining Bot Beta"))

        assert result.unwrap()["name"] == "Mining Bot Beta"
        assert result.unwrap()["updated_at"] > record["updated_at"]
        assert (await orchestrator.load_bot_artifact(record["id"])).name == "Mining Bot Beta"

    @pytest.mark.asyncio
    async def test_update_without_identity(self, orchestrator, mining_bot):
        result = await orchestrator.update_bot_artifact(mining_bot)

        assert result.error_type is ErrorType.VALIDATION_ERROR
        assert result.messages == [ErrorMessages.IDENTITY_REQUIRED]

    @pytest.mark.asyncio
    async def test_update_missing_record(self, orchestrator, mining_bot):
        result = await orchestrator.update_bot_artifact(replace(mining_bot, id="ghost"))

        assert result.error_type is ErrorType.RESOURCE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_update_invalid_artifact(self, orchestrator, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()

        result = await orchestrator.update_bot_artifact(replace(mining_bot, id=record["id"], owner_id=" "))

        assert result.error_type is ErrorType.BUSINESS_RULE_VIOLATION

    @pytest.mark.asyncio
    async def test_last_writer_wins(self, orchestrator, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        first = await orchestrator.load_bot_artifact(record["id"])
        second = await orchestrator.load_bot_artifact(record["id"])

        await orchestrator.update_bot_artifact(first.renamed("Writer One"))
        await orchestrator.update_bot_artifact(second.renamed("Writer Two"))

        assert (await orchestrator.load_bot_artifact(record["id"])).name == "Writer Two"

    @pytest.mark.asyncio
    async def test_update_item(self, orchestrator, item_factory):
        gem = item_factory.create_gem_artifact("Ruby", "RUBY", 150)
        record = (await orchestrator.save_item_artifact(gem)).unwrap()

        result = await orchestrator.update_item_artifact(replace(gem, id=record["id"], value=175))

        assert result.unwrap()["value"] == 175


class TestSyncState:
    """Test transient, persisted and stale tracking."""

    @pytest.mark.asyncio
    async def test_lifecycle(self, orchestrator, mining_bot):
        assert orchestrator.sync_state(ArtifactKind.BOT, mining_bot.id) is SyncState.TRANSIENT

        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        assert orchestrator.sync_state("bot", record["id"]) is SyncState.PERSISTED

        assert orchestrator.mark_stale("bot", record["id"])
        assert orchestrator.sync_state("bot", record["id"]) is SyncState.STALE

        refreshed = await orchestrator.refresh_bot_artifact(replace(mining_bot, id=record["id"]))
        assert refreshed.id == record["id"]
        assert orchestrator.sync_state("bot", record["id"]) is SyncState.PERSISTED

    def test_mark_stale_untracked(self, orchestrator):
        assert not orchestrator.mark_stale(ArtifactKind.ITEM, "never-saved")

    @pytest.mark.asyncio
    async def test_refresh_transient_bot(self, orchestrator, mining_bot):
        assert await orchestrator.refresh_bot_artifact(mining_bot) is None

    @pytest.mark.asyncio
    async def test_sync_stats(self, orchestrator, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        orchestrator.mark_stale("bot", record["id"])

        stats = orchestrator.get_sync_stats()

        assert stats["states"] == {"persisted": 0, "stale": 1}
        assert stats["factories"]["bot"].converted == 1

    @pytest.mark.asyncio
    async def test_missing_records_are_forgotten(self, orchestrator, memory_store, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        await memory_store.delete_record(ROBOTS, {"id": record["id"]})

        assert await orchestrator.load_bot_artifact(record["id"]) is None
        assert orchestrator.sync_state("bot", record["id"]) is SyncState.TRANSIENT
        assert len(orchestrator.tracker) == 0

    @pytest.mark.asyncio
    async def test_update_of_deleted_record_forgets_identity(self, orchestrator, memory_store, mining_bot):
        record = (await orchestrator.save_bot_artifact(mining_bot)).unwrap()
        await memory_store.delete_record(ROBOTS, {"id": record["id"]})

        result = await orchestrator.update_bot_artifact(replace(mining_bot, id=record["id"]))

        assert result.error_type is ErrorType.RESOURCE_NOT_FOUND
        assert len(orchestrator.tracker) == 0

    @pytest.mark.asyncio
    async def test_tracker_capacity_comes_from_config(self, memory_store, context, app_config, bot_factory):
        app_config.sync.tracker_capacity = 1
        orchestrator = AutoSyncOrchestrator(memory_store, context=context, config=app_config)

        first = (await orchestrator.save_bot_artifact(bot_factory.create_worker_artifact("One", "user123"))).unwrap()
        second = (await orchestrator.save_bot_artifact(bot_factory.create_worker_artifact("Two", "user123"))).unwrap()

        assert len(orchestrator.tracker) == 1
        assert orchestrator.sync_state("bot", first["id"]) is SyncState.TRANSIENT
        assert orchestrator.sync_state("bot", second["id"]) is SyncState.PERSISTED


class TestBatchSave:
    """Test concurrent batch saves with partial failure."""

    @pytest.mark.asyncio
    async def test_partial_failures_are_collected(self, orchestrator, bot_factory, item_factory, account_factory):
        bots = [
            bot_factory.create_worker_artifact("Digger 1", "user123", "MINING"),
            replace(bot_factory.create_worker_artifact("Broken", "user123"), owner_id=""),
            bot_factory.create_worker_artifact("Digger 2", "user123", "REPAIR"),
        ]
        items = [item_factory.create_gem_artifact("Ruby", "RUBY", 150)]
        accounts = [account_factory.create_account_artifact("user123", "credential", "player@example.com")]

        result = await orchestrator.save_artifact_batch(bots=bots, items=items, accounts=accounts)

        assert result.saved_count == 3
        assert [record["name"] for record in result.saved[ArtifactKind.BOT]] == ["Digger 1", "Digger 2"]
        assert not result.all_saved
        failures = {(failure.kind, failure.index): failure for failure in result.failures}
        assert failures[(ArtifactKind.BOT, 1)].name == "Broken"
        assert failures[(ArtifactKind.BOT, 1)].reason == "Bot owner is required"
        assert failures[(ArtifactKind.ACCOUNT, 0)].name == "player@example.com"

    @pytest.mark.asyncio
    async def test_store_errors_become_failures(self, orchestrator, account_factory):
        """Test that a unique violation inside the batch fails only that artifact."""
        account = account_factory.create_oauth_account("user123", "github", "gh-42")

        result = await orchestrator.save_artifact_batch(accounts=[account, replace(account, user_id="user999")])

        assert result.saved_count == 1
        assert len(result.failures) == 1
        assert "Unique constraint" in result.failures[0].reason

    @pytest.mark.asyncio
    async def test_unexpected_errors_are_raised(self, memory_store, context, app_config, bot_factory):
        memory_store.create = AsyncMock(side_effect=RuntimeError("disk on fire"))
        orchestrator = AutoSyncOrchestrator(memory_store, context=context, config=app_config)

        with pytest.raises(RuntimeError, match="disk on fire"):
            await orchestrator.save_artifact_batch(bots=[bot_factory.create_worker_artifact("Digger", "user123")])

    @pytest.mark.asyncio
    async def test_concurrency_limit_is_respected(self, memory_store, context, app_config, bot_factory):
        app_config.sync.batch_concurrency = 2
        orchestrator = AutoSyncOrchestrator(memory_store, context=context, config=app_config)
        active = 0
        peak = 0
        original_create = memory_store.create

        async def tracking_create(table, data):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            try:
                return await original_create(table, data)
            finally:
                active -= 1

        memory_store.create = tracking_create
        bots = [bot_factory.create_worker_artifact(f"Digger {n}", "user123") for n in range(6)]

        result = await orchestrator.save_artifact_batch(bots=bots)

        assert result.saved_count == 6
        assert peak <= 2
