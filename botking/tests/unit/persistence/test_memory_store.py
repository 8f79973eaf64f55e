"""
Unit tests for the in-memory persistence adapter.
"""

import asyncio

import pytest

from botking.config import AppConfig
from botking.exceptions import NotFoundError, PersistenceError
from botking.persistence import BatchOperation, InMemoryPersistence, SqlAlchemyPersistence, build_persistence
from botking.persistence.tables import ACCOUNTS, EXPANSION_SLOTS, PART_SLOTS, ROBOTS, SHARDS, TEMPLATES
from botking.tests.fixtures.clock_fixtures import BASE_TIME


def robot_record(name="Mining Bot Alpha"):
    return {"user_id": "user123", "name": name, "bot_type": "WORKER", "parts": [], "expansion_chips": []}


class TestCreateAndFind:
    """Test record creation and lookup."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, memory_store):
        record = await memory_store.create(ROBOTS, robot_record())

        assert record["id"] == "id-1"
        assert record["created_at"] == BASE_TIME
        assert record["updated_at"] == BASE_TIME

    @pytest.mark.asyncio
    async def test_caller_timestamps_are_ignored(self, memory_store):
        record = await memory_store.create(ROBOTS, {**robot_record(), "created_at": "yesterday"})

        assert record["created_at"] == BASE_TIME

    @pytest.mark.asyncio
    async def test_find_returns_copy(self, memory_store):
        created = await memory_store.create(ROBOTS, robot_record())

        found = await memory_store.find(ROBOTS, {"id": created["id"]})
        found["parts"].append({"id": "injected"})

        assert (await memory_store.find(ROBOTS, {"id": created["id"]}))["parts"] == []

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, memory_store):
        assert await memory_store.find(ROBOTS, {"id": "nope"}) is None

    @pytest.mark.asyncio
    async def test_find_many_filters_on_equality(self, memory_store):
        await memory_store.create(ROBOTS, robot_record("Digger 1"))
        await memory_store.create(ROBOTS, robot_record("Digger 2"))
        await memory_store.create(ROBOTS, {**robot_record("Other"), "user_id": "user999"})

        mine = await memory_store.find_many(ROBOTS, {"user_id": "user123"})

        assert sorted(record["name"] for record in mine) == ["Digger 1", "Digger 2"]

    @pytest.mark.asyncio
    async def test_composite_keys(self, memory_store):
        """Test that expansion slots are keyed by robot and index."""
        await memory_store.create(EXPANSION_SLOTS, {"robot_id": "bot-1", "slot_ix": 0, "item_inst_id": "inst-1"})
        await memory_store.create(EXPANSION_SLOTS, {"robot_id": "bot-1", "slot_ix": 1, "item_inst_id": "inst-2"})

        with pytest.raises(PersistenceError, match="Duplicate key"):
            await memory_store.create(
                EXPANSION_SLOTS, {"robot_id": "bot-1", "slot_ix": 0, "item_inst_id": "inst-3"}
            )

        assert len(await memory_store.find_many(EXPANSION_SLOTS, {"robot_id": "bot-1"})) == 2

    @pytest.mark.asyncio
    async def test_instance_may_occupy_one_slot_per_table(self, memory_store):
        await memory_store.create(PART_SLOTS, {"robot_id": "bot-1", "slot_type": "TORSO", "item_inst_id": "inst-1"})

        with pytest.raises(PersistenceError, match="Unique constraint"):
            await memory_store.create(
                PART_SLOTS, {"robot_id": "bot-2", "slot_type": "TORSO", "item_inst_id": "inst-1"}
            )

    @pytest.mark.asyncio
    async def test_unique_provider_account(self, memory_store):
        account = {"user_id": "user123", "provider_id": "github", "account_id": "gh-42"}
        await memory_store.create(ACCOUNTS, account)

        with pytest.raises(PersistenceError) as exc_info:
            await memory_store.create(ACCOUNTS, {**account, "user_id": "user999"})

        assert exc_info.value.operation == "create"
        assert exc_info.value.table == ACCOUNTS

    @pytest.mark.asyncio
    async def test_unknown_table(self, memory_store):
        with pytest.raises(PersistenceError, match="Unknown table"):
            await memory_store.find("widgets", {"id": "x"})

    @pytest.mark.asyncio
    async def test_missing_key_field(self, memory_store):
        with pytest.raises(PersistenceError, match="missing"):
            await memory_store.create(SHARDS, {})


class TestUpdateAndDelete:
    """Test partial updates and deletion."""

    @pytest.mark.asyncio
    async def test_update_merges_and_advances_updated_at(self, memory_store):
        created = await memory_store.create(ROBOTS, robot_record())

        updated = await memory_store.update(ROBOTS, {"id": created["id"]}, {"name": "Renamed"})

        assert updated["name"] == "Renamed"
        assert updated["user_id"] == "user123"
        assert updated["created_at"] == created["created_at"]
        assert updated["updated_at"] > created["updated_at"]

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, memory_store):
        with pytest.raises(NotFoundError) as exc_info:
            await memory_store.update(ROBOTS, {"id": "nope"}, {"name": "x"})

        assert exc_info.value.resource_type == ROBOTS

    @pytest.mark.asyncio
    async def test_key_fields_cannot_change(self, memory_store):
        created = await memory_store.create(ROBOTS, robot_record())

        with pytest.raises(PersistenceError, match="cannot change"):
            await memory_store.update(ROBOTS, {"id": created["id"]}, {"id": "other"})

    @pytest.mark.asyncio
    async def test_update_checks_unique_constraints(self, memory_store):
        await memory_store.create(TEMPLATES, {"item_class": "PART", "name": "Iron Arm", "slug": "iron-arm"})
        other = await memory_store.create(TEMPLATES, {"item_class": "PART", "name": "Gold Arm", "slug": "gold-arm"})

        with pytest.raises(PersistenceError, match="Unique constraint"):
            await memory_store.update(TEMPLATES, {"id": other["id"]}, {"slug": "iron-arm"})

    @pytest.mark.asyncio
    async def test_delete(self, memory_store):
        created = await memory_store.create(ROBOTS, robot_record())

        await memory_store.delete_record(ROBOTS, {"id": created["id"]})

        assert await memory_store.find(ROBOTS, {"id": created["id"]}) is None
        with pytest.raises(NotFoundError):
            await memory_store.delete_record(ROBOTS, {"id": created["id"]})


class TestTransaction:
    """Test atomic batches."""

    @pytest.mark.asyncio
    async def test_results_follow_operation_order(self, memory_store):
        robot = await memory_store.create(ROBOTS, robot_record())

        results = await memory_store.transaction(
            [
                BatchOperation.create(SHARDS, {"id": 1}),
                BatchOperation.update(ROBOTS, {"id": robot["id"]}, {"name": "Renamed"}),
                BatchOperation.delete(SHARDS, {"id": 1}),
            ]
        )

        assert results[0]["id"] == 1
        assert results[1]["name"] == "Renamed"
        assert results[2] is None

    @pytest.mark.asyncio
    async def test_failure_rolls_back_everything(self, memory_store):
        robot = await memory_store.create(ROBOTS, robot_record())

        with pytest.raises(NotFoundError):
            await memory_store.transaction(
                [
                    BatchOperation.create(SHARDS, {"id": 1}),
                    BatchOperation.update(ROBOTS, {"id": robot["id"]}, {"name": "Renamed"}),
                    BatchOperation.delete(ROBOTS, {"id": "missing"}),
                ]
            )

        assert await memory_store.find(SHARDS, {"id": 1}) is None
        assert (await memory_store.find(ROBOTS, {"id": robot["id"]}))["name"] == "Mining Bot Alpha"

    @pytest.mark.asyncio
    async def test_concurrent_creates_get_distinct_ids(self, memory_store):
        records = await asyncio.gather(*(memory_store.create(ROBOTS, robot_record(f"Bot {n}")) for n in range(10)))

        assert len({record["id"] for record in records}) == 10


class TestBuildPersistence:
    def test_memory_backend(self, app_config):
        assert isinstance(build_persistence(app_config), InMemoryPersistence)

    @pytest.mark.asyncio
    async def test_sqlalchemy_backend(self, monkeypatch):
        monkeypatch.setenv("PERSISTENCE_BACKEND", "sqlalchemy")
        store = build_persistence(AppConfig())

        assert isinstance(store, SqlAlchemyPersistence)
        assert store.engine.dialect.name == "sqlite"
        await store.dispose()
