"""
Unit tests for BotFactory construction, validation and counters.
"""

from dataclasses import replace

import pytest

from botking.error_types import ErrorType
from botking.exceptions import ConstructionError
from botking.factories import ArtifactContext, BotFactory
from botking.game.artifacts import (
    BotType,
    ExpansionChipEffect,
    ExpansionChipRef,
    PartSlotType,
    SkeletonRef,
    SkeletonType,
    SoulChipRef,
)
from botking.tests.fixtures import SequentialIdGenerator, full_part_set, mining_worker_config


class TestBotConstruction:
    """Test bot creation paths."""

    def test_mining_worker(self, bot_factory):
        """Test the Mining Bot Alpha scenario."""
        bot = bot_factory.create_worker_artifact("Mining Bot Alpha", "user123", "MINING")

        assert bot.bot_type is BotType.WORKER
        assert bot.soul_chip is None
        assert bot.name == "Mining Bot Alpha"
        assert bot.owner_id == "user123"
        assert bot.specialization == "MINING"
        assert bot.skeleton.skeleton_type is SkeletonType.HEAVY
        assert bot.total_attack == 4 * 4
        assert bot.total_defense == 4 * 8
        assert bot.id is None

    def test_worker_soul_chip_is_discarded(self, bot_factory):
        chip = SoulChipRef(id="chip-1", name="Stray Core")

        bot = bot_factory.create_bot_artifact("Digger", "user123", BotType.WORKER, soul_chip=chip)

        assert bot.soul_chip is None

    def test_playable_bot_is_assembled(self, bot_factory):
        bot = bot_factory.create_playable_artifact("Vanguard", "user123", "ASSAULT")

        assert bot.is_assembled
        assert bot.soul_chip is not None
        assert bot.skeleton.skeleton_type is SkeletonType.BALANCED
        assert bot_factory.validate_artifact(bot).is_valid

    def test_king_bot(self, bot_factory):
        bot = bot_factory.create_king_artifact("Crown", "user123")

        assert bot.bot_type is BotType.KING
        assert bot.soul_chip.rarity.value == "LEGENDARY"
        assert bot.total_attack == 4 * 15
        assert bot_factory.validate_artifact(bot).is_valid

    def test_assemble_from_components(self, bot_factory):
        bot = bot_factory.assemble_from_components(
            "Custom",
            "user123",
            "PLAYABLE",
            skeleton=SkeletonRef(id="skel-9", skeleton_type=SkeletonType.LIGHT),
            parts=full_part_set(),
            soul_chip={"id": "chip-9", "name": "Custom Core", "intelligence": 20},
        )

        assert bot.is_assembled
        assert bot.soul_chip.intelligence == 20
        assert bot.skeleton.id == "skel-9"

    def test_component_ids_come_from_context(self):
        factory = BotFactory(ArtifactContext(ids=SequentialIdGenerator("c")))

        bot = factory.create_worker_artifact("Digger", "user123")

        assert bot.skeleton.id == "c-1"
        assert [part.id for part in bot.parts] == ["c-2", "c-3", "c-4", "c-5"]

    def test_unknown_bot_type_raises(self, bot_factory):
        with pytest.raises(ConstructionError, match="Invalid bot_type"):
            bot_factory.create_bot_artifact("Bad", "user123", "DRONE")

    def test_non_string_name_raises(self, bot_factory):
        with pytest.raises(ConstructionError):
            bot_factory.create_bot_artifact(42, "user123", BotType.WORKER)

    def test_unknown_config_key_raises(self, bot_factory):
        with pytest.raises(ConstructionError, match="Invalid bot configuration"):
            bot_factory.create_artifact(name="x", user_id="u", bot_type="WORKER", colour="red")

    def test_malformed_component_raises(self, bot_factory):
        with pytest.raises(ConstructionError, match="Malformed parts component"):
            bot_factory.create_bot_artifact("Bad", "user123", BotType.PLAYABLE, parts=[{"name": "no slot"}])

    @pytest.mark.parametrize(
        "component",
        [
            {"parts": [{"id": "p-1", "slot_type": "TORSO", "name": "Torso", "attack": "10"}]},
            {"expansion_chips": [{"id": "e-1", "effect": "AI_UPGRADE", "slot_ix": "0"}]},
            {"skeleton": {"id": 7, "skeleton_type": "HEAVY"}},
        ],
    )
    def test_mistyped_component_field_raises(self, bot_factory, component):
        with pytest.raises(ConstructionError, match="must be"):
            bot_factory.create_bot_artifact("Bad", "user123", BotType.WORKER, **component)


class TestBotValidation:
    """Test domain rule reporting."""

    def test_blank_name_and_owner(self, bot_factory):
        bot = replace(bot_factory.create_worker_artifact("Digger", "user123"), name="  ", owner_id="")

        report = bot_factory.validate_artifact(bot)

        assert "Bot name is required" in report.messages
        assert "Bot owner is required" in report.messages

    def test_worker_with_soul_chip_is_invalid(self, bot_factory):
        bot = replace(
            bot_factory.create_worker_artifact("Digger", "user123"),
            soul_chip=SoulChipRef(id="chip-1", name="Core"),
        )

        assert bot_factory.validate_artifact(bot).messages == ["Worker bots cannot have soul chips"]

    def test_playable_without_soul_chip_is_invalid(self, bot_factory):
        bot = replace(bot_factory.create_playable_artifact("Vanguard", "user123"), soul_chip=None)

        assert "Non-worker bots must have soul chips" in bot_factory.validate_artifact(bot).messages

    def test_incomplete_playable_is_invalid(self, bot_factory):
        bot = bot_factory.create_playable_artifact("Vanguard", "user123")
        bot = bot.with_parts(bot.parts[:2])

        assert "Bot is not fully assembled" in bot_factory.validate_artifact(bot).messages

    def test_invalid_specialization(self, bot_factory):
        bot = bot_factory.create_worker_artifact("Digger", "user123", "ASSAULT")

        assert bot_factory.validate_artifact(bot).messages == ["Invalid utility specialization: ASSAULT"]

    def test_duplicate_expansion_slot(self, bot_factory):
        chips = (
            ExpansionChipRef(id="e-1", effect=ExpansionChipEffect.AI_UPGRADE, slot_ix=0),
            ExpansionChipRef(id="e-2", effect=ExpansionChipEffect.DEFENSE_BUFF, slot_ix=0),
        )
        bot = replace(bot_factory.create_worker_artifact("Digger", "user123"), expansion_chips=chips)

        assert bot_factory.validate_artifact(bot).messages == ["Expansion slot 0 is occupied more than once"]

    def test_all_errors_collected(self, bot_factory):
        bot = replace(
            bot_factory.create_playable_artifact("Vanguard", "user123"),
            name="",
            soul_chip=None,
            skeleton=None,
        )

        report = bot_factory.validate_artifact(bot)

        assert len(report.errors) == 3
        assert not report.is_valid

    def test_part_in_returns_mounted_part(self, bot_factory):
        bot = bot_factory.create_playable_artifact("Vanguard", "user123")

        assert bot.part_in(PartSlotType.LEGS).name == "Legs"

    def test_negative_component_stats_are_invalid(self, bot_factory):
        bot = bot_factory.assemble_from_components(
            "Vanguard",
            "user123",
            "PLAYABLE",
            skeleton=SkeletonRef(id="skel-1"),
            parts=full_part_set(attack=-3),
            expansion_chips=[
                ExpansionChipRef(id="e-1", effect=ExpansionChipEffect.SPEED_BUFF, slot_ix=0, magnitude=-1)
            ],
        )

        messages = bot_factory.validate_artifact(bot).messages

        assert "Part Torso Module stats must be non-negative" in messages
        assert "Expansion magnitude must be non-negative" in messages


class TestBatchAndPipeline:
    """Test batch creation, the DTO pipeline and counters."""

    def test_batch_with_one_malformed_config(self, bot_factory):
        configs = [
            mining_worker_config("Digger 1"),
            mining_worker_config("Digger 2"),
            {"name": "Broken Bot", "user_id": "user123", "bot_type": "HOVERCRAFT"},
            mining_worker_config("Digger 3"),
        ]

        result = bot_factory.batch_create_artifacts(configs)

        assert len(result.artifacts) == 3
        assert len(result.failures) == 1
        assert result.failures[0].name == "Broken Bot"
        assert "HOVERCRAFT" in result.failures[0].error

    def test_batch_survives_mistyped_component(self, bot_factory):
        broken = mining_worker_config("Broken Bot")
        broken["parts"] = [{"id": "p-1", "slot_type": "TORSO", "name": "Torso", "attack": "10"}]

        result = bot_factory.batch_create_artifacts([mining_worker_config("Digger 1"), broken, mining_worker_config()])

        assert len(result.artifacts) == 2
        assert result.failures[0].name == "Broken Bot"
        assert "attack must be an integer" in result.failures[0].error

    def test_pipeline_withholds_record_with_negative_stats(self, bot_factory):
        bot = bot_factory.create_worker_artifact("Digger", "user123")
        bot = bot.with_parts([replace(bot.parts[0], defense=-5)])

        assert bot_factory.artifact_to_dto_pipeline(bot).dto is None

    def test_batch_records_rule_failures(self, bot_factory):
        result = bot_factory.batch_create_artifacts([mining_worker_config(name="")])

        assert result.failures[0].error == "Bot name is required"

    def test_batch_rejects_non_mapping(self, bot_factory):
        result = bot_factory.batch_create_artifacts(["not a config"])

        assert result.failures[0].error == "Configuration must be a mapping"
        assert result.failures[0].name is None

    def test_pipeline_on_invalid_artifact(self, bot_factory):
        bot = replace(bot_factory.create_worker_artifact("Digger", "user123"), name="")

        result = bot_factory.artifact_to_dto_pipeline(bot)

        assert result.dto is None
        assert result.validation.errors

    def test_pipeline_on_valid_artifact(self, bot_factory):
        bot = bot_factory.create_worker_artifact("Digger", "user123", "MINING")

        result = bot_factory.artifact_to_dto_pipeline(bot)

        assert result.dto["user_id"] == "user123"
        assert result.dto["soul_chip"] is None
        assert "id" not in result.dto

    def test_batch_artifacts_to_dto(self, bot_factory):
        good = bot_factory.create_worker_artifact("Digger", "user123")
        bad = replace(good, owner_id="")

        results = bot_factory.batch_artifacts_to_dto([good, bad])

        assert results[0].dto is not None
        assert results[1].dto is None

    def test_create_validated_artifact_reports_creation_error(self, bot_factory):
        artifact, report = bot_factory.create_validated_artifact(name="x", user_id="u", bot_type="NOPE")

        assert artifact is None
        assert report.errors[0].code == ErrorType.CREATION_ERROR.value

    def test_stats_are_scoped_to_context(self, bot_factory):
        bot_factory.create_worker_artifact("Digger", "user123")
        with pytest.raises(ConstructionError):
            bot_factory.create_bot_artifact("Bad", "user123", "DRONE")
        bot_factory.validate_artifact(bot_factory.create_worker_artifact("", "user123"))

        stats = bot_factory.get_factory_stats()

        assert stats.created == 2
        assert stats.construction_failures == 1
        assert stats.validated == 1
        assert stats.validation_failures == 1
        assert BotFactory(ArtifactContext()).get_factory_stats().created == 0
