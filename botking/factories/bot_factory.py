"""Bot factory: builds bots with default components and checks assembly rules."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping
from typing import Any

from ..dto.converters import BotConverter
from ..game.artifacts import (
    BotArtifact,
    BotPart,
    BotType,
    CombatRole,
    ExpansionChipRef,
    PartSlotType,
    Rarity,
    SkeletonRef,
    SkeletonType,
    SoulChipRef,
    UtilitySpecialization,
)
from ..schemas.robot import MAX_PART_STAT_TOTAL, MAX_SOUL_CHIP_STAT_TOTAL
from ..structured_logging.enhanced_logging_config import get_logger
from ..validators.result import FieldError
from .base import ArtifactContext, ArtifactFactory, blank

logger = get_logger(__name__)

MAX_BOT_NAME_LENGTH = 50

# Per-part (attack, defense, speed) baseline by specialization
SPECIALIZATION_PROFILES: dict[str, tuple[int, int, int]] = {
    UtilitySpecialization.CONSTRUCTION: (3, 10, 2),
    UtilitySpecialization.MINING: (4, 8, 3),
    UtilitySpecialization.REPAIR: (2, 6, 5),
    UtilitySpecialization.TRANSPORT: (2, 5, 9),
    CombatRole.ASSAULT: (12, 6, 7),
    CombatRole.TANK: (6, 14, 3),
    CombatRole.SNIPER: (14, 3, 6),
    CombatRole.SCOUT: (7, 4, 13),
}
UTILITY_SPECIALIZATIONS = frozenset(member.value for member in UtilitySpecialization)
COMBAT_ROLES = frozenset(member.value for member in CombatRole)

DEFAULT_PROFILE = (5, 5, 5)
KING_PROFILE = (15, 15, 10)

DEFAULT_SKELETON_BY_BOT_TYPE = {
    BotType.WORKER: SkeletonType.HEAVY,
    BotType.PLAYABLE: SkeletonType.BALANCED,
    BotType.KING: SkeletonType.MODULAR,
}

SOUL_CHIP_RARITY_BY_BOT_TYPE = {
    BotType.PLAYABLE: Rarity.COMMON,
    BotType.KING: Rarity.LEGENDARY,
}

_PART_NAMES = {
    PartSlotType.TORSO: "Torso",
    PartSlotType.ARM_R: "Right Arm",
    PartSlotType.ARM_L: "Left Arm",
    PartSlotType.LEGS: "Legs",
}


class BotFactory(ArtifactFactory[BotArtifact]):
    """Factory for worker, playable and king bots."""

    factory_name = "bot"

    def __init__(self, context: ArtifactContext | None = None):
        super().__init__(context)
        self.converter = BotConverter()

    def create_bot_artifact(  # pylint: disable=too-many-arguments
        self,
        name: str,
        user_id: str,
        bot_type: BotType | str,
        *,
        specialization: str | None = None,
        skeleton_type: SkeletonType | str | None = None,
        soul_chip: SoulChipRef | Mapping[str, Any] | None = None,
        skeleton: SkeletonRef | Mapping[str, Any] | None = None,
        parts: Iterable[BotPart | Mapping[str, Any]] | None = None,
        expansion_chips: Iterable[ExpansionChipRef | Mapping[str, Any]] | None = None,
    ) -> BotArtifact:
        """
        Create a bot, filling in any components that were not supplied.

        Workers never receive a soul chip; one passed in is discarded.

        Raises:
            ConstructionError: If an argument has the wrong type or an unknown enum value
        """
        return self.create_artifact(
            name=name,
            user_id=user_id,
            bot_type=bot_type,
            specialization=specialization,
            skeleton_type=skeleton_type,
            soul_chip=soul_chip,
            skeleton=skeleton,
            parts=parts,
            expansion_chips=expansion_chips,
        )

    def create_worker_artifact(
        self, name: str, user_id: str, specialization: UtilitySpecialization | str | None = None
    ) -> BotArtifact:
        return self.create_bot_artifact(name, user_id, BotType.WORKER, specialization=specialization)

    def create_playable_artifact(
        self,
        name: str,
        user_id: str,
        combat_role: CombatRole | str | None = None,
        skeleton_type: SkeletonType | str = SkeletonType.BALANCED,
    ) -> BotArtifact:
        return self.create_bot_artifact(
            name, user_id, BotType.PLAYABLE, specialization=combat_role, skeleton_type=skeleton_type
        )

    def create_king_artifact(self, name: str, user_id: str) -> BotArtifact:
        return self.create_bot_artifact(name, user_id, BotType.KING)

    def assemble_from_components(  # pylint: disable=too-many-arguments
        self,
        name: str,
        user_id: str,
        bot_type: BotType | str,
        *,
        skeleton: SkeletonRef | Mapping[str, Any],
        parts: Iterable[BotPart | Mapping[str, Any]],
        soul_chip: SoulChipRef | Mapping[str, Any] | None = None,
        expansion_chips: Iterable[ExpansionChipRef | Mapping[str, Any]] = (),
        specialization: str | None = None,
    ) -> BotArtifact:
        """Build a bot strictly from supplied components; nothing is defaulted except the soul chip."""
        return self.create_bot_artifact(
            name,
            user_id,
            bot_type,
            specialization=specialization,
            soul_chip=soul_chip,
            skeleton=skeleton,
            parts=list(parts),
            expansion_chips=list(expansion_chips),
        )

    def _build(  # pylint: disable=too-many-arguments
        self,
        *,
        name: Any,
        user_id: Any,
        bot_type: Any,
        specialization: Any = None,
        skeleton_type: Any = None,
        soul_chip: Any = None,
        skeleton: Any = None,
        parts: Any = None,
        expansion_chips: Any = None,
    ) -> BotArtifact:
        name = self.require_str(name, "name")
        user_id = self.require_str(user_id, "user_id")
        kind = self.coerce_enum(BotType, bot_type, "bot_type")
        if specialization is not None:
            specialization = str(self.require_str(specialization, "specialization"))

        built_skeleton = self._skeleton(skeleton, skeleton_type, kind)
        built_parts = self._parts(parts, built_skeleton, kind, specialization)
        built_chips = tuple(
            self._component(ExpansionChipRef, chip, "expansion_chips") for chip in expansion_chips or ()
        )

        built_soul_chip: SoulChipRef | None = None
        if kind is BotType.WORKER:
            if soul_chip is not None:
                logger.info("Discarding soul chip supplied for worker bot", bot_name=name, user_id=user_id)
        elif soul_chip is not None:
            built_soul_chip = self._component(SoulChipRef, soul_chip, "soul_chip")
        else:
            built_soul_chip = SoulChipRef(
                id=self.context.ids.new_id(),
                name=f"{name} Core",
                rarity=SOUL_CHIP_RARITY_BY_BOT_TYPE[kind],
            )

        bot = BotArtifact(
            name=name,
            owner_id=user_id,
            bot_type=kind,
            specialization=specialization,
            soul_chip=built_soul_chip,
            skeleton=built_skeleton,
            parts=built_parts,
            expansion_chips=built_chips,
        )
        logger.info(
            "Bot artifact created",
            bot_name=bot.name,
            user_id=bot.owner_id,
            bot_type=bot.bot_type.value,
            specialization=bot.specialization,
            assembled=bot.is_assembled,
        )
        return bot

    def _component(self, component_cls: Any, value: Any, field_name: str) -> Any:
        if isinstance(value, component_cls):
            return value
        if isinstance(value, Mapping):
            try:
                return component_cls.from_dict(dict(value))
            except (KeyError, ValueError, TypeError) as exc:
                self.construction_failed(f"Malformed {field_name} component: {exc}", field=field_name)
        self.construction_failed(
            f"{field_name} must be a {component_cls.__name__} or mapping, got {type(value).__name__}",
            field=field_name,
        )

    def _skeleton(self, skeleton: Any, skeleton_type: Any, kind: BotType) -> SkeletonRef:
        if skeleton is not None:
            return self._component(SkeletonRef, skeleton, "skeleton")
        frame = (
            self.coerce_enum(SkeletonType, skeleton_type, "skeleton_type")
            if skeleton_type is not None
            else DEFAULT_SKELETON_BY_BOT_TYPE[kind]
        )
        return SkeletonRef(id=self.context.ids.new_id(), skeleton_type=frame)

    def _parts(
        self, parts: Any, skeleton: SkeletonRef, kind: BotType, specialization: str | None
    ) -> tuple[BotPart, ...]:
        if parts is not None:
            return tuple(self._component(BotPart, part, "parts") for part in parts)

        if kind is BotType.KING:
            attack, defense, speed = KING_PROFILE
        else:
            attack, defense, speed = SPECIALIZATION_PROFILES.get(specialization or "", DEFAULT_PROFILE)
        slot_types = list(PartSlotType)[: skeleton.slot_capacity]
        return tuple(
            BotPart(
                id=self.context.ids.new_id(),
                slot_type=slot_type,
                name=_PART_NAMES[slot_type],
                attack=attack,
                defense=defense,
                speed=speed,
            )
            for slot_type in slot_types
        )

    def _rule_violations(self, artifact: BotArtifact) -> list[FieldError]:  # pylint: disable=too-many-branches
        errors: list[FieldError] = []

        if blank(artifact.name):
            errors.append(FieldError("name", "Bot name is required"))
        elif len(artifact.name) > MAX_BOT_NAME_LENGTH:
            errors.append(FieldError("name", f"Bot name must be at most {MAX_BOT_NAME_LENGTH} characters"))
        if blank(artifact.owner_id):
            errors.append(FieldError("user_id", "Bot owner is required"))

        if artifact.is_worker:
            if artifact.soul_chip is not None:
                errors.append(FieldError("soul_chip", "Worker bots cannot have soul chips"))
            if artifact.specialization is not None and artifact.specialization not in UTILITY_SPECIALIZATIONS:
                errors.append(
                    FieldError("specialization", f"Invalid utility specialization: {artifact.specialization}")
                )
        else:
            if artifact.soul_chip is None:
                errors.append(FieldError("soul_chip", "Non-worker bots must have soul chips"))
            elif min(_soul_chip_stats(artifact.soul_chip)) < 0:
                errors.append(FieldError("soul_chip", "Soul chip stats must be non-negative"))
            elif artifact.soul_chip.stat_total > MAX_SOUL_CHIP_STAT_TOTAL:
                errors.append(
                    FieldError("soul_chip", f"Soul chip stat total exceeds {MAX_SOUL_CHIP_STAT_TOTAL}")
                )
            if artifact.skeleton is None:
                errors.append(FieldError("skeleton", "Non-worker bots must have a skeleton"))
            if artifact.bot_type is BotType.PLAYABLE and artifact.specialization is not None:
                if artifact.specialization not in COMBAT_ROLES:
                    errors.append(FieldError("specialization", f"Invalid combat role: {artifact.specialization}"))

        errors.extend(self._assembly_violations(artifact))
        errors.extend(self._expansion_violations(artifact))
        return errors

    def _assembly_violations(self, artifact: BotArtifact) -> list[FieldError]:
        errors: list[FieldError] = []
        slot_counts = Counter(part.slot_type for part in artifact.parts)
        for slot_type, count in slot_counts.items():
            if count > 1:
                errors.append(FieldError("parts", f"Part slot {slot_type.value} is occupied more than once"))
        for part in artifact.parts:
            if min(part.attack, part.defense, part.speed) < 0:
                errors.append(FieldError("parts", f"Part {part.name} stats must be non-negative"))
            if part.stat_total > MAX_PART_STAT_TOTAL:
                errors.append(FieldError("parts", f"Part {part.name} stat total exceeds {MAX_PART_STAT_TOTAL}"))

        skeleton = artifact.skeleton
        if skeleton is None:
            return errors
        if not 1 <= skeleton.slot_capacity <= len(PartSlotType):
            errors.append(FieldError("skeleton", f"Skeleton slot capacity must be between 1 and {len(PartSlotType)}"))
        if skeleton.durability < 0:
            errors.append(FieldError("skeleton", "Skeleton durability must be non-negative"))
        if len(artifact.parts) > skeleton.slot_capacity:
            errors.append(
                FieldError(
                    "parts",
                    f"Bot has {len(artifact.parts)} parts but its skeleton supports {skeleton.slot_capacity}",
                )
            )
        elif not artifact.is_worker and not artifact.is_assembled:
            errors.append(FieldError("parts", "Bot is not fully assembled"))
        return errors

    def _expansion_violations(self, artifact: BotArtifact) -> list[FieldError]:
        errors: list[FieldError] = []
        seen: set[int] = set()
        for chip in artifact.expansion_chips:
            if chip.slot_ix < 0:
                errors.append(FieldError("expansion_chips", "Slot index must be non-negative"))
            elif chip.slot_ix in seen:
                errors.append(
                    FieldError("expansion_chips", f"Expansion slot {chip.slot_ix} is occupied more than once")
                )
            seen.add(chip.slot_ix)
            if chip.magnitude < 0:
                errors.append(FieldError("expansion_chips", "Expansion magnitude must be non-negative"))
        return errors


def _soul_chip_stats(chip: SoulChipRef) -> tuple[int, int, int]:
    return chip.intelligence, chip.resilience, chip.adaptability
