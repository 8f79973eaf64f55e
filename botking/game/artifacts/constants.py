"""Enumerations shared by artifacts, schemas and persisted records.

Enum values are the exact strings written to persistence.
"""

from enum import StrEnum


class BotType(StrEnum):
    WORKER = "WORKER"
    PLAYABLE = "PLAYABLE"
    KING = "KING"


class UtilitySpecialization(StrEnum):
    CONSTRUCTION = "CONSTRUCTION"
    MINING = "MINING"
    REPAIR = "REPAIR"
    TRANSPORT = "TRANSPORT"


class CombatRole(StrEnum):
    ASSAULT = "ASSAULT"
    TANK = "TANK"
    SNIPER = "SNIPER"
    SCOUT = "SCOUT"


class SkeletonType(StrEnum):
    LIGHT = "LIGHT"
    BALANCED = "BALANCED"
    HEAVY = "HEAVY"
    FLYING = "FLYING"
    MODULAR = "MODULAR"


class PartSlotType(StrEnum):
    TORSO = "TORSO"
    ARM_R = "ARM_R"
    ARM_L = "ARM_L"
    LEGS = "LEGS"


class ExpansionChipEffect(StrEnum):
    ATTACK_BUFF = "ATTACK_BUFF"
    DEFENSE_BUFF = "DEFENSE_BUFF"
    SPEED_BUFF = "SPEED_BUFF"
    AI_UPGRADE = "AI_UPGRADE"
    ENERGY_EFFICIENCY = "ENERGY_EFFICIENCY"


class Rarity(StrEnum):
    COMMON = "COMMON"
    UNCOMMON = "UNCOMMON"
    RARE = "RARE"
    EPIC = "EPIC"
    LEGENDARY = "LEGENDARY"
    ULTRA_RARE = "ULTRA_RARE"
    PROTOTYPE = "PROTOTYPE"


class ItemCategory(StrEnum):
    GEMS = "GEMS"
    RESOURCE = "RESOURCE"
    SPEED_UP = "SPEED_UP"
    TRADEABLE = "TRADEABLE"


class GemType(StrEnum):
    RUBY = "RUBY"
    SAPPHIRE = "SAPPHIRE"
    EMERALD = "EMERALD"
    DIAMOND = "DIAMOND"
    AMETHYST = "AMETHYST"


class ResourceType(StrEnum):
    SCRAP_PARTS = "SCRAP_PARTS"
    MICROCHIPS = "MICROCHIPS"
    STEEL = "STEEL"
    ENERGY_CELLS = "ENERGY_CELLS"
    RARE_METALS = "RARE_METALS"


class SpeedUpTarget(StrEnum):
    BOT_CONSTRUCTION = "BOT_CONSTRUCTION"
    TRAINING = "TRAINING"
    RESEARCH = "RESEARCH"
    REPAIR = "REPAIR"
    CRAFTING = "CRAFTING"


class ItemClass(StrEnum):
    SOUL_CHIP = "SOUL_CHIP"
    SKELETON = "SKELETON"
    PART = "PART"
    EXPANSION_CHIP = "EXPANSION_CHIP"


class InstanceState(StrEnum):
    NEW = "NEW"
    USED = "USED"
    EQUIPPED = "EQUIPPED"


# Part slots every skeleton exposes; its slot capacity cannot exceed this
PART_SLOT_COUNT = len(PartSlotType)

DEFAULT_SKELETON_SLOT_CAPACITY = PART_SLOT_COUNT

# Legal instance lifecycle moves; destruction is a record deletion, not a state
ALLOWED_INSTANCE_TRANSITIONS: dict[InstanceState, set[InstanceState]] = {
    InstanceState.NEW: {InstanceState.EQUIPPED},
    InstanceState.EQUIPPED: {InstanceState.USED},
    InstanceState.USED: {InstanceState.EQUIPPED},
}

TEMPLATE_SLUG_PATTERN = r"^[a-z0-9-]+$"
