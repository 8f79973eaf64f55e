"""
Robot record schemas.

A robot record embeds its components as JSON; the nested models below pin
the shape of each embedded component.
"""

from pydantic import Field, model_validator

from ..game.artifacts.constants import (
    BotType,
    ExpansionChipEffect,
    PartSlotType,
    Rarity,
    SkeletonType,
)
from .shared import BotName, NonEmptyStr, NonNegativeInt, PositiveInt, ReadBaseModel, RecordBaseModel

MAX_SOUL_CHIP_STAT_TOTAL = 300
MAX_PART_STAT_TOTAL = 1000


class SoulChipRecord(RecordBaseModel):
    id: NonEmptyStr
    name: NonEmptyStr
    rarity: Rarity = Rarity.COMMON
    intelligence: NonNegativeInt = 10
    resilience: NonNegativeInt = 10
    adaptability: NonNegativeInt = 10

    @model_validator(mode="after")
    def check_stat_total(self) -> "SoulChipRecord":
        total = self.intelligence + self.resilience + self.adaptability
        if total > MAX_SOUL_CHIP_STAT_TOTAL:
            raise ValueError(f"Soul chip stat total {total} exceeds {MAX_SOUL_CHIP_STAT_TOTAL}")
        return self


class SkeletonRecord(RecordBaseModel):
    id: NonEmptyStr
    skeleton_type: SkeletonType = SkeletonType.BALANCED
    rarity: Rarity = Rarity.COMMON
    slot_capacity: PositiveInt = Field(default=len(PartSlotType), le=len(PartSlotType))
    durability: NonNegativeInt = 100


class PartRecord(RecordBaseModel):
    id: NonEmptyStr
    slot_type: PartSlotType
    name: NonEmptyStr
    rarity: Rarity = Rarity.COMMON
    attack: NonNegativeInt = 0
    defense: NonNegativeInt = 0
    speed: NonNegativeInt = 0

    @model_validator(mode="after")
    def check_stat_total(self) -> "PartRecord":
        total = self.attack + self.defense + self.speed
        if total > MAX_PART_STAT_TOTAL:
            raise ValueError(f"Part stat total {total} exceeds {MAX_PART_STAT_TOTAL}")
        return self


class ExpansionChipRecord(RecordBaseModel):
    id: NonEmptyStr
    effect: ExpansionChipEffect
    slot_ix: NonNegativeInt
    magnitude: NonNegativeInt = 0


class RobotCreate(RecordBaseModel):
    user_id: NonEmptyStr
    name: BotName
    bot_type: BotType
    specialization: str | None = None
    soul_chip: SoulChipRecord | None = None
    skeleton: SkeletonRecord | None = None
    parts: list[PartRecord] = Field(default_factory=list)
    expansion_chips: list[ExpansionChipRecord] = Field(default_factory=list)


class RobotRead(ReadBaseModel):
    id: str | None = None
    user_id: str | None = None
    name: str | None = None
    bot_type: BotType | None = None
    specialization: str | None = None


class RobotUpdate(RecordBaseModel):
    id: NonEmptyStr
    user_id: NonEmptyStr | None = None
    name: BotName | None = None
    bot_type: BotType | None = None
    specialization: str | None = None
    soul_chip: SoulChipRecord | None = None
    skeleton: SkeletonRecord | None = None
    parts: list[PartRecord] | None = None
    expansion_chips: list[ExpansionChipRecord] | None = None


class RobotDelete(RecordBaseModel):
    id: NonEmptyStr
