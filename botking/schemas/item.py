"""Inventory item record schemas."""

from pydantic import Field

from ..game.artifacts.constants import GemType, ItemCategory, Rarity, ResourceType, SpeedUpTarget
from .shared import NonEmptyStr, NonNegativeInt, PositiveInt, ReadBaseModel, RecordBaseModel


class ItemCreate(RecordBaseModel):
    name: NonEmptyStr
    description: NonEmptyStr
    category: ItemCategory
    rarity: Rarity = Rarity.COMMON
    value: NonNegativeInt = 0
    user_id: str | None = None
    gem_type: GemType | None = None
    gem_value: NonNegativeInt | None = None
    resource_type: ResourceType | None = None
    resource_amount: NonNegativeInt | None = None
    speed_up_target: SpeedUpTarget | None = None
    speed_multiplier: float | None = Field(default=None, ge=1.0)
    duration: PositiveInt | None = None
    trade_value: NonNegativeInt | None = None
    tags: list[str] = Field(default_factory=list)


class ItemRead(ReadBaseModel):
    id: str | None = None
    user_id: str | None = None
    name: str | None = None
    category: ItemCategory | None = None
    rarity: Rarity | None = None


class ItemUpdate(RecordBaseModel):
    id: NonEmptyStr
    name: NonEmptyStr | None = None
    description: NonEmptyStr | None = None
    category: ItemCategory | None = None
    rarity: Rarity | None = None
    value: NonNegativeInt | None = None
    user_id: str | None = None
    gem_type: GemType | None = None
    gem_value: NonNegativeInt | None = None
    resource_type: ResourceType | None = None
    resource_amount: NonNegativeInt | None = None
    speed_up_target: SpeedUpTarget | None = None
    speed_multiplier: float | None = Field(default=None, ge=1.0)
    duration: PositiveInt | None = None
    trade_value: NonNegativeInt | None = None
    tags: list[str] | None = None


class ItemDelete(RecordBaseModel):
    id: NonEmptyStr
