"""Inventory item artifact with category-specific attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .constants import GemType, ItemCategory, Rarity, ResourceType, SpeedUpTarget

# Attributes that only make sense for one category
CATEGORY_FIELDS: dict[ItemCategory, tuple[str, ...]] = {
    ItemCategory.GEMS: ("gem_type", "gem_value"),
    ItemCategory.RESOURCE: ("resource_type", "resource_amount"),
    ItemCategory.SPEED_UP: ("speed_up_target", "speed_multiplier", "duration"),
    ItemCategory.TRADEABLE: ("trade_value",),
}


@dataclass(frozen=True, slots=True)
class ItemArtifact:
    """
    A stackable inventory item.

    Only the attributes belonging to the item's category are expected to be
    set; the item validator reports missing ones and ignores the rest.
    """

    name: str
    description: str
    category: ItemCategory
    rarity: Rarity = Rarity.COMMON
    value: int = 0
    user_id: str | None = None
    gem_type: GemType | None = None
    gem_value: int | None = None
    resource_type: ResourceType | None = None
    resource_amount: int | None = None
    speed_up_target: SpeedUpTarget | None = None
    speed_multiplier: float | None = None
    duration: int | None = None
    trade_value: int | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def is_consumable(self) -> bool:
        return self.category in (ItemCategory.SPEED_UP, ItemCategory.RESOURCE)

    def time_reduction(self, remaining_seconds: int) -> int:
        """
        Seconds a speed-up removes from a timer with the given remaining time.

        The flat duration is applied first, then the multiplier divides what is left.
        Non speed-up items reduce nothing.
        """
        if self.category is not ItemCategory.SPEED_UP or remaining_seconds <= 0:
            return 0
        after_flat = max(remaining_seconds - (self.duration or 0), 0)
        multiplier = self.speed_multiplier or 1.0
        after_multiplier = int(after_flat / multiplier) if multiplier > 1 else after_flat
        return remaining_seconds - after_multiplier

    def category_attributes(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in CATEGORY_FIELDS[self.category]}
