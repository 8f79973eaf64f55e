"""Item factory for gems, resources, speed-ups and tradeable goods."""

from __future__ import annotations

from typing import Any

from ..dto.converters import ItemConverter
from ..game.artifacts import (
    GemType,
    ItemArtifact,
    ItemCategory,
    Rarity,
    ResourceType,
    SpeedUpTarget,
)
from ..structured_logging.enhanced_logging_config import get_logger
from ..validators.result import FieldError
from .base import ArtifactContext, ArtifactFactory, blank

logger = get_logger(__name__)

# Default value per rarity when a config does not set one
RARITY_BASE_VALUE = {
    Rarity.COMMON: 10,
    Rarity.UNCOMMON: 25,
    Rarity.RARE: 60,
    Rarity.EPIC: 150,
    Rarity.LEGENDARY: 400,
    Rarity.ULTRA_RARE: 1000,
    Rarity.PROTOTYPE: 2500,
}


class ItemFactory(ArtifactFactory[ItemArtifact]):
    """Factory for inventory items."""

    factory_name = "item"

    def __init__(self, context: ArtifactContext | None = None):
        super().__init__(context)
        self.converter = ItemConverter()

    def create_gem_artifact(
        self,
        name: str,
        gem_type: GemType | str,
        gem_value: int,
        *,
        rarity: Rarity | str = Rarity.RARE,
        description: str | None = None,
        user_id: str | None = None,
    ) -> ItemArtifact:
        return self.create_artifact(
            category=ItemCategory.GEMS,
            name=name,
            description=description or f"A polished {str(gem_type).lower()} gem",
            rarity=rarity,
            gem_type=gem_type,
            gem_value=gem_value,
            value=gem_value,
            user_id=user_id,
        )

    def create_resource_artifact(
        self,
        name: str,
        resource_type: ResourceType | str,
        amount: int,
        *,
        rarity: Rarity | str = Rarity.COMMON,
        description: str | None = None,
        user_id: str | None = None,
    ) -> ItemArtifact:
        return self.create_artifact(
            category=ItemCategory.RESOURCE,
            name=name,
            description=description or f"A bundle of {str(resource_type).lower().replace('_', ' ')}",
            rarity=rarity,
            resource_type=resource_type,
            resource_amount=amount,
            user_id=user_id,
        )

    def create_speed_up_artifact(  # pylint: disable=too-many-arguments
        self,
        name: str,
        target: SpeedUpTarget | str,
        duration: int,
        *,
        multiplier: float = 1.0,
        rarity: Rarity | str = Rarity.UNCOMMON,
        description: str | None = None,
        user_id: str | None = None,
    ) -> ItemArtifact:
        return self.create_artifact(
            category=ItemCategory.SPEED_UP,
            name=name,
            description=description or f"Speeds up {str(target).lower().replace('_', ' ')} by {duration} seconds",
            rarity=rarity,
            speed_up_target=target,
            duration=duration,
            speed_multiplier=multiplier,
            user_id=user_id,
        )

    def create_tradeable_artifact(
        self,
        name: str,
        trade_value: int,
        *,
        rarity: Rarity | str = Rarity.COMMON,
        description: str | None = None,
        user_id: str | None = None,
    ) -> ItemArtifact:
        return self.create_artifact(
            category=ItemCategory.TRADEABLE,
            name=name,
            description=description or f"{name}, fit for trade",
            rarity=rarity,
            trade_value=trade_value,
            value=trade_value,
            user_id=user_id,
        )

    def _build(  # pylint: disable=too-many-arguments,too-many-locals
        self,
        *,
        category: Any,
        name: Any,
        description: Any,
        rarity: Any = Rarity.COMMON,
        value: Any = None,
        user_id: Any = None,
        gem_type: Any = None,
        gem_value: Any = None,
        resource_type: Any = None,
        resource_amount: Any = None,
        speed_up_target: Any = None,
        speed_multiplier: Any = None,
        duration: Any = None,
        trade_value: Any = None,
        tags: Any = (),
    ) -> ItemArtifact:
        kind = self.coerce_enum(ItemCategory, category, "category")
        grade = self.coerce_enum(Rarity, rarity, "rarity")
        for field_name, number in (
            ("value", value),
            ("gem_value", gem_value),
            ("resource_amount", resource_amount),
            ("duration", duration),
            ("trade_value", trade_value),
        ):
            if number is not None and (isinstance(number, bool) or not isinstance(number, int)):
                self.construction_failed(f"{field_name} must be an integer, got {number!r}", field=field_name)
        if speed_multiplier is not None and not isinstance(speed_multiplier, int | float):
            self.construction_failed(f"speed_multiplier must be a number, got {speed_multiplier!r}")

        item = ItemArtifact(
            name=self.require_str(name, "name"),
            description=self.require_str(description, "description"),
            category=kind,
            rarity=grade,
            value=RARITY_BASE_VALUE[grade] if value is None else value,
            user_id=user_id,
            gem_type=self.coerce_enum(GemType, gem_type, "gem_type") if gem_type is not None else None,
            gem_value=gem_value,
            resource_type=(
                self.coerce_enum(ResourceType, resource_type, "resource_type") if resource_type is not None else None
            ),
            resource_amount=resource_amount,
            speed_up_target=(
                self.coerce_enum(SpeedUpTarget, speed_up_target, "speed_up_target")
                if speed_up_target is not None
                else None
            ),
            speed_multiplier=float(speed_multiplier) if speed_multiplier is not None else None,
            duration=duration,
            trade_value=trade_value,
            tags=tuple(str(tag) for tag in tags),
        )
        logger.info(
            "Item artifact created",
            item_name=item.name,
            category=item.category.value,
            rarity=item.rarity.value,
            value=item.value,
        )
        return item

    def _rule_violations(self, artifact: ItemArtifact) -> list[FieldError]:
        errors: list[FieldError] = []
        if blank(artifact.name):
            errors.append(FieldError("name", "Item name is required"))
        if blank(artifact.description):
            errors.append(FieldError("description", "Item description is required"))
        if artifact.value < 0:
            errors.append(FieldError("value", "Item value must be a non-negative number"))

        match artifact.category:
            case ItemCategory.GEMS:
                if artifact.gem_type is None:
                    errors.append(FieldError("gem_type", "Gem items require a gem type"))
                if artifact.gem_value is not None and artifact.gem_value < 0:
                    errors.append(FieldError("gem_value", "Gem value must be non-negative"))
            case ItemCategory.RESOURCE:
                if artifact.resource_type is None:
                    errors.append(FieldError("resource_type", "Resource items require a resource type"))
                if artifact.resource_amount is None or artifact.resource_amount < 0:
                    errors.append(FieldError("resource_amount", "Resource amount must be a non-negative number"))
            case ItemCategory.SPEED_UP:
                if artifact.speed_up_target is None:
                    errors.append(FieldError("speed_up_target", "Speed-up items require a target"))
                if artifact.duration is None or artifact.duration <= 0:
                    errors.append(FieldError("duration", "Speed-up duration must be positive"))
                if artifact.speed_multiplier is not None and artifact.speed_multiplier < 1:
                    errors.append(FieldError("speed_multiplier", "Speed multiplier must be at least 1"))
            case ItemCategory.TRADEABLE:
                if artifact.trade_value is None or artifact.trade_value < 0:
                    errors.append(FieldError("trade_value", "Trade value must be a non-negative number"))
        return errors
