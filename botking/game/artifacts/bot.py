"""Bot artifact and the components a bot is assembled from.

Components are small frozen value objects. Each knows how to render itself
as a JSON-compatible dict (to_dict) and rebuild itself (from_dict) so the
robot record can embed them losslessly.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .constants import (
    DEFAULT_SKELETON_SLOT_CAPACITY,
    BotType,
    ExpansionChipEffect,
    PartSlotType,
    Rarity,
    SkeletonType,
)


def _int_field(data: dict[str, Any], key: str, default: int | None = None) -> int:
    value = data[key] if default is None else data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {type(value).__name__}")
    return value


def _str_field(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class SoulChipRef:
    """The personality core of a non-worker bot."""

    id: str
    name: str
    rarity: Rarity = Rarity.COMMON
    intelligence: int = 10
    resilience: int = 10
    adaptability: int = 10

    @property
    def stat_total(self) -> int:
        return self.intelligence + self.resilience + self.adaptability

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rarity": self.rarity.value,
            "intelligence": self.intelligence,
            "resilience": self.resilience,
            "adaptability": self.adaptability,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SoulChipRef:
        return cls(
            id=_str_field(data, "id"),
            name=_str_field(data, "name"),
            rarity=Rarity(data.get("rarity", Rarity.COMMON)),
            intelligence=_int_field(data, "intelligence", 10),
            resilience=_int_field(data, "resilience", 10),
            adaptability=_int_field(data, "adaptability", 10),
        )


@dataclass(frozen=True, slots=True)
class SkeletonRef:
    """Frame that defines how many parts a bot can mount."""

    id: str
    skeleton_type: SkeletonType = SkeletonType.BALANCED
    rarity: Rarity = Rarity.COMMON
    slot_capacity: int = DEFAULT_SKELETON_SLOT_CAPACITY
    durability: int = 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "skeleton_type": self.skeleton_type.value,
            "rarity": self.rarity.value,
            "slot_capacity": self.slot_capacity,
            "durability": self.durability,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SkeletonRef:
        return cls(
            id=_str_field(data, "id"),
            skeleton_type=SkeletonType(data.get("skeleton_type", SkeletonType.BALANCED)),
            rarity=Rarity(data.get("rarity", Rarity.COMMON)),
            slot_capacity=_int_field(data, "slot_capacity", DEFAULT_SKELETON_SLOT_CAPACITY),
            durability=_int_field(data, "durability", 100),
        )


@dataclass(frozen=True, slots=True)
class BotPart:
    """A part mounted in one of the skeleton's part slots."""

    id: str
    slot_type: PartSlotType
    name: str
    rarity: Rarity = Rarity.COMMON
    attack: int = 0
    defense: int = 0
    speed: int = 0

    @property
    def stat_total(self) -> int:
        return self.attack + self.defense + self.speed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slot_type": self.slot_type.value,
            "name": self.name,
            "rarity": self.rarity.value,
            "attack": self.attack,
            "defense": self.defense,
            "speed": self.speed,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BotPart:
        return cls(
            id=_str_field(data, "id"),
            slot_type=PartSlotType(data["slot_type"]),
            name=_str_field(data, "name"),
            rarity=Rarity(data.get("rarity", Rarity.COMMON)),
            attack=_int_field(data, "attack", 0),
            defense=_int_field(data, "defense", 0),
            speed=_int_field(data, "speed", 0),
        )


@dataclass(frozen=True, slots=True)
class ExpansionChipRef:
    """Expansion module installed at an indexed expansion slot."""

    id: str
    effect: ExpansionChipEffect
    slot_ix: int
    magnitude: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "effect": self.effect.value, "slot_ix": self.slot_ix, "magnitude": self.magnitude}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExpansionChipRef:
        return cls(
            id=_str_field(data, "id"),
            effect=ExpansionChipEffect(data["effect"]),
            slot_ix=_int_field(data, "slot_ix"),
            magnitude=_int_field(data, "magnitude", 0),
        )


_BUFF_FOR_STAT = {
    "attack": ExpansionChipEffect.ATTACK_BUFF,
    "defense": ExpansionChipEffect.DEFENSE_BUFF,
    "speed": ExpansionChipEffect.SPEED_BUFF,
}


@dataclass(frozen=True, slots=True)
class BotArtifact:
    """
    A bot with its components.

    Workers never carry a soul chip; factories strip one if supplied and the
    bot validator flags a worker that has one. Combat totals are derived from
    the mounted parts plus matching expansion buffs and are never persisted.
    """

    name: str
    owner_id: str
    bot_type: BotType
    specialization: str | None = None
    soul_chip: SoulChipRef | None = None
    skeleton: SkeletonRef | None = None
    parts: tuple[BotPart, ...] = field(default_factory=tuple)
    expansion_chips: tuple[ExpansionChipRef, ...] = field(default_factory=tuple)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def is_worker(self) -> bool:
        return self.bot_type is BotType.WORKER

    def _stat_total(self, stat: str) -> int:
        from_parts = sum(getattr(part, stat) for part in self.parts)
        buff = _BUFF_FOR_STAT[stat]
        return from_parts + sum(chip.magnitude for chip in self.expansion_chips if chip.effect is buff)

    @property
    def total_attack(self) -> int:
        return self._stat_total("attack")

    @property
    def total_defense(self) -> int:
        return self._stat_total("defense")

    @property
    def total_speed(self) -> int:
        return self._stat_total("speed")

    @property
    def occupied_part_slots(self) -> list[PartSlotType]:
        return [part.slot_type for part in self.parts]

    @property
    def is_assembled(self) -> bool:
        """A skeleton is present and every one of its part slots holds a distinct part."""
        if self.skeleton is None:
            return False
        slots = self.occupied_part_slots
        return len(slots) == self.skeleton.slot_capacity and len(set(slots)) == len(slots)

    def part_in(self, slot_type: PartSlotType) -> BotPart | None:
        return next((part for part in self.parts if part.slot_type is slot_type), None)

    def with_parts(self, parts: list[BotPart] | tuple[BotPart, ...]) -> BotArtifact:
        return replace(self, parts=tuple(parts))

    def renamed(self, name: str) -> BotArtifact:
        return replace(self, name=name)
