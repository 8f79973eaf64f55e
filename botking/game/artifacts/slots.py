"""Slot records binding an item instance to a robot.

Each record is identified by its composite key: the robot alone for the
single soul-chip and skeleton slots, the robot plus slot type for parts and
the robot plus slot index for expansion modules.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .constants import ItemClass, PartSlotType


class SlotKind(StrEnum):
    SOUL_CHIP = "soul_chip"
    SKELETON = "skeleton"
    PART = "part"
    EXPANSION = "expansion"


ITEM_CLASS_FOR_SLOT = {
    SlotKind.SOUL_CHIP: ItemClass.SOUL_CHIP,
    SlotKind.SKELETON: ItemClass.SKELETON,
    SlotKind.PART: ItemClass.PART,
    SlotKind.EXPANSION: ItemClass.EXPANSION_CHIP,
}


@dataclass(frozen=True, slots=True)
class SoulChipSlotRecord:
    robot_id: str
    instance_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    kind = SlotKind.SOUL_CHIP

    @property
    def key(self) -> dict[str, Any]:
        return {"robot_id": self.robot_id}


@dataclass(frozen=True, slots=True)
class SkeletonSlotRecord:
    robot_id: str
    instance_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    kind = SlotKind.SKELETON

    @property
    def key(self) -> dict[str, Any]:
        return {"robot_id": self.robot_id}


@dataclass(frozen=True, slots=True)
class PartSlotRecord:
    robot_id: str
    slot_type: PartSlotType
    instance_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    kind = SlotKind.PART

    @property
    def key(self) -> dict[str, Any]:
        return {"robot_id": self.robot_id, "slot_type": self.slot_type.value}


@dataclass(frozen=True, slots=True)
class ExpansionSlotRecord:
    robot_id: str
    slot_ix: int
    instance_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    kind = SlotKind.EXPANSION

    @property
    def key(self) -> dict[str, Any]:
        return {"robot_id": self.robot_id, "slot_ix": self.slot_ix}


SlotRecord = SoulChipSlotRecord | SkeletonSlotRecord | PartSlotRecord | ExpansionSlotRecord
