"""
Slot record schemas.

Every slot table is keyed by the robot plus, for parts and expansion
modules, the slot position. The bound instance is not part of the key.
"""

from typing import Annotated

from pydantic import AfterValidator

from ..game.artifacts.constants import PartSlotType
from .shared import NonEmptyStr, ReadBaseModel, RecordBaseModel


def _check_slot_ix(v: int) -> int:
    if v < 0:
        raise ValueError("Slot index must be non-negative")
    return v


SlotIndex = Annotated[int, AfterValidator(_check_slot_ix)]


class SoulChipSlotCreate(RecordBaseModel):
    robot_id: NonEmptyStr
    item_inst_id: NonEmptyStr


class SoulChipSlotRead(ReadBaseModel):
    robot_id: str | None = None
    item_inst_id: str | None = None


class SoulChipSlotUpdate(RecordBaseModel):
    robot_id: NonEmptyStr
    item_inst_id: NonEmptyStr | None = None


class SoulChipSlotDelete(RecordBaseModel):
    robot_id: NonEmptyStr


class SkeletonSlotCreate(RecordBaseModel):
    robot_id: NonEmptyStr
    item_inst_id: NonEmptyStr


class SkeletonSlotRead(ReadBaseModel):
    robot_id: str | None = None
    item_inst_id: str | None = None


class SkeletonSlotUpdate(RecordBaseModel):
    robot_id: NonEmptyStr
    item_inst_id: NonEmptyStr | None = None


class SkeletonSlotDelete(RecordBaseModel):
    robot_id: NonEmptyStr


class PartSlotCreate(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_type: PartSlotType
    item_inst_id: NonEmptyStr


class PartSlotRead(ReadBaseModel):
    robot_id: str | None = None
    slot_type: PartSlotType | None = None
    item_inst_id: str | None = None


class PartSlotUpdate(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_type: PartSlotType
    item_inst_id: NonEmptyStr | None = None


class PartSlotDelete(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_type: PartSlotType


class ExpansionSlotCreate(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_ix: SlotIndex
    item_inst_id: NonEmptyStr


class ExpansionSlotRead(ReadBaseModel):
    robot_id: str | None = None
    slot_ix: SlotIndex | None = None
    item_inst_id: str | None = None


class ExpansionSlotUpdate(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_ix: SlotIndex
    item_inst_id: NonEmptyStr | None = None


class ExpansionSlotDelete(RecordBaseModel):
    robot_id: NonEmptyStr
    slot_ix: SlotIndex
