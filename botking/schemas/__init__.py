"""
Record schemas for every persisted entity.

Each entity has Create, Read, Update and Delete variants; see
botking.validators.schema_registry for dispatch.
"""

from .account import AccountCreate, AccountDelete, AccountRead, AccountUpdate
from .catalog import (
    InstanceCreate,
    InstanceDelete,
    InstanceRead,
    InstanceUpdate,
    TemplateCreate,
    TemplateDelete,
    TemplateRead,
    TemplateUpdate,
)
from .item import ItemCreate, ItemDelete, ItemRead, ItemUpdate
from .robot import (
    ExpansionChipRecord,
    PartRecord,
    RobotCreate,
    RobotDelete,
    RobotRead,
    RobotUpdate,
    SkeletonRecord,
    SoulChipRecord,
)
from .slots import (
    ExpansionSlotCreate,
    ExpansionSlotDelete,
    ExpansionSlotRead,
    ExpansionSlotUpdate,
    PartSlotCreate,
    PartSlotDelete,
    PartSlotRead,
    PartSlotUpdate,
    SkeletonSlotCreate,
    SkeletonSlotDelete,
    SkeletonSlotRead,
    SkeletonSlotUpdate,
    SoulChipSlotCreate,
    SoulChipSlotDelete,
    SoulChipSlotRead,
    SoulChipSlotUpdate,
)
from .world import (
    PlayerAccountCreate,
    PlayerAccountDelete,
    PlayerAccountRead,
    PlayerAccountUpdate,
    ShardCreate,
    ShardDelete,
    ShardRead,
    ShardUpdate,
)

__all__ = [
    "AccountCreate",
    "AccountDelete",
    "AccountRead",
    "AccountUpdate",
    "ExpansionChipRecord",
    "ExpansionSlotCreate",
    "ExpansionSlotDelete",
    "ExpansionSlotRead",
    "ExpansionSlotUpdate",
    "InstanceCreate",
    "InstanceDelete",
    "InstanceRead",
    "InstanceUpdate",
    "ItemCreate",
    "ItemDelete",
    "ItemRead",
    "ItemUpdate",
    "PartRecord",
    "PartSlotCreate",
    "PartSlotDelete",
    "PartSlotRead",
    "PartSlotUpdate",
    "PlayerAccountCreate",
    "PlayerAccountDelete",
    "PlayerAccountRead",
    "PlayerAccountUpdate",
    "RobotCreate",
    "RobotDelete",
    "RobotRead",
    "RobotUpdate",
    "ShardCreate",
    "ShardDelete",
    "ShardRead",
    "ShardUpdate",
    "SkeletonRecord",
    "SkeletonSlotCreate",
    "SkeletonSlotDelete",
    "SkeletonSlotRead",
    "SkeletonSlotUpdate",
    "SoulChipRecord",
    "SoulChipSlotCreate",
    "SoulChipSlotDelete",
    "SoulChipSlotRead",
    "SoulChipSlotUpdate",
    "TemplateCreate",
    "TemplateDelete",
    "TemplateRead",
    "TemplateUpdate",
]
