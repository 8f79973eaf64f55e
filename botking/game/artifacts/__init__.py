"""Artifact entities.

Artifacts are frozen values. Server-assigned fields (id, created_at,
updated_at) stay None until the persistence collaborator fills them.
"""

from .account import CREDENTIAL_PROVIDER, AccountArtifact
from .bot import BotArtifact, BotPart, ExpansionChipRef, SkeletonRef, SoulChipRef
from .catalog import InstanceArtifact, TemplateArtifact
from .constants import (
    BotType,
    CombatRole,
    ExpansionChipEffect,
    GemType,
    InstanceState,
    ItemCategory,
    ItemClass,
    PartSlotType,
    Rarity,
    ResourceType,
    SkeletonType,
    SpeedUpTarget,
    UtilitySpecialization,
)
from .item import ItemArtifact
from .slots import (
    ExpansionSlotRecord,
    PartSlotRecord,
    SkeletonSlotRecord,
    SlotKind,
    SlotRecord,
    SoulChipSlotRecord,
)

__all__ = [
    "CREDENTIAL_PROVIDER",
    "AccountArtifact",
    "BotArtifact",
    "BotPart",
    "BotType",
    "CombatRole",
    "ExpansionChipEffect",
    "ExpansionChipRef",
    "ExpansionSlotRecord",
    "GemType",
    "InstanceArtifact",
    "InstanceState",
    "ItemArtifact",
    "ItemCategory",
    "ItemClass",
    "PartSlotRecord",
    "PartSlotType",
    "Rarity",
    "ResourceType",
    "SkeletonRef",
    "SkeletonSlotRecord",
    "SkeletonType",
    "SlotKind",
    "SlotRecord",
    "SoulChipRef",
    "SoulChipSlotRecord",
    "SpeedUpTarget",
    "TemplateArtifact",
    "UtilitySpecialization",
]
