"""
Converters between artifacts and persistence records.

Field renames applied here:
    BotArtifact.owner_id          -> robots.user_id
    InstanceArtifact.template_id  -> instances.item_tpl_id
    <slot>.instance_id            -> <slot table>.item_inst_id
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ..game.artifacts import (
    AccountArtifact,
    BotArtifact,
    BotPart,
    BotType,
    ExpansionChipRef,
    ExpansionSlotRecord,
    GemType,
    InstanceArtifact,
    InstanceState,
    ItemArtifact,
    ItemCategory,
    ItemClass,
    PartSlotRecord,
    PartSlotType,
    Rarity,
    ResourceType,
    SkeletonRef,
    SkeletonSlotRecord,
    SlotKind,
    SoulChipRef,
    SoulChipSlotRecord,
    SpeedUpTarget,
    TemplateArtifact,
)
from ..game.artifacts.slots import SlotRecord
from ..validators.schema_registry import Entity
from .base import TIMESTAMP_FIELDS, ArtifactConverter, Record


def _optional_enum(enum_cls: Any, value: Any) -> Any:
    return enum_cls(value) if value is not None else None


def _enum_value(value: Any) -> Any:
    return value.value if value is not None else None


class AccountConverter(ArtifactConverter[AccountArtifact]):
    entity = Entity.ACCOUNT

    def _to_record(self, artifact: AccountArtifact) -> Record:
        return {
            "user_id": artifact.user_id,
            "provider_id": artifact.provider_id,
            "account_id": artifact.account_id,
            "password": artifact.password,
            "access_token": artifact.access_token,
            "refresh_token": artifact.refresh_token,
            "id_token": artifact.id_token,
            "access_token_expires_at": artifact.access_token_expires_at,
            "refresh_token_expires_at": artifact.refresh_token_expires_at,
        }

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> AccountArtifact:
        return AccountArtifact(
            user_id=record["user_id"],
            provider_id=record["provider_id"],
            account_id=record["account_id"],
            password=record.get("password"),
            access_token=record.get("access_token"),
            refresh_token=record.get("refresh_token"),
            id_token=record.get("id_token"),
            access_token_expires_at=record.get("access_token_expires_at"),
            refresh_token_expires_at=record.get("refresh_token_expires_at"),
            **server,
        )


class BotConverter(ArtifactConverter[BotArtifact]):
    entity = Entity.ROBOT

    def _to_record(self, artifact: BotArtifact) -> Record:
        return {
            "user_id": artifact.owner_id,
            "name": artifact.name,
            "bot_type": artifact.bot_type.value,
            "specialization": artifact.specialization,
            "soul_chip": artifact.soul_chip.to_dict() if artifact.soul_chip else None,
            "skeleton": artifact.skeleton.to_dict() if artifact.skeleton else None,
            "parts": [part.to_dict() for part in artifact.parts],
            "expansion_chips": [chip.to_dict() for chip in artifact.expansion_chips],
        }

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> BotArtifact:
        soul_chip = record.get("soul_chip")
        skeleton = record.get("skeleton")
        return BotArtifact(
            name=record["name"],
            owner_id=record["user_id"],
            bot_type=BotType(record["bot_type"]),
            specialization=record.get("specialization"),
            soul_chip=SoulChipRef.from_dict(soul_chip) if soul_chip else None,
            skeleton=SkeletonRef.from_dict(skeleton) if skeleton else None,
            parts=tuple(BotPart.from_dict(part) for part in record.get("parts") or ()),
            expansion_chips=tuple(ExpansionChipRef.from_dict(chip) for chip in record.get("expansion_chips") or ()),
            **server,
        )


class ItemConverter(ArtifactConverter[ItemArtifact]):
    entity = Entity.ITEM

    def _to_record(self, artifact: ItemArtifact) -> Record:
        return {
            "name": artifact.name,
            "description": artifact.description,
            "category": artifact.category.value,
            "rarity": artifact.rarity.value,
            "value": artifact.value,
            "user_id": artifact.user_id,
            "gem_type": _enum_value(artifact.gem_type),
            "gem_value": artifact.gem_value,
            "resource_type": _enum_value(artifact.resource_type),
            "resource_amount": artifact.resource_amount,
            "speed_up_target": _enum_value(artifact.speed_up_target),
            "speed_multiplier": artifact.speed_multiplier,
            "duration": artifact.duration,
            "trade_value": artifact.trade_value,
            "tags": list(artifact.tags),
        }

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> ItemArtifact:
        return ItemArtifact(
            name=record["name"],
            description=record["description"],
            category=ItemCategory(record["category"]),
            rarity=Rarity(record.get("rarity", Rarity.COMMON)),
            value=record.get("value", 0),
            user_id=record.get("user_id"),
            gem_type=_optional_enum(GemType, record.get("gem_type")),
            gem_value=record.get("gem_value"),
            resource_type=_optional_enum(ResourceType, record.get("resource_type")),
            resource_amount=record.get("resource_amount"),
            speed_up_target=_optional_enum(SpeedUpTarget, record.get("speed_up_target")),
            speed_multiplier=record.get("speed_multiplier"),
            duration=record.get("duration"),
            trade_value=record.get("trade_value"),
            tags=tuple(record.get("tags") or ()),
            **server,
        )


class TemplateConverter(ArtifactConverter[TemplateArtifact]):
    entity = Entity.TEMPLATE

    def _to_record(self, artifact: TemplateArtifact) -> Record:
        return {
            "item_class": artifact.item_class.value,
            "name": artifact.name,
            "slug": artifact.slug,
            "meta": copy.deepcopy(artifact.meta),
        }

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> TemplateArtifact:
        return TemplateArtifact(
            item_class=ItemClass(record["item_class"]),
            name=record["name"],
            slug=record["slug"],
            meta=record.get("meta") or {},
            **server,
        )


class InstanceConverter(ArtifactConverter[InstanceArtifact]):
    entity = Entity.INSTANCE

    def _to_record(self, artifact: InstanceArtifact) -> Record:
        return {
            "item_tpl_id": artifact.template_id,
            "shard_id": artifact.shard_id,
            "player_id": artifact.player_id,
            "state": artifact.state.value,
            "bound_to_player": artifact.bound_to_player,
        }

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> InstanceArtifact:
        return InstanceArtifact(
            template_id=record["item_tpl_id"],
            shard_id=record["shard_id"],
            player_id=record["player_id"],
            state=InstanceState(record.get("state", InstanceState.NEW)),
            bound_to_player=record.get("bound_to_player"),
            **server,
        )


class SlotConverter(ArtifactConverter[SlotRecord]):
    """Converter for one slot table; slot records have no generated id."""

    server_fields = TIMESTAMP_FIELDS

    _ENTITY_BY_KIND = {
        SlotKind.SOUL_CHIP: Entity.SOUL_CHIP_SLOT,
        SlotKind.SKELETON: Entity.SKELETON_SLOT,
        SlotKind.PART: Entity.PART_SLOT,
        SlotKind.EXPANSION: Entity.EXPANSION_SLOT,
    }

    def __init__(self, kind: SlotKind):
        self.kind = kind
        self.entity = self._ENTITY_BY_KIND[kind]

    def _to_record(self, artifact: SlotRecord) -> Record:
        record: Record = {"robot_id": artifact.robot_id, "item_inst_id": artifact.instance_id}
        if isinstance(artifact, PartSlotRecord):
            record["slot_type"] = artifact.slot_type.value
        elif isinstance(artifact, ExpansionSlotRecord):
            record["slot_ix"] = artifact.slot_ix
        return record

    def _from_record(self, record: Mapping[str, Any], server: dict[str, Any]) -> SlotRecord:
        robot_id = record["robot_id"]
        instance_id = record["item_inst_id"]
        match self.kind:
            case SlotKind.SOUL_CHIP:
                return SoulChipSlotRecord(robot_id=robot_id, instance_id=instance_id, **server)
            case SlotKind.SKELETON:
                return SkeletonSlotRecord(robot_id=robot_id, instance_id=instance_id, **server)
            case SlotKind.PART:
                return PartSlotRecord(
                    robot_id=robot_id,
                    slot_type=PartSlotType(record["slot_type"]),
                    instance_id=instance_id,
                    **server,
                )
            case SlotKind.EXPANSION:
                return ExpansionSlotRecord(
                    robot_id=robot_id,
                    slot_ix=record["slot_ix"],
                    instance_id=instance_id,
                    **server,
                )
        raise ValueError(f"Unknown slot kind: {self.kind!r}")


SLOT_CONVERTERS: dict[SlotKind, SlotConverter] = {kind: SlotConverter(kind) for kind in SlotKind}
