"""
Table catalogue shared by the persistence adapters.

Each TableSpec names the key fields (a single generated "id" or a composite
key), the unique constraints beyond the key and whether the adapter mints
the identity.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..validators.schema_registry import Entity


@dataclass(frozen=True, slots=True)
class TableSpec:
    name: str
    key: tuple[str, ...]
    unique: tuple[tuple[str, ...], ...] = field(default_factory=tuple)
    generated_id: bool = False


ACCOUNTS = "accounts"
ROBOTS = "robots"
ITEMS = "items"
TEMPLATES = "templates"
INSTANCES = "instances"
SOUL_CHIP_SLOTS = "soul_chip_slots"
SKELETON_SLOTS = "skeleton_slots"
PART_SLOTS = "part_slots"
EXPANSION_SLOTS = "expansion_slots"
SHARDS = "shards"
PLAYER_ACCOUNTS = "player_accounts"

TABLES: dict[str, TableSpec] = {
    spec.name: spec
    for spec in (
        TableSpec(ACCOUNTS, ("id",), unique=(("provider_id", "account_id"),), generated_id=True),
        TableSpec(ROBOTS, ("id",), generated_id=True),
        TableSpec(ITEMS, ("id",), generated_id=True),
        TableSpec(TEMPLATES, ("id",), unique=(("slug",),), generated_id=True),
        TableSpec(INSTANCES, ("id",), generated_id=True),
        TableSpec(SOUL_CHIP_SLOTS, ("robot_id",), unique=(("item_inst_id",),)),
        TableSpec(SKELETON_SLOTS, ("robot_id",), unique=(("item_inst_id",),)),
        TableSpec(PART_SLOTS, ("robot_id", "slot_type"), unique=(("item_inst_id",),)),
        TableSpec(EXPANSION_SLOTS, ("robot_id", "slot_ix"), unique=(("item_inst_id",),)),
        TableSpec(SHARDS, ("id",)),
        TableSpec(PLAYER_ACCOUNTS, ("shard_id", "player_id"), unique=(("global_player_id", "shard_id"),)),
    )
}

TABLE_FOR_ENTITY: dict[Entity, str] = {
    Entity.ACCOUNT: ACCOUNTS,
    Entity.ROBOT: ROBOTS,
    Entity.ITEM: ITEMS,
    Entity.TEMPLATE: TEMPLATES,
    Entity.INSTANCE: INSTANCES,
    Entity.SOUL_CHIP_SLOT: SOUL_CHIP_SLOTS,
    Entity.SKELETON_SLOT: SKELETON_SLOTS,
    Entity.PART_SLOT: PART_SLOTS,
    Entity.EXPANSION_SLOT: EXPANSION_SLOTS,
    Entity.SHARD: SHARDS,
    Entity.PLAYER_ACCOUNT: PLAYER_ACCOUNTS,
}

SLOT_TABLES = (SOUL_CHIP_SLOTS, SKELETON_SLOTS, PART_SLOTS, EXPANSION_SLOTS)


def table_spec(name: str) -> TableSpec:
    """
    Look up a table by name.

    Raises:
        KeyError: If the table is not part of the catalogue
    """
    return TABLES[name]
