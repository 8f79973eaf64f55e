"""
SQLAlchemy models for the BotKing persistence schema.

Column names match the record field names exactly so rows and records map
one-to-one. JSON columns use JSONB on PostgreSQL and the generic JSON type
elsewhere (SQLite in tests). Timestamps are supplied by the adapter's clock
rather than by server defaults.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    DateTime,
    Float,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.mutable import MutableDict, MutableList
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .tables import (
    ACCOUNTS,
    EXPANSION_SLOTS,
    INSTANCES,
    ITEMS,
    PART_SLOTS,
    PLAYER_ACCOUNTS,
    ROBOTS,
    SHARDS,
    SKELETON_SLOTS,
    SOUL_CHIP_SLOTS,
    TEMPLATES,
)

ID_LENGTH = 64


def json_type() -> JSON:
    """A fresh JSON type per column; mutable wrappers attach to the instance they are given."""
    return JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Shared declarative base for all BotKing models."""


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class AccountRow(TimestampMixin, Base):
    __tablename__ = ACCOUNTS
    __table_args__ = (UniqueConstraint("provider_id", "account_id", name="uq_accounts_provider_account"),)

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    provider_id: Mapped[str] = mapped_column(String(64), nullable=False)
    account_id: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    id_token: Mapped[str | None] = mapped_column(Text, nullable=True)
    access_token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class RobotRow(TimestampMixin, Base):
    __tablename__ = ROBOTS

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    bot_type: Mapped[str] = mapped_column(String(16), nullable=False)
    specialization: Mapped[str | None] = mapped_column(String(32), nullable=True)
    soul_chip: Mapped[dict[str, Any] | None] = mapped_column(MutableDict.as_mutable(json_type()), nullable=True)
    skeleton: Mapped[dict[str, Any] | None] = mapped_column(MutableDict.as_mutable(json_type()), nullable=True)
    parts: Mapped[list[dict[str, Any]]] = mapped_column(
        MutableList.as_mutable(json_type()), nullable=False, default=list
    )
    expansion_chips: Mapped[list[dict[str, Any]]] = mapped_column(
        MutableList.as_mutable(json_type()), nullable=False, default=list
    )


class ItemRow(TimestampMixin, Base):
    __tablename__ = ITEMS

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String(ID_LENGTH), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    rarity: Mapped[str] = mapped_column(String(16), nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gem_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    gem_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    resource_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    resource_amount: Mapped[int | None] = mapped_column(Integer, nullable=True)
    speed_up_target: Mapped[str | None] = mapped_column(String(32), nullable=True)
    speed_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    trade_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str]] = mapped_column(MutableList.as_mutable(json_type()), nullable=False, default=list)


class TemplateRow(TimestampMixin, Base):
    """Immutable catalog entry an instance is minted from."""

    __tablename__ = TEMPLATES

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    item_class: Mapped[str] = mapped_column(String(16), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    meta: Mapped[dict[str, Any]] = mapped_column(MutableDict.as_mutable(json_type()), nullable=False, default=dict)


class ShardRow(TimestampMixin, Base):
    __tablename__ = SHARDS

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)


class PlayerAccountRow(TimestampMixin, Base):
    __tablename__ = PLAYER_ACCOUNTS
    __table_args__ = (UniqueConstraint("global_player_id", "shard_id", name="uq_player_accounts_global_shard"),)

    shard_id: Mapped[int] = mapped_column(Integer, ForeignKey(f"{SHARDS}.id"), primary_key=True, autoincrement=False)
    player_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    global_player_id: Mapped[str] = mapped_column(String(ID_LENGTH), nullable=False)


class InstanceRow(TimestampMixin, Base):
    __tablename__ = INSTANCES
    __table_args__ = (
        ForeignKeyConstraint(
            ["shard_id", "player_id"],
            [f"{PLAYER_ACCOUNTS}.shard_id", f"{PLAYER_ACCOUNTS}.player_id"],
        ),
    )

    id: Mapped[str] = mapped_column(String(ID_LENGTH), primary_key=True)
    item_tpl_id: Mapped[str] = mapped_column(String(ID_LENGTH), ForeignKey(f"{TEMPLATES}.id"), nullable=False)
    shard_id: Mapped[int] = mapped_column(Integer, nullable=False)
    player_id: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[str] = mapped_column(String(16), nullable=False)
    bound_to_player: Mapped[int | None] = mapped_column(Integer, nullable=True)


class SlotMixin(TimestampMixin):
    robot_id: Mapped[str] = mapped_column(String(ID_LENGTH), ForeignKey(f"{ROBOTS}.id"), primary_key=True)
    item_inst_id: Mapped[str] = mapped_column(
        String(ID_LENGTH), ForeignKey(f"{INSTANCES}.id"), nullable=False, unique=True
    )


class SoulChipSlotRow(SlotMixin, Base):
    __tablename__ = SOUL_CHIP_SLOTS


class SkeletonSlotRow(SlotMixin, Base):
    __tablename__ = SKELETON_SLOTS


class PartSlotRow(SlotMixin, Base):
    __tablename__ = PART_SLOTS

    slot_type: Mapped[str] = mapped_column(String(16), primary_key=True)


class ExpansionSlotRow(SlotMixin, Base):
    __tablename__ = EXPANSION_SLOTS

    slot_ix: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)


MODEL_FOR_TABLE: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (
        AccountRow,
        RobotRow,
        ItemRow,
        TemplateRow,
        ShardRow,
        PlayerAccountRow,
        InstanceRow,
        SoulChipSlotRow,
        SkeletonSlotRow,
        PartSlotRow,
        ExpansionSlotRow,
    )
}
