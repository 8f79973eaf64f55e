"""Template and instance record schemas."""

from typing import Any

from pydantic import Field

from ..game.artifacts.constants import InstanceState, ItemClass
from .shared import NonEmptyStr, NonNegativeInt, PositiveInt, ReadBaseModel, RecordBaseModel, TemplateSlug


class TemplateCreate(RecordBaseModel):
    item_class: ItemClass
    name: NonEmptyStr
    slug: TemplateSlug
    meta: dict[str, Any] = Field(default_factory=dict)


class TemplateRead(ReadBaseModel):
    id: str | None = None
    item_class: ItemClass | None = None
    name: str | None = None
    slug: str | None = None


class TemplateUpdate(RecordBaseModel):
    id: NonEmptyStr
    item_class: ItemClass | None = None
    name: NonEmptyStr | None = None
    slug: TemplateSlug | None = None
    meta: dict[str, Any] | None = None


class TemplateDelete(RecordBaseModel):
    id: NonEmptyStr


class InstanceCreate(RecordBaseModel):
    item_tpl_id: NonEmptyStr
    shard_id: NonNegativeInt
    player_id: PositiveInt
    state: InstanceState = InstanceState.NEW
    bound_to_player: PositiveInt | None = None


class InstanceRead(ReadBaseModel):
    id: str | None = None
    item_tpl_id: str | None = None
    shard_id: int | None = None
    player_id: int | None = None
    state: InstanceState | None = None
    bound_to_player: int | None = None


class InstanceUpdate(RecordBaseModel):
    id: NonEmptyStr
    item_tpl_id: NonEmptyStr | None = None
    shard_id: NonNegativeInt | None = None
    player_id: PositiveInt | None = None
    state: InstanceState | None = None
    bound_to_player: PositiveInt | None = None


class InstanceDelete(RecordBaseModel):
    id: NonEmptyStr
