"""Shard and player account record schemas."""

from .shared import NonEmptyStr, NonNegativeInt, PositiveInt, ReadBaseModel, RecordBaseModel


class ShardCreate(RecordBaseModel):
    id: NonNegativeInt


class ShardRead(ReadBaseModel):
    id: int | None = None


class ShardUpdate(RecordBaseModel):
    id: NonNegativeInt


class ShardDelete(RecordBaseModel):
    id: NonNegativeInt


class PlayerAccountCreate(RecordBaseModel):
    shard_id: NonNegativeInt
    player_id: PositiveInt
    global_player_id: NonEmptyStr


class PlayerAccountRead(ReadBaseModel):
    shard_id: int | None = None
    player_id: int | None = None
    global_player_id: str | None = None


class PlayerAccountUpdate(RecordBaseModel):
    shard_id: NonNegativeInt
    player_id: PositiveInt
    global_player_id: NonEmptyStr | None = None


class PlayerAccountDelete(RecordBaseModel):
    shard_id: NonNegativeInt
    player_id: PositiveInt
