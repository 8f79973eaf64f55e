"""
Schema registry and validation entry points.

Every entity is registered with all four schema variants. validate() never
raises for malformed data; it returns Ok with the parsed record or Err with
every violated constraint in the order pydantic reports them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..error_types import ErrorType
from ..exceptions import ConfigurationError
from ..schemas import account, catalog, item, robot, slots, world
from ..structured_logging.enhanced_logging_config import get_logger
from .result import Err, FieldError, Ok, Result

logger = get_logger(__name__)


class Entity(StrEnum):
    ACCOUNT = "account"
    TEMPLATE = "template"
    INSTANCE = "instance"
    ROBOT = "robot"
    SOUL_CHIP_SLOT = "soul_chip_slot"
    SKELETON_SLOT = "skeleton_slot"
    PART_SLOT = "part_slot"
    EXPANSION_SLOT = "expansion_slot"
    ITEM = "item"
    SHARD = "shard"
    PLAYER_ACCOUNT = "player_account"


class SchemaVariant(StrEnum):
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class EntitySchemas:
    """The four schema variants of one entity."""

    create: type[BaseModel]
    read: type[BaseModel]
    update: type[BaseModel]
    delete: type[BaseModel]

    def for_variant(self, variant: SchemaVariant) -> type[BaseModel]:
        match variant:
            case SchemaVariant.CREATE:
                return self.create
            case SchemaVariant.READ:
                return self.read
            case SchemaVariant.UPDATE:
                return self.update
            case SchemaVariant.DELETE:
                return self.delete
        raise ConfigurationError(f"Unknown schema variant: {variant!r}", config_key="schema_variant")

    @property
    def key_fields(self) -> tuple[str, ...]:
        """Identity or composite key fields; exactly what the Delete variant requires."""
        return tuple(self.delete.model_fields)


SCHEMA_REGISTRY: dict[Entity, EntitySchemas] = {
    Entity.ACCOUNT: EntitySchemas(
        account.AccountCreate, account.AccountRead, account.AccountUpdate, account.AccountDelete
    ),
    Entity.TEMPLATE: EntitySchemas(
        catalog.TemplateCreate, catalog.TemplateRead, catalog.TemplateUpdate, catalog.TemplateDelete
    ),
    Entity.INSTANCE: EntitySchemas(
        catalog.InstanceCreate, catalog.InstanceRead, catalog.InstanceUpdate, catalog.InstanceDelete
    ),
    Entity.ROBOT: EntitySchemas(robot.RobotCreate, robot.RobotRead, robot.RobotUpdate, robot.RobotDelete),
    Entity.SOUL_CHIP_SLOT: EntitySchemas(
        slots.SoulChipSlotCreate, slots.SoulChipSlotRead, slots.SoulChipSlotUpdate, slots.SoulChipSlotDelete
    ),
    Entity.SKELETON_SLOT: EntitySchemas(
        slots.SkeletonSlotCreate, slots.SkeletonSlotRead, slots.SkeletonSlotUpdate, slots.SkeletonSlotDelete
    ),
    Entity.PART_SLOT: EntitySchemas(
        slots.PartSlotCreate, slots.PartSlotRead, slots.PartSlotUpdate, slots.PartSlotDelete
    ),
    Entity.EXPANSION_SLOT: EntitySchemas(
        slots.ExpansionSlotCreate, slots.ExpansionSlotRead, slots.ExpansionSlotUpdate, slots.ExpansionSlotDelete
    ),
    Entity.ITEM: EntitySchemas(item.ItemCreate, item.ItemRead, item.ItemUpdate, item.ItemDelete),
    Entity.SHARD: EntitySchemas(world.ShardCreate, world.ShardRead, world.ShardUpdate, world.ShardDelete),
    Entity.PLAYER_ACCOUNT: EntitySchemas(
        world.PlayerAccountCreate,
        world.PlayerAccountRead,
        world.PlayerAccountUpdate,
        world.PlayerAccountDelete,
    ),
}

_unregistered = set(Entity) - set(SCHEMA_REGISTRY)
if _unregistered:
    raise ConfigurationError(
        f"Entities without schemas: {sorted(_unregistered)}",
        config_key="SCHEMA_REGISTRY",
    )

# pydantic error types that map onto more specific codes
_CODE_BY_PYDANTIC_TYPE = {
    "missing": ErrorType.MISSING_REQUIRED_FIELD,
    "string_pattern_mismatch": ErrorType.INVALID_FORMAT,
    "enum": ErrorType.INVALID_FORMAT,
    "datetime_parsing": ErrorType.INVALID_FORMAT,
    "datetime_from_date_parsing": ErrorType.INVALID_FORMAT,
    "int_parsing": ErrorType.INVALID_FORMAT,
    "model_type": ErrorType.INVALID_FORMAT,
}


def schema_for(entity: Entity, variant: SchemaVariant) -> type[BaseModel]:
    return SCHEMA_REGISTRY[entity].for_variant(variant)


def key_fields(entity: Entity) -> tuple[str, ...]:
    return SCHEMA_REGISTRY[entity].key_fields


def field_errors_from_pydantic(exc: PydanticValidationError) -> tuple[FieldError, ...]:
    """Flatten a pydantic ValidationError into ordered FieldError entries."""
    errors = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        code = _CODE_BY_PYDANTIC_TYPE.get(error["type"], ErrorType.VALIDATION_ERROR)
        errors.append(FieldError(path=path, message=error["msg"], code=code.value))
    return tuple(errors)


def validate(entity: Entity, variant: SchemaVariant, data: Any) -> Result[dict[str, Any]]:
    """
    Validate data against one schema variant.

    Args:
        entity: Entity whose schemas to use
        variant: Which of the four variants applies
        data: Candidate record

    Returns:
        Ok with the parsed record (defaults applied for Create; only supplied
        fields for the other variants) or Err with all violations.
    """
    schema = schema_for(entity, variant)
    if not isinstance(data, Mapping):
        return Err.single("", f"Expected a mapping, got {type(data).__name__}", ErrorType.INVALID_FORMAT)

    try:
        model = schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        errors = field_errors_from_pydantic(exc)
        logger.debug(
            "Schema validation failed",
            entity=entity.value,
            variant=variant.value,
            error_count=len(errors),
            paths=[error.path for error in errors],
        )
        return Err(errors, ErrorType.VALIDATION_ERROR)

    return Ok(model.model_dump(exclude_unset=variant is not SchemaVariant.CREATE))


def safe_validate(entity: Entity, variant: SchemaVariant, data: Any) -> dict[str, Any] | None:
    """Return the parsed record, or None when validation fails."""
    result = validate(entity, variant, data)
    return result.value if isinstance(result, Ok) else None


def to_update_payload(entity: Entity, data: Mapping[str, Any], key: Mapping[str, Any]) -> dict[str, Any]:
    """
    Attach an identity or composite key to a create-shaped payload.

    Fields the Update variant does not accept are dropped.
    """
    update_fields = schema_for(entity, SchemaVariant.UPDATE).model_fields
    payload = {name: value for name, value in data.items() if name in update_fields}
    payload.update(key)
    return payload


def build_filters(entity: Entity, criteria: Mapping[str, Any]) -> Result[dict[str, Any]]:
    """Validate query criteria against the Read variant."""
    return validate(entity, SchemaVariant.READ, criteria)
