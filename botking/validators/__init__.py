"""Schema validation and result types."""

from .result import Err, FieldError, Ok, Result
from .schema_registry import (
    SCHEMA_REGISTRY,
    Entity,
    EntitySchemas,
    SchemaVariant,
    build_filters,
    key_fields,
    safe_validate,
    schema_for,
    to_update_payload,
    validate,
)

__all__ = [
    "SCHEMA_REGISTRY",
    "Entity",
    "EntitySchemas",
    "Err",
    "FieldError",
    "Ok",
    "Result",
    "SchemaVariant",
    "build_filters",
    "key_fields",
    "safe_validate",
    "schema_for",
    "to_update_payload",
    "validate",
]
