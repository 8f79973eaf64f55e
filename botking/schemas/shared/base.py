"""
Base Pydantic model classes for record schemas.

Record schemas describe the persistence-shaped DTO of each entity. They
forbid unknown keys, strip surrounding whitespace from strings and store
enum members as their plain string values.
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from ...game.artifacts.constants import TEMPLATE_SLUG_PATTERN

NonEmptyStr = Annotated[str, Field(min_length=1)]
NonNegativeInt = Annotated[int, Field(ge=0)]
PositiveInt = Annotated[int, Field(gt=0)]
BotName = Annotated[str, Field(min_length=1, max_length=50)]
TemplateSlug = Annotated[str, Field(min_length=1, max_length=120, pattern=TEMPLATE_SLUG_PATTERN)]


class RecordBaseModel(BaseModel):
    """Base model for Create, Update and Delete record schemas."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_default=True,
        use_enum_values=True,
    )


class ServerFieldsMixin(BaseModel):
    """Server-assigned timestamps, readable but never supplied on create."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReadBaseModel(ServerFieldsMixin):
    """Base model for Read schemas; every field is an optional filter."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
    )
