"""Shared schema building blocks."""

from .base import (
    BotName,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    ReadBaseModel,
    RecordBaseModel,
    ServerFieldsMixin,
    TemplateSlug,
)

__all__ = [
    "BotName",
    "NonEmptyStr",
    "NonNegativeInt",
    "PositiveInt",
    "ReadBaseModel",
    "RecordBaseModel",
    "ServerFieldsMixin",
    "TemplateSlug",
]
