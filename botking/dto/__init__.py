"""Artifact to record conversion layer."""

from .base import SERVER_FIELDS, ArtifactConverter, Record
from .converters import (
    SLOT_CONVERTERS,
    AccountConverter,
    BotConverter,
    InstanceConverter,
    ItemConverter,
    SlotConverter,
    TemplateConverter,
)

__all__ = [
    "SERVER_FIELDS",
    "SLOT_CONVERTERS",
    "AccountConverter",
    "ArtifactConverter",
    "BotConverter",
    "InstanceConverter",
    "ItemConverter",
    "Record",
    "SlotConverter",
    "TemplateConverter",
]
