"""Artifact factories."""

from .account_factory import AccountFactory
from .base import (
    ArtifactContext,
    ArtifactFactory,
    BatchCreateResult,
    BatchFailure,
    FactoryStats,
    PipelineResult,
    ValidationReport,
)
from .bot_factory import BotFactory
from .item_factory import ItemFactory

__all__ = [
    "AccountFactory",
    "ArtifactContext",
    "ArtifactFactory",
    "BatchCreateResult",
    "BatchFailure",
    "BotFactory",
    "FactoryStats",
    "ItemFactory",
    "PipelineResult",
    "ValidationReport",
]
