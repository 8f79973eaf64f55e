"""Shared test doubles and builders for the BotKing test suite."""

from .clock_fixtures import SequentialIdGenerator, StepClock
from .artifact_fixtures import (
    full_part_set,
    make_expansion_slot,
    make_template,
    mining_worker_config,
)

__all__ = [
    "SequentialIdGenerator",
    "StepClock",
    "full_part_set",
    "make_expansion_slot",
    "make_template",
    "mining_worker_config",
]
