"""Item templates and the instances minted from them."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from ...exceptions import GameLogicError
from .constants import ALLOWED_INSTANCE_TRANSITIONS, InstanceState, ItemClass


@dataclass(frozen=True, slots=True)
class TemplateArtifact:
    """Immutable catalog entry; instances reference it by id."""

    item_class: ItemClass
    name: str
    slug: str
    meta: dict[str, Any] = field(default_factory=dict)
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        # Callers keep no handle on the stored blob
        object.__setattr__(self, "meta", copy.deepcopy(self.meta))

    @property
    def base_stats(self) -> dict[str, Any]:
        return dict(self.meta.get("base_stats", {}))


@dataclass(frozen=True, slots=True)
class InstanceArtifact:
    """A concrete item owned by a (shard_id, player_id) pair."""

    template_id: str
    shard_id: int
    player_id: int
    state: InstanceState = InstanceState.NEW
    bound_to_player: int | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_equipped(self) -> bool:
        return self.state is InstanceState.EQUIPPED

    def transition_to(self, state: InstanceState) -> InstanceArtifact:
        """
        Return a copy in the new lifecycle state.

        Raises:
            GameLogicError: If the move is not a legal lifecycle transition
        """
        if state not in ALLOWED_INSTANCE_TRANSITIONS[self.state]:
            raise GameLogicError(
                f"Instance cannot move from {self.state.value} to {state.value}",
                game_action="instance_transition",
                details={"instance_id": self.id, "from_state": self.state.value, "to_state": state.value},
            )
        return replace(self, state=state)

    def equip(self) -> InstanceArtifact:
        return self.transition_to(InstanceState.EQUIPPED)

    def unequip(self) -> InstanceArtifact:
        return self.transition_to(InstanceState.USED)
