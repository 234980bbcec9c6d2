"""Decision: what a reasoning backend hands back to the pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from npcagency.actions.types import Action
from npcagency.errors import ValidationError


@dataclass(frozen=True)
class Decision:
    """Reasoning output: explanation text plus an ordered list of actions.

    Actions run in the order given. An empty sequence means the agent chose
    to do nothing this tick.
    """

    agent_id: str
    reasoning: str
    actions: tuple[Action, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.agent_id, str) or not self.agent_id.strip():
            raise ValidationError("Decision agent ID cannot be empty")
        if not isinstance(self.reasoning, str) or not self.reasoning.strip():
            raise ValidationError("Decision reasoning cannot be empty")
        if self.actions is None:
            raise ValidationError("Decision actions cannot be None")
        actions = tuple(self.actions) if isinstance(self.actions, Iterable) else None
        if actions is None or not all(isinstance(a, Action) for a in actions):
            raise ValidationError("Decision actions must be Action instances")
        object.__setattr__(self, "actions", actions)

    @property
    def is_idle(self) -> bool:
        """True when the agent decided to do nothing."""
        return not self.actions

    @property
    def first_action_type(self) -> str:
        """Type of the first action, or "Wait" for an idle decision."""
        return self.actions[0].action_type if self.actions else "Wait"
