"""Agent identity: categories, lifecycle states, and the Agent entity."""

from __future__ import annotations

import enum
import logging

from npcagency.errors import IllegalTransitionError, ValidationError

logger = logging.getLogger(__name__)


class AgentCategory(enum.Enum):
    """Closed set of NPC kinds."""

    LORD = "lord"
    VILLAGER = "villager"
    SOLDIER = "soldier"
    MERCHANT = "merchant"


class AgentState(enum.Enum):
    """Lifecycle of one agent across a pipeline run."""

    IDLE = "idle"
    THINKING = "thinking"
    ACTING = "acting"
    WAITING = "waiting"


# Edges the coordinator may drive the state machine along
LEGAL_TRANSITIONS: dict[AgentState, frozenset[AgentState]] = {
    AgentState.IDLE: frozenset({AgentState.THINKING}),
    AgentState.THINKING: frozenset({AgentState.ACTING}),
    AgentState.ACTING: frozenset({AgentState.IDLE, AgentState.WAITING}),
    AgentState.WAITING: frozenset({AgentState.IDLE}),
}


class Agent:
    """An NPC with agency: stable identity plus a bounded think/act lifecycle.

    State changes are driven from outside (by the pipeline coordinator); the
    agent only refuses edges that the lifecycle does not allow.
    """

    def __init__(self, agent_id: str, name: str, category: AgentCategory):
        if not isinstance(agent_id, str) or not agent_id.strip():
            raise ValidationError("Agent ID cannot be empty")
        if name is None:
            raise ValidationError("Agent name cannot be None")
        if not isinstance(category, AgentCategory):
            raise ValidationError(f"Unknown agent category: {category!r}")

        self._agent_id = agent_id
        self.name = name
        self._category = category
        self._state = AgentState.IDLE

    @property
    def agent_id(self) -> str:
        return self._agent_id

    @property
    def category(self) -> AgentCategory:
        return self._category

    @property
    def state(self) -> AgentState:
        return self._state

    def can_transition_to(self, new_state: AgentState) -> bool:
        return new_state in LEGAL_TRANSITIONS[self._state]

    def transition_to(self, new_state: AgentState) -> None:
        """Move to `new_state`, rejecting edges outside the lifecycle."""
        if not self.can_transition_to(new_state):
            raise IllegalTransitionError(self._agent_id, self._state, new_state)
        logger.debug(f"Agent {self._agent_id}: {self._state.value} -> {new_state.value}")
        self._state = new_state

    def force_idle(self) -> None:
        """Recover to IDLE from any state after a failed or cancelled run."""
        if self._state is not AgentState.IDLE:
            logger.debug(f"Agent {self._agent_id}: forced {self._state.value} -> idle")
        self._state = AgentState.IDLE

    def __repr__(self) -> str:
        return (
            f"Agent(id={self._agent_id!r}, name={self.name!r}, "
            f"category={self._category.name}, state={self._state.name})"
        )


# Keyword hints used when only an identifier is known
_CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], AgentCategory]] = [
    (("king", "lord", "caladog"), AgentCategory.LORD),
    (("merchant", "trader"), AgentCategory.MERCHANT),
    (("commander", "general", "soldier", "archer"), AgentCategory.SOLDIER),
    (("villager", "peasant"), AgentCategory.VILLAGER),
]


def infer_category(agent_id: str, default: AgentCategory = AgentCategory.VILLAGER) -> AgentCategory:
    """Guess a category from keywords in an agent identifier."""
    lowered = agent_id.lower()
    for keywords, category in _CATEGORY_KEYWORDS:
        if any(word in lowered for word in keywords):
            return category
    return default
