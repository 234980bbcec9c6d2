"""Agent registry: long-lived lookup of agents between pipeline runs."""

from __future__ import annotations

import threading

from npcagency.agents.identity import Agent, AgentCategory, infer_category
from npcagency.errors import ValidationError


class AgentRegistry:
    """Holds every known agent, keyed by identifier.

    Single source of truth for the host; a pipeline run borrows an agent from
    here for the duration of one tick.
    """

    def __init__(self):
        self._agents: dict[str, Agent] = {}
        self._lock = threading.Lock()

    def add(self, agent: Agent) -> Agent:
        """Register an agent. Identifiers must be unique."""
        with self._lock:
            if agent.agent_id in self._agents:
                raise ValidationError(f"Agent '{agent.agent_id}' already registered")
            self._agents[agent.agent_id] = agent
        return agent

    def spawn(
        self, agent_id: str, name: str | None = None, category: AgentCategory | None = None
    ) -> Agent:
        """Create and register an agent, inferring the category from the id if omitted."""
        agent = Agent(
            agent_id=agent_id,
            name=name if name is not None else agent_id,
            category=category or infer_category(agent_id),
        )
        return self.add(agent)

    def remove(self, agent_id: str) -> Agent | None:
        with self._lock:
            return self._agents.pop(agent_id, None)

    def get(self, agent_id: str) -> Agent | None:
        """Look up an agent by ID."""
        with self._lock:
            return self._agents.get(agent_id)

    def all_agents(self) -> list[Agent]:
        """All agents, in registration order."""
        with self._lock:
            return list(self._agents.values())

    def __contains__(self, agent_id: object) -> bool:
        with self._lock:
            return agent_id in self._agents

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)
