"""Agent memory: rolling window of each agent's recent decisions."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field


@dataclass
class MemoryEntry:
    """A remembered decision."""

    situation: str  # usually the location
    decision: str  # short reasoning line
    action: str  # first action type, "Wait" when idle
    timestamp: float = field(default_factory=time.time)


class AgentMemory:
    """Rolling window of remembered decisions, per agent.

    Agent ids are matched case-insensitively. Fed back into the reasoning
    prompt so agents stay consistent with what they did before.
    """

    def __init__(self, max_per_agent: int = 5, clock=time.time):
        self.max_per_agent = max_per_agent
        self._clock = clock
        self._memories: dict[str, deque[MemoryEntry]] = {}
        self._lock = threading.Lock()

    def remember(self, agent_id: str, situation: str, decision: str, action: str) -> None:
        """Record a decision made by an agent."""
        entry = MemoryEntry(situation, decision, action, timestamp=self._clock())
        key = agent_id.casefold()
        with self._lock:
            if key not in self._memories:
                self._memories[key] = deque(maxlen=self.max_per_agent)
            self._memories[key].append(entry)

    def recent(self, agent_id: str) -> list[MemoryEntry]:
        """Oldest-first list of remembered decisions."""
        with self._lock:
            return list(self._memories.get(agent_id.casefold(), ()))

    def context_for(self, agent_id: str) -> str:
        """Memory context as prompt text."""
        memories = self.recent(agent_id)
        if not memories:
            return "No previous decisions - this is your first decision."

        now = self._clock()
        lines = [f"Your last {len(memories)} decisions:"]
        for i, m in enumerate(memories, start=1):
            minutes = (now - m.timestamp) / 60
            when = "just now" if minutes < 1 else f"{minutes:.0f} minutes ago"
            lines.append(f"  {i}. [{when}] {m.action}: {truncate(m.decision, 80)}")
        return "\n".join(lines)

    def forget(self, agent_id: str) -> None:
        """Clear all memories for an agent."""
        with self._lock:
            self._memories.pop(agent_id.casefold(), None)

    def forget_all(self) -> None:
        with self._lock:
            self._memories.clear()

    @property
    def total(self) -> int:
        """Total number of memories stored across agents."""
        with self._lock:
            return sum(len(m) for m in self._memories.values())


def truncate(text: str, max_length: int) -> str:
    """Cut `text` to `max_length` characters, ending in "..." when cut."""
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."
