"""Base protocol for reasoning backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from npcagency.cancellation import CancellationToken
from npcagency.cognition.types import Decision
from npcagency.errors import DecisionMismatchError
from npcagency.perception.types import Perception


@runtime_checkable
class ReasoningBackend(Protocol):
    """Protocol that any reasoning backend must implement.

    Backends can be:
    - ScriptedReasoningBackend (rule-based, offline)
    - LLMReasoningBackend (OpenAI-compatible chat completions)
    - whatever planner the host plugs in
    """

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        """Given an agent and its perception, decide what to do.

        The returned decision must carry the same agent id; its actions may
        be empty but never None.
        """
        ...


def ensure_decision_for(agent_id: str, decision: Decision) -> Decision:
    """Reject a decision produced for some other agent."""
    if decision.agent_id != agent_id:
        raise DecisionMismatchError(expected=agent_id, actual=decision.agent_id)
    return decision
