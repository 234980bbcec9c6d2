"""Test doubles shared across test modules."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from npcagency.actions.types import Action, ActionResult
from npcagency.cancellation import CancellationToken
from npcagency.cognition.types import Decision
from npcagency.perception.types import Perception


@dataclass
class MockMessage:
    """Mock OpenAI chat completion message."""

    content: str | None


@dataclass
class MockChoice:
    """Mock OpenAI completion choice."""

    message: MockMessage


@dataclass
class MockCompletion:
    """Mock OpenAI chat completion."""

    choices: list[MockChoice]


def completion(text: str | None) -> MockCompletion:
    """Build a one-choice completion carrying `text`."""
    return MockCompletion(choices=[MockChoice(message=MockMessage(content=text))])


class FixedSensor:
    """Returns the same perception for every agent and counts calls."""

    def __init__(self, perception: Perception):
        self.perception = perception
        self.calls: list[str] = []

    async def perceive(self, agent_id: str, cancel: CancellationToken) -> Perception:
        self.calls.append(agent_id)
        cancel.raise_if_cancelled()
        return self.perception


class FailingSensor:
    def __init__(self, error: Exception):
        self.error = error

    async def perceive(self, agent_id: str, cancel: CancellationToken) -> Perception:
        raise self.error


class FixedReasoner:
    """Returns a decision with the configured actions for whichever agent asks."""

    def __init__(self, *actions: Action, reasoning: str = "Because."):
        self.actions = list(actions)
        self.reasoning = reasoning

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        return Decision(agent_id=agent_id, reasoning=self.reasoning, actions=self.actions)


class PerAgentReasoner:
    """Looks up the decided actions by agent id."""

    def __init__(self, plans: dict[str, list[Action]]):
        self.plans = plans

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        await asyncio.sleep(0)
        return Decision(agent_id=agent_id, reasoning="Planned.", actions=self.plans[agent_id])


class FailingReasoner:
    def __init__(self, error: Exception):
        self.error = error

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        raise self.error


class ImpostorReasoner:
    """Returns a decision for some other agent."""

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        return Decision(agent_id="someone_else", reasoning="Not mine.", actions=[Action("Wait")])


class RecordingHandler:
    """Async handler that records each action it receives."""

    def __init__(self, message: str = "done", success: bool = True):
        self.message = message
        self.success = success
        self.seen: list[Action] = []

    async def __call__(self, action: Action, cancel: CancellationToken) -> ActionResult:
        self.seen.append(action)
        return ActionResult(success=self.success, message=self.message)
