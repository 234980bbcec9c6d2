"""Agent pipeline: perceive -> reason -> act for one agent per run.

Drives the agent lifecycle state machine, contains backend faults, and
dispatches each decided action through the action registry in order.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from npcagency.actions.registry import ActionRegistry
from npcagency.actions.types import Action, ActionResult
from npcagency.agents.identity import Agent, AgentState
from npcagency.cancellation import CancellationToken
from npcagency.cognition.strategies.base import ReasoningBackend, ensure_decision_for
from npcagency.cognition.types import Decision
from npcagency.errors import IllegalTransitionError, OperationCancelled, ValidationError
from npcagency.perception.sensor import WorldSensor
from npcagency.perception.types import Perception

logger = logging.getLogger(__name__)


@dataclass
class PipelineOutcome:
    """Record of one pipeline run for one agent.

    `results` holds one entry per action that was started, in decision
    order. On a sensing or reasoning fault it is empty and `error` is set.
    """

    agent_id: str
    results: tuple[ActionResult, ...] = field(default_factory=tuple)
    decision: Decision | None = None
    perception: Perception | None = None
    error: BaseException | None = None
    cancelled: bool = False
    elapsed: float = 0.0  # seconds

    @property
    def succeeded(self) -> bool:
        """True when the run neither faulted nor was cancelled."""
        return self.error is None and not self.cancelled

    @property
    def failed_results(self) -> list[ActionResult]:
        return [r for r in self.results if not r.success]


class AgentPipeline:
    """Coordinates sensing, reasoning and action dispatch for agents.

    Collaborators are shared and may serve many concurrent runs; each run
    touches only the state of its own agent.
    """

    def __init__(
        self,
        sensor: WorldSensor,
        reasoner: ReasoningBackend,
        actions: ActionRegistry,
    ):
        if sensor is None:
            raise ValidationError("Pipeline requires a world sensor")
        if reasoner is None:
            raise ValidationError("Pipeline requires a reasoning backend")
        if actions is None:
            raise ValidationError("Pipeline requires an action registry")
        self.sensor = sensor
        self.reasoner = reasoner
        self.actions = actions

    async def run(
        self, agent: Agent, cancel: CancellationToken | None = None
    ) -> PipelineOutcome:
        """Run one perceive -> reason -> act cycle for `agent`.

        Sensing and reasoning faults are contained: the agent returns to IDLE
        and the outcome carries the error with no results.

        Raises:
            ValidationError: agent is None
            IllegalTransitionError: agent is already mid-run
        """
        if agent is None:
            raise ValidationError("Agent cannot be None")
        cancel = cancel or CancellationToken()
        agent_id = agent.agent_id
        started = time.perf_counter()

        if agent.state is AgentState.WAITING:
            agent.transition_to(AgentState.IDLE)
        agent.transition_to(AgentState.THINKING)

        try:
            # --- Phase 1: Perceive ---
            perception = await self.sensor.perceive(agent_id, cancel)
            cancel.raise_if_cancelled()

            # --- Phase 2: Reason ---
            decision = await self.reasoner.reason(agent_id, perception, cancel)
            cancel.raise_if_cancelled()
            decision = ensure_decision_for(agent_id, decision)
            logger.info(
                f"{agent_id} decided: {decision.reasoning} "
                f"({len(decision.actions)} action(s))"
            )
        except OperationCancelled as e:
            agent.force_idle()
            logger.info(f"Pipeline for {agent_id} cancelled before acting: {e}")
            return PipelineOutcome(
                agent_id, cancelled=True, elapsed=time.perf_counter() - started
            )
        except asyncio.CancelledError:
            agent.force_idle()
            raise
        except Exception as e:
            agent.force_idle()
            logger.warning(f"Pipeline for {agent_id} failed: {e}")
            return PipelineOutcome(agent_id, error=e, elapsed=time.perf_counter() - started)

        agent.transition_to(AgentState.ACTING)

        if decision.is_idle:
            agent.transition_to(AgentState.WAITING)
            logger.debug(f"{agent_id} has nothing to do, waiting")
            return PipelineOutcome(
                agent_id,
                decision=decision,
                perception=perception,
                elapsed=time.perf_counter() - started,
            )

        # --- Phase 3: Act ---
        results: list[ActionResult] = []
        cancelled = False
        try:
            for action in decision.actions:
                if cancel.cancelled:
                    cancelled = True
                    skipped = len(decision.actions) - len(results)
                    logger.info(f"Pipeline for {agent_id} cancelled, skipping {skipped} action(s)")
                    break
                result = await self.actions.execute(self._bind(action, agent_id), cancel)
                if not result.success:
                    logger.warning(f"{agent_id}: {action.action_type} failed: {result.message}")
                results.append(result)
        except asyncio.CancelledError:
            agent.force_idle()
            raise

        agent.transition_to(AgentState.IDLE)
        return PipelineOutcome(
            agent_id,
            results=tuple(results),
            decision=decision,
            perception=perception,
            cancelled=cancelled,
            elapsed=time.perf_counter() - started,
        )

    async def run_many(
        self, agents: Iterable[Agent], cancel: CancellationToken | None = None
    ) -> list[PipelineOutcome]:
        """Run pipelines for distinct agents concurrently.

        Returns one outcome per agent, in input order. Every agent is checked
        before any run starts, so a rejected batch leaves all agents untouched.

        Raises:
            ValidationError: the same agent id appears twice
            IllegalTransitionError: an agent is already mid-run
        """
        agents = list(agents)
        seen: set[str] = set()
        for agent in agents:
            if agent is None:
                raise ValidationError("Agent cannot be None")
            if agent.agent_id in seen:
                raise ValidationError(f"Agent '{agent.agent_id}' listed more than once")
            if agent.state not in (AgentState.IDLE, AgentState.WAITING):
                raise IllegalTransitionError(agent.agent_id, agent.state, AgentState.THINKING)
            seen.add(agent.agent_id)

        cancel = cancel or CancellationToken()
        outcomes = await asyncio.gather(*(self.run(agent, cancel) for agent in agents))
        return list(outcomes)

    @staticmethod
    def _bind(action: Action, agent_id: str) -> Action:
        """Tell the handler who is acting, unless the action already says."""
        if "agentId" in action.parameters:
            return action
        return action.with_parameter("agentId", agent_id)
