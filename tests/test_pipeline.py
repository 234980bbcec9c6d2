"""Tests for the perceive -> reason -> act pipeline coordinator."""

import asyncio

import pytest

from npcagency.actions.builtin import register_builtin_actions
from npcagency.actions.types import Action, ActionResult
from npcagency.agents.identity import Agent, AgentCategory, AgentState
from npcagency.cancellation import CancellationToken
from npcagency.cognition.strategies.scripted import ScriptedReasoningBackend
from npcagency.cognition.types import Decision
from npcagency.errors import (
    DecisionMismatchError,
    IllegalTransitionError,
    ReasoningError,
    SensingError,
    ValidationError,
)
from npcagency.perception.sensor import MockWorldSensor
from npcagency.pipeline.coordinator import AgentPipeline, PipelineOutcome
from tests.helpers import (
    FailingReasoner,
    FailingSensor,
    FixedReasoner,
    FixedSensor,
    ImpostorReasoner,
    PerAgentReasoner,
    RecordingHandler,
)


class TestConstruction:
    def test_collaborators_required(self, perception, registry):
        sensor = FixedSensor(perception)
        reasoner = FixedReasoner()
        with pytest.raises(ValidationError):
            AgentPipeline(None, reasoner, registry)
        with pytest.raises(ValidationError):
            AgentPipeline(sensor, None, registry)
        with pytest.raises(ValidationError):
            AgentPipeline(sensor, reasoner, None)

    @pytest.mark.asyncio
    async def test_none_agent_rejected(self, perception, registry):
        pipeline = AgentPipeline(FixedSensor(perception), FixedReasoner(), registry)
        with pytest.raises(ValidationError):
            await pipeline.run(None)


class TestRun:
    """Single-agent runs."""

    @pytest.mark.asyncio
    async def test_actions_dispatched_in_order(self, perception, registry, villager):
        move = RecordingHandler("Moved")
        attack = RecordingHandler("Attacked")
        registry.register("MoveTo", move)
        registry.register("Attack", attack)
        reasoner = FixedReasoner(
            Action("MoveTo", {"x": 10, "y": 20}),
            Action("Attack", {"target": "bandit_1"}),
        )
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        outcome = await pipeline.run(villager)

        assert [r.message for r in outcome.results] == ["Moved", "Attacked"]
        assert all(r.success for r in outcome.results)
        assert move.seen[0].get("x") == 10
        assert attack.seen[0].get("target") == "bandit_1"
        assert villager.state is AgentState.IDLE
        assert outcome.succeeded
        assert outcome.perception is perception
        assert outcome.decision.reasoning == "Because."

    @pytest.mark.asyncio
    async def test_agent_id_injected(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Work", handler)
        reasoner = FixedReasoner(Action("Work"), Action("Work", {"agentId": "someone"}))
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        await pipeline.run(villager)

        assert handler.seen[0].get("agentId") == "villager_omor"
        assert handler.seen[1].get("agentId") == "someone"

    @pytest.mark.asyncio
    async def test_failed_action_does_not_stop_the_rest(self, perception, registry, villager):
        registry.register("Work", RecordingHandler("Worked"))
        reasoner = FixedReasoner(Action("Fly"), Action("Work"))
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        outcome = await pipeline.run(villager)

        assert len(outcome.results) == 2
        assert outcome.results[0].message == "No handler registered for action type: Fly"
        assert outcome.results[1].success
        assert outcome.failed_results == [outcome.results[0]]
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_empty_decision_leaves_agent_waiting(self, perception, registry, villager):
        pipeline = AgentPipeline(FixedSensor(perception), FixedReasoner(), registry)

        outcome = await pipeline.run(villager)

        assert outcome.results == ()
        assert outcome.succeeded
        assert villager.state is AgentState.WAITING

    @pytest.mark.asyncio
    async def test_waiting_agent_runs_again(self, perception, registry, villager):
        registry.register("Work", RecordingHandler())
        sensor = FixedSensor(perception)
        await AgentPipeline(sensor, FixedReasoner(), registry).run(villager)
        assert villager.state is AgentState.WAITING

        outcome = await AgentPipeline(sensor, FixedReasoner(Action("Work")), registry).run(villager)

        assert len(outcome.results) == 1
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_agent_mid_run_rejected(self, perception, registry, villager):
        villager.transition_to(AgentState.THINKING)
        pipeline = AgentPipeline(FixedSensor(perception), FixedReasoner(), registry)
        with pytest.raises(IllegalTransitionError):
            await pipeline.run(villager)


class TestFaults:
    """Sensing and reasoning faults are contained."""

    @pytest.mark.asyncio
    async def test_reasoning_fault(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Work", handler)
        error = ReasoningError("model unavailable")
        pipeline = AgentPipeline(FixedSensor(perception), FailingReasoner(error), registry)

        outcome = await pipeline.run(villager)

        assert outcome.results == ()
        assert outcome.error is error
        assert not outcome.succeeded
        assert villager.state is AgentState.IDLE
        assert handler.seen == []

    @pytest.mark.asyncio
    async def test_sensing_fault(self, registry, villager):
        pipeline = AgentPipeline(
            FailingSensor(SensingError("no world")), FixedReasoner(Action("Work")), registry
        )

        outcome = await pipeline.run(villager)

        assert isinstance(outcome.error, SensingError)
        assert outcome.perception is None
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_unexpected_exception_contained(self, perception, registry, villager):
        pipeline = AgentPipeline(
            FixedSensor(perception), FailingReasoner(KeyError("oops")), registry
        )
        outcome = await pipeline.run(villager)
        assert isinstance(outcome.error, KeyError)
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_decision_for_other_agent_rejected(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Wait", handler)
        pipeline = AgentPipeline(FixedSensor(perception), ImpostorReasoner(), registry)

        outcome = await pipeline.run(villager)

        assert isinstance(outcome.error, DecisionMismatchError)
        assert handler.seen == []
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_task_cancellation_resets_agent(self, registry, villager):
        class HangingSensor:
            async def perceive(self, agent_id, cancel):
                await asyncio.sleep(10)

        pipeline = AgentPipeline(HangingSensor(), FixedReasoner(), registry)
        task = asyncio.ensure_future(pipeline.run(villager))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert villager.state is AgentState.IDLE


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_before_start(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Work", handler)
        token = CancellationToken()
        token.cancel()
        pipeline = AgentPipeline(FixedSensor(perception), FixedReasoner(Action("Work")), registry)

        outcome = await pipeline.run(villager, token)

        assert outcome.cancelled
        assert outcome.error is None
        assert outcome.results == ()
        assert handler.seen == []
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_between_actions(self, perception, registry, villager):
        token = CancellationToken()

        async def first(action, cancel):
            token.cancel("enough")
            return ActionResult.succeeded("first done")

        second = RecordingHandler()
        registry.register("First", first)
        registry.register("Second", second)
        reasoner = FixedReasoner(Action("First"), Action("Second"))
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        outcome = await pipeline.run(villager, token)

        assert [r.message for r in outcome.results] == ["first done"]
        assert outcome.cancelled
        assert second.seen == []
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_during_reasoning(self, perception, registry, villager):
        class Oblivious:
            """Trips the token but finishes reasoning anyway."""

            async def reason(self, agent_id, p, cancel):
                cancel.cancel("player left")
                return Decision(agent_id, "nothing", [])

        pipeline = AgentPipeline(FixedSensor(perception), Oblivious(), registry)

        outcome = await pipeline.run(villager, CancellationToken())

        assert outcome.cancelled
        assert outcome.decision is None
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_during_reasoning_skips_actions(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Work", handler)

        class Oblivious:
            async def reason(self, agent_id, p, cancel):
                cancel.cancel()
                return Decision(agent_id, "Work the fields.", [Action("Work")])

        pipeline = AgentPipeline(FixedSensor(perception), Oblivious(), registry)

        outcome = await pipeline.run(villager, CancellationToken())

        assert outcome.cancelled
        assert outcome.results == ()
        assert handler.seen == []


class TestRunMany:
    """Concurrent runs for distinct agents."""

    @pytest.mark.asyncio
    async def test_two_agents_get_their_own_results(self, perception, registry):
        registry.register("Trade", RecordingHandler("Traded"))
        registry.register("Hide", RecordingHandler("Hid"))
        merchant = Agent("merchant_1", "Garios", AgentCategory.MERCHANT)
        villager = Agent("villager_1", "Omor", AgentCategory.VILLAGER)
        reasoner = PerAgentReasoner(
            {"merchant_1": [Action("Trade")], "villager_1": [Action("Hide"), Action("Hide")]}
        )
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        outcomes = await pipeline.run_many([merchant, villager])

        assert [o.agent_id for o in outcomes] == ["merchant_1", "villager_1"]
        assert [r.message for r in outcomes[0].results] == ["Traded"]
        assert [r.message for r in outcomes[1].results] == ["Hid", "Hid"]
        assert merchant.state is AgentState.IDLE
        assert villager.state is AgentState.IDLE

    @pytest.mark.asyncio
    async def test_one_fault_does_not_affect_the_other(self, perception, registry):
        class Picky:
            async def reason(self, agent_id, p, cancel):
                if agent_id == "bad":
                    raise ReasoningError("confused")
                return await FixedReasoner(Action("Work")).reason(agent_id, p, cancel)

        registry.register("Work", RecordingHandler())
        good = Agent("good", "Good", AgentCategory.VILLAGER)
        bad = Agent("bad", "Bad", AgentCategory.VILLAGER)
        pipeline = AgentPipeline(FixedSensor(perception), Picky(), registry)

        outcomes = await pipeline.run_many([good, bad])

        assert outcomes[0].succeeded and len(outcomes[0].results) == 1
        assert isinstance(outcomes[1].error, ReasoningError)

    @pytest.mark.asyncio
    async def test_duplicate_agents_rejected(self, perception, registry, villager):
        pipeline = AgentPipeline(FixedSensor(perception), FixedReasoner(), registry)
        with pytest.raises(ValidationError):
            await pipeline.run_many([villager, villager])

    @pytest.mark.asyncio
    async def test_busy_agent_rejects_whole_batch(self, perception, registry, villager):
        handler = RecordingHandler()
        registry.register("Work", handler)
        busy = Agent("busy_1", "Busy", AgentCategory.SOLDIER)
        busy.transition_to(AgentState.THINKING)
        sensor = FixedSensor(perception)
        pipeline = AgentPipeline(sensor, FixedReasoner(Action("Work")), registry)

        with pytest.raises(IllegalTransitionError):
            await pipeline.run_many([villager, busy])

        assert sensor.calls == []
        assert handler.seen == []
        assert villager.state is AgentState.IDLE
        assert busy.state is AgentState.THINKING

    @pytest.mark.asyncio
    async def test_cancelled_handler_does_not_sink_other_agents(self, perception, registry):
        async def abandoned(action, cancel):
            fut = asyncio.get_running_loop().create_future()
            fut.cancel()
            await fut

        registry.register("MoveTo", abandoned)
        registry.register("Trade", RecordingHandler("Traded"))
        lord = Agent("lord_a", "Derthert", AgentCategory.LORD)
        merchant = Agent("merchant_b", "Garios", AgentCategory.MERCHANT)
        reasoner = PerAgentReasoner({"lord_a": [Action("MoveTo")], "merchant_b": [Action("Trade")]})
        pipeline = AgentPipeline(FixedSensor(perception), reasoner, registry)

        outcomes = await pipeline.run_many([lord, merchant])

        assert not outcomes[0].results[0].success
        assert [r.message for r in outcomes[1].results] == ["Traded"]
        assert lord.state is AgentState.IDLE
        assert merchant.state is AgentState.IDLE


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_mock_world_with_scripted_rules(self, registry):
        log = register_builtin_actions(registry)
        pipeline = AgentPipeline(
            MockWorldSensor(seed=3, delay=0.0), ScriptedReasoningBackend(), registry
        )
        agents = [
            Agent("villager_omor", "Omor", AgentCategory.VILLAGER),
            Agent("commander_derthert", "Derthert", AgentCategory.SOLDIER),
            Agent("merchant_pravend", "Garios", AgentCategory.MERCHANT),
        ]

        outcomes = await pipeline.run_many(agents)

        assert all(isinstance(o, PipelineOutcome) for o in outcomes)
        assert all(o.succeeded for o in outcomes)
        assert all(r.success for o in outcomes for r in o.results)
        assert log.total == sum(len(o.results) for o in outcomes)
        assert all(a.state in (AgentState.IDLE, AgentState.WAITING) for a in agents)
