"""Tests for the rule-based reasoning backend."""

from datetime import datetime

import pytest

from npcagency.agents.identity import AgentCategory
from npcagency.cancellation import CancellationToken
from npcagency.cognition.strategies.base import ReasoningBackend
from npcagency.cognition.strategies.scripted import ScriptedReasoningBackend
from npcagency.errors import OperationCancelled
from npcagency.perception.types import EconomicState, Perception, Weather


def situation(relations, prosperity=2000, food=150) -> Perception:
    return Perception(
        timestamp=datetime(1084, 1, 1),
        weather=Weather("Clear", 15),
        economy=EconomicState(prosperity=prosperity, food_supply=food, tax_rate=10),
        relations=relations,
        location="Somewhere",
    )


class TestScriptedDecisions:
    """Priority rules."""

    def setup_method(self):
        self.backend = ScriptedReasoningBackend()

    def test_satisfies_protocol(self):
        assert isinstance(self.backend, ReasoningBackend)

    def test_rich_lord_marches_on_enemy(self):
        reasoning, actions = self.backend.decide(
            AgentCategory.LORD, situation({"Khuzait": -90, "Sturgia": 40}, prosperity=5000)
        )
        assert [a.action_type for a in actions] == ["RecruitTroops", "MoveArmy"]
        assert actions[1].get("targetLocation") == "Khuzait"
        assert "Khuzait" in reasoning

    def test_poor_lord_defends(self):
        _, actions = self.backend.decide(
            AgentCategory.LORD, situation({"Khuzait": -90}, prosperity=1000)
        )
        assert [a.action_type for a in actions] == ["Defend"]

    def test_villager_hides_from_bandits(self):
        _, actions = self.backend.decide(AgentCategory.VILLAGER, situation({"Bandits": -80}))
        assert [a.action_type for a in actions] == ["Hide"]

    def test_hungry_soldier_retreats(self):
        _, actions = self.backend.decide(
            AgentCategory.SOLDIER, situation({"Enemy": -100}, food=30)
        )
        assert [a.action_type for a in actions] == ["Retreat"]

    def test_fed_soldier_patrols(self):
        _, actions = self.backend.decide(AgentCategory.SOLDIER, situation({"Enemy": -100}))
        assert [a.action_type for a in actions] == ["Patrol"]

    def test_merchant_trades(self):
        _, actions = self.backend.decide(AgentCategory.MERCHANT, situation({"Bandits": -90}))
        assert [a.action_type for a in actions] == ["Trade"]

    def test_low_food_villager_works(self):
        _, actions = self.backend.decide(AgentCategory.VILLAGER, situation({}, food=20))
        assert [a.action_type for a in actions] == ["Work"]

    def test_lord_courts_ally(self):
        _, actions = self.backend.decide(AgentCategory.LORD, situation({"Sturgia": 70}))
        assert actions[0].action_type == "ChangeRelation"
        assert actions[0].get("target") == "Sturgia"

    def test_quiet_day_means_no_actions(self):
        reasoning, actions = self.backend.decide(AgentCategory.VILLAGER, situation({"Lord": 10}))
        assert actions == []
        assert reasoning

    @pytest.mark.asyncio
    async def test_reason_builds_decision(self):
        decision = await self.backend.reason(
            "villager_omor", situation({"Bandits": -80}), CancellationToken()
        )
        assert decision.agent_id == "villager_omor"
        assert decision.first_action_type == "Hide"

    @pytest.mark.asyncio
    async def test_reason_honors_cancellation(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            await self.backend.reason("villager_omor", situation({}), token)
