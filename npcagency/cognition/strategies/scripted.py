"""Scripted reasoning backend: rule-based decisions without a language model."""

from __future__ import annotations

from npcagency.actions.types import Action
from npcagency.agents.identity import AgentCategory, infer_category
from npcagency.cancellation import CancellationToken
from npcagency.cognition.types import Decision
from npcagency.perception.types import Perception

HOSTILE_THRESHOLD = -50
WAR_THRESHOLD = -80
ALLY_THRESHOLD = 50
LOW_FOOD = 60
RICH = 3000


class ScriptedReasoningBackend:
    """Priority-based backend. Category is inferred from the agent id.

    This is the known-working offline baseline, used when no LLM endpoint is
    configured and as a deterministic backend in tests.
    Decision priority:
    1. Lords: war-level enemy and a rich realm -> recruit and march
    2. Anyone facing a hostile party -> defend / patrol / hide
    3. Low food -> trade or work
    4. Lords with a strong ally -> court the ally
    5. Otherwise do nothing this tick
    """

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        cancel.raise_if_cancelled()
        category = infer_category(agent_id)
        reasoning, actions = self.decide(category, perception)
        return Decision(agent_id=agent_id, reasoning=reasoning, actions=actions)

    def decide(
        self, category: AgentCategory, perception: Perception
    ) -> tuple[str, list[Action]]:
        """Map the perception to a reasoning line plus actions."""
        enemy = perception.most_hostile()
        ally = perception.most_friendly()
        economy = perception.economy

        # Priority 1: march on a sworn enemy when the treasury allows it
        if (
            category is AgentCategory.LORD
            and enemy is not None
            and enemy[1] <= WAR_THRESHOLD
            and economy.prosperity >= RICH
        ):
            name, score = enemy
            return (
                f"{name} is an open enemy ({score}) and the realm can afford a campaign.",
                [
                    Action("RecruitTroops", {"troopCount": 50, "detail": f"Muster against {name}"}),
                    Action("MoveArmy", {"targetLocation": name, "detail": "March to war"}),
                ],
            )

        # Priority 2: react to threats
        if enemy is not None and enemy[1] <= HOSTILE_THRESHOLD:
            name, score = enemy
            if category is AgentCategory.VILLAGER:
                return (f"{name} is dangerous ({score}); better to stay out of sight.", [
                    Action("Hide", {"detail": f"Hiding from {name}"}),
                ])
            if category is AgentCategory.SOLDIER:
                if economy.food_supply < LOW_FOOD:
                    return (f"Supplies are short and {name} is near; fall back.", [
                        Action("Retreat", {"detail": "Supplies exhausted"}),
                    ])
                return (f"{name} is hostile ({score}); keep the roads watched.", [
                    Action("Patrol", {"detail": f"Watching for {name}"}),
                ])
            if category is AgentCategory.LORD:
                return (f"{name} is hostile ({score}); hold the walls.", [
                    Action("Defend", {"detail": f"Fortify against {name}"}),
                ])

        # Priority 3: feed people
        if economy.food_supply < LOW_FOOD:
            if category is AgentCategory.MERCHANT:
                return ("Food is scarce, so grain will sell well.", [
                    Action("Trade", {"detail": "Buy grain for resale"}),
                ])
            return ("Food is running low; time to work the fields.", [
                Action("Work", {"detail": "Bring in the harvest"}),
            ])

        if category is AgentCategory.MERCHANT:
            return ("Markets are calm; keep goods moving.", [
                Action("Trade", {"detail": "Routine caravan"}),
            ])

        # Priority 4: diplomacy
        if category is AgentCategory.LORD and ally is not None and ally[1] >= ALLY_THRESHOLD:
            name, score = ally
            return (f"{name} is a friend ({score}); strengthen the bond.", [
                Action("ChangeRelation", {"target": name, "detail": f"Send gifts to {name}"}),
            ])

        return ("Nothing demands attention right now.", [])
