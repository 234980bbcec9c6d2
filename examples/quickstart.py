"""npcagency Quickstart: your first pipeline run

This script wires a mock world, the scripted reasoning rules and the built-in
action handlers together, adds one custom handler, and runs a tick for a few
NPCs concurrently.

Run with:
    python examples/quickstart.py

Watch as agents:
- Perceive their surroundings (weather, economy, relations)
- Decide what to do from their role and situation
- Act through whichever handler is registered for each action
"""

import asyncio

from npcagency.actions import Action, ActionRegistry, ActionResult, register_builtin_actions
from npcagency.agents import AgentRegistry
from npcagency.cognition.strategies import ScriptedReasoningBackend
from npcagency.perception import MockWorldSensor
from npcagency.pipeline import AgentPipeline


async def main():
    actions = ActionRegistry()
    register_builtin_actions(actions)

    # Replace the built-in Hide with something more colorful
    @actions.handler("Hide")
    def hide_in_cellar(action: Action) -> ActionResult:
        return ActionResult.succeeded(f"{action.get('agentId')} hides in the root cellar")

    agents = AgentRegistry()
    for agent_id in ["villager_omor", "merchant_pravend", "king_caladog_Battania"]:
        agents.spawn(agent_id)

    pipeline = AgentPipeline(MockWorldSensor(seed=42), ScriptedReasoningBackend(), actions)
    outcomes = await pipeline.run_many(agents.all_agents())

    for outcome in outcomes:
        print(f"{outcome.agent_id} at {outcome.perception.location}")
        print(f"  REASONING: {outcome.decision.reasoning}")
        for result in outcome.results:
            mark = "ok" if result.success else "FAILED"
            print(f"  [{mark}] {result.message}")
        print()


if __name__ == "__main__":
    asyncio.run(main())
