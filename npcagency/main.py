"""Entry point for the npcagency demo."""

from __future__ import annotations

import asyncio
import logging
import sys

from rich.logging import RichHandler

from npcagency.actions.builtin import register_builtin_actions
from npcagency.actions.registry import ActionRegistry
from npcagency.agents.personality import PersonalityGenerator
from npcagency.agents.registry import AgentRegistry
from npcagency.cancellation import CancellationToken
from npcagency.cognition.strategies.llm import LLMReasoningBackend
from npcagency.cognition.strategies.scripted import ScriptedReasoningBackend
from npcagency.config import AgencyConfig
from npcagency.dialogue.llm import LLMDialogueBackend
from npcagency.dialogue.persuasion import LLMPersuasionBackend, carry_out
from npcagency.dialogue.protocols import converse
from npcagency.dialogue.types import DialogueContext
from npcagency.errors import ValidationError
from npcagency.perception.sensor import MockWorldSensor
from npcagency.pipeline.coordinator import AgentPipeline
from npcagency.renderer import Renderer

logger = logging.getLogger("npcagency")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


async def run_ticks(config: AgencyConfig, use_llm: bool, renderer: Renderer) -> None:
    """Run every configured agent through the pipeline, `config.ticks` times."""
    registry = AgentRegistry()
    for agent_id in config.default_agents:
        registry.spawn(agent_id)

    actions = ActionRegistry()
    action_log = register_builtin_actions(actions, delay=config.action_delay)
    sensor = MockWorldSensor(seed=config.sensor_seed, delay=config.sensor_delay)
    if use_llm:
        reasoner = LLMReasoningBackend.from_config(config, personalities=PersonalityGenerator())
    else:
        reasoner = ScriptedReasoningBackend()
    pipeline = AgentPipeline(sensor, reasoner, actions)

    cancel = CancellationToken()
    try:
        for tick in range(1, config.ticks + 1):
            outcomes = await pipeline.run_many(registry.all_agents(), cancel)
            renderer.render_tick(tick, outcomes)
    except asyncio.CancelledError:
        cancel.cancel("interrupted")
        raise

    renderer.console.print(f"[bold]Actions executed:[/] {action_log.total}")


async def talk(config: AgencyConfig, npc: str, message: str, renderer: Renderer) -> None:
    """One-shot conversation with an NPC."""
    backend = LLMDialogueBackend.from_config(config, personalities=PersonalityGenerator())
    context = DialogueContext(location="Town Square", npc_mood="Calm")
    reply = await converse(backend, npc, npc.replace("_", " ").title(), npc, message, context)
    renderer.render_dialogue(npc, message, reply)


async def persuade(
    config: AgencyConfig, npc: str, request: str, relation: int, renderer: Renderer
) -> None:
    """Ask a lord to do something; if they agree, the built-in handlers carry it out."""
    backend = LLMPersuasionBackend.from_config(config)
    result = await backend.try_persuade(
        npc,
        npc.replace("_", " ").title(),
        request,
        relation_with_player=relation,
        kingdom_name=npc,
        is_king="king" in npc.lower(),
    )

    actions = ActionRegistry()
    register_builtin_actions(actions, delay=config.action_delay)
    outcome = await carry_out(result, npc, actions)
    renderer.render_persuasion(npc, request, result, outcome)


def main():
    """Run the demo."""
    config = AgencyConfig()

    use_llm = False
    talk_to = None
    message = "Greetings. How fare you?"
    request = None
    relation = 0

    for arg in sys.argv[1:]:
        if arg.startswith("--agents="):
            config.default_agents = [a for a in arg.split("=", 1)[1].split(",") if a.strip()]
        elif arg.startswith("--ticks="):
            config.ticks = int(arg.split("=")[1])
        elif arg == "--llm":
            use_llm = True
        elif arg.startswith("--llm-url="):
            config.llm_base_url = arg.split("=", 1)[1]
        elif arg.startswith("--llm-key="):
            config.llm_api_key = arg.split("=", 1)[1]
        elif arg.startswith("--model="):
            config.llm_model = arg.split("=", 1)[1]
        elif arg.startswith("--talk="):
            talk_to = arg.split("=", 1)[1]
        elif arg.startswith("--say="):
            message = arg.split("=", 1)[1]
        elif arg.startswith("--persuade="):
            request = arg.split("=", 1)[1]
        elif arg.startswith("--relation="):
            relation = int(arg.split("=")[1])
        elif arg.startswith("--seed="):
            config.sensor_seed = int(arg.split("=")[1])
        elif arg == "--verbose":
            config.log_level = "DEBUG"
        elif arg == "--help" or arg == "-h":
            print("npcagency v0.1.0")
            print()
            print("Usage: python -m npcagency.main [OPTIONS]")
            print()
            print("Options:")
            print("  --agents=a,b,c        Agent ids to run (keywords pick the scenario)")
            print("  --ticks=N             Pipeline runs per agent (default: 1)")
            print("  --seed=N              Mock world random seed")
            print("  --llm                 Reason with the LLM instead of scripted rules")
            print("  --llm-url=URL         LLM endpoint (any OpenAI-compatible URL)")
            print("  --llm-key=KEY         API key for the LLM endpoint")
            print("  --model=NAME          LLM model name")
            print("  --talk=NPC            Talk to an NPC instead of running ticks")
            print("  --say=TEXT            What to say with --talk")
            print("  --persuade=TEXT       Ask the --talk NPC to act (lords may agree)")
            print("  --relation=N          Your relation with the NPC for --persuade")
            print("  --verbose             Debug logging")
            print()
            print("Environment variables (override any setting):")
            print("  NPCAGENCY_LLM_BASE_URL, NPCAGENCY_LLM_API_KEY, NPCAGENCY_LLM_MODEL, etc.")
            sys.exit(0)

    configure_logging(config.log_level)
    renderer = Renderer()

    try:
        if talk_to and request:
            asyncio.run(persuade(config, talk_to, request, relation, renderer))
        elif talk_to:
            asyncio.run(talk(config, talk_to, message, renderer))
        else:
            asyncio.run(run_ticks(config, use_llm, renderer))
    except ValidationError as e:
        logger.error(str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        renderer.console.print("[yellow]Interrupted[/]")
        sys.exit(130)


if __name__ == "__main__":
    main()
