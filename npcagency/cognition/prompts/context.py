"""Context builders for LLM prompts: assemble perception, memory and dialogue state into text."""

from __future__ import annotations

from npcagency.dialogue.types import DialogueContext
from npcagency.memory.agent_memory import AgentMemory
from npcagency.memory.conversation import ConversationMemory
from npcagency.perception.types import Perception, relation_label


class ContextBuilder:
    """Builds structured user prompts from perception and memory.

    Formats data for LLM consumption with emphasis on:
    - Conciseness (token efficiency)
    - Structure (consistent sections the model can rely on)
    """

    def __init__(
        self,
        agent_memory: AgentMemory | None = None,
        conversation_memory: ConversationMemory | None = None,
    ):
        self.agent_memory = agent_memory
        self.conversation_memory = conversation_memory

    def build_reasoning_prompt(self, agent_id: str, perception: Perception) -> str:
        """Assemble the reasoning user prompt for one agent.

        The semantic summary comes first, verbatim, so every backend sees the
        same rendering of the world.
        """
        sections = [
            f"## Current Situation\nCharacter: {agent_id}\n{perception.to_semantic_summary()}",
            self._build_relations_section(perception),
            self._build_memory_section(agent_id),
            "## Question\nWhat should you do in this situation?",
        ]
        return "\n\n".join(s for s in sections if s)

    def _build_relations_section(self, perception: Perception) -> str:
        if not perception.relations:
            return ""
        lines = ["## Relations"]
        for name, score in perception.relations.items():
            lines.append(f"  {name}: {score} ({relation_label(score)})")
        return "\n".join(lines)

    def _build_memory_section(self, agent_id: str) -> str:
        if self.agent_memory is None:
            return ""
        return f"## Memory\n{self.agent_memory.context_for(agent_id)}"

    def build_dialogue_prompt(
        self, npc_id: str, player_message: str, context: DialogueContext
    ) -> str:
        """Assemble the dialogue user prompt: situation, history and the player's line."""
        lines = [
            "SITUATION:",
            f"Location: {context.location}",
            f"Player's Faction: {context.player_faction}",
            f"Your Faction: {context.npc_faction}",
            f"Relation Level: {context.relation_with_player}",
        ]
        if context.current_situation:
            lines.append(f"Current Situation: {context.current_situation}")
        if context.recent_events:
            lines.append("Recent Events:")
            lines.extend(f"  - {event}" for event in context.recent_events)

        if self.conversation_memory is not None:
            lines.extend(["", "PAST CONVERSATIONS:", self.conversation_memory.history_for(npc_id)])

        lines.extend(
            [
                "",
                f'PLAYER NOW SAYS: "{player_message}"',
                "",
                "Give a short response fitting your character:",
            ]
        )
        return "\n".join(lines)
