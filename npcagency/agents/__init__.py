"""Agent identity, lifecycle state machine, personalities and host registry."""

from npcagency.agents.identity import (
    LEGAL_TRANSITIONS,
    Agent,
    AgentCategory,
    AgentState,
    infer_category,
)
from npcagency.agents.personality import LordPersonality, PersonalityGenerator
from npcagency.agents.registry import AgentRegistry

__all__ = [
    "Agent",
    "AgentCategory",
    "AgentState",
    "AgentRegistry",
    "LEGAL_TRANSITIONS",
    "LordPersonality",
    "PersonalityGenerator",
    "infer_category",
]
