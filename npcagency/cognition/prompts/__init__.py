"""Prompt engineering components for LLM-based reasoning, dialogue and persuasion."""

from __future__ import annotations

from npcagency.cognition.prompts.context import ContextBuilder
from npcagency.cognition.prompts.parser import (
    DecisionParser,
    ParsedDecision,
    parse_dialogue_reply,
    parse_persuasion_reply,
)
from npcagency.cognition.prompts.templates import (
    AGENT_PERSONAS,
    VALID_ACTIONS,
    build_dialogue_system_prompt,
    build_persuasion_system_prompt,
    build_persuasion_user_prompt,
    build_system_prompt,
)

__all__ = [
    "AGENT_PERSONAS",
    "VALID_ACTIONS",
    "build_system_prompt",
    "build_dialogue_system_prompt",
    "build_persuasion_system_prompt",
    "build_persuasion_user_prompt",
    "ContextBuilder",
    "DecisionParser",
    "ParsedDecision",
    "parse_dialogue_reply",
    "parse_persuasion_reply",
]
