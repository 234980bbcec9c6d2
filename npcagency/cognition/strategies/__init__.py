"""Reasoning backends."""

from npcagency.cognition.strategies.base import ReasoningBackend, ensure_decision_for
from npcagency.cognition.strategies.scripted import ScriptedReasoningBackend

__all__ = [
    "ReasoningBackend",
    "ScriptedReasoningBackend",
    "ensure_decision_for",
]
