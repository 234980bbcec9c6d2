"""Dialogue: free-form NPC conversation behind a pluggable backend."""

from __future__ import annotations

from npcagency.dialogue.protocols import DialogueBackend, converse
from npcagency.dialogue.types import (
    DialogueContext,
    DialogueIntent,
    DialogueResponse,
    PersuasionResult,
)

__all__ = [
    "DialogueBackend",
    "DialogueContext",
    "DialogueIntent",
    "DialogueResponse",
    "PersuasionResult",
    "converse",
]
