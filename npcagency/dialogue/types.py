"""Dialogue value types: situation context in, NPC reply out."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DialogueIntent(Enum):
    """Conversational stance of an NPC reply."""

    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    HOSTILE = "hostile"
    BARGAINING = "bargaining"
    INFORMATIVE = "informative"
    THREATENING = "threatening"
    PLEADING = "pleading"
    DISMISSIVE = "dismissive"


@dataclass
class DialogueContext:
    """Situation the conversation happens in.

    Attributes:
        location: Where the conversation takes place
        relation_with_player: NPC's relation score toward the player
        npc_faction: NPC's faction name
        player_faction: Player's faction name
        is_at_war: True when the two factions are at war
        current_situation: Free-form note about what is going on
        recent_events: Recent happenings the NPC knows about
        npc_mood: NPC's mood going into the conversation
    """

    location: str = ""
    relation_with_player: int = 0
    npc_faction: str = ""
    player_faction: str = ""
    is_at_war: bool = False
    current_situation: str = ""
    recent_events: list[str] = field(default_factory=list)
    npc_mood: str = "Neutral"


@dataclass(frozen=True)
class DialogueResponse:
    """What an NPC says back."""

    text: str = ""
    emotion: str = "Neutral"
    intent: DialogueIntent = DialogueIntent.NEUTRAL
    should_end_conversation: bool = False

    def __post_init__(self):
        if self.text is None:
            object.__setattr__(self, "text", "")

    @classmethod
    def error(cls, message: str) -> DialogueResponse:
        """Confused, neutral reply used when generation fails."""
        return cls(text=message, emotion="Confused", intent=DialogueIntent.NEUTRAL)


@dataclass(frozen=True)
class PersuasionResult:
    """A lord's answer to a player's request.

    Attributes:
        agreed: True when the lord accepted
        negotiating: True when the lord wants something in return
        npc_reply: What the lord says, in character
        action_to_take: Action the lord commits to when agreeing, if any
        reasoning: The lord's private reasoning, for display and logs
    """

    agreed: bool = False
    negotiating: bool = False
    npc_reply: str = ""
    action_to_take: str | None = None
    reasoning: str = ""

    @classmethod
    def refused(cls, reply: str, reasoning: str = "") -> PersuasionResult:
        return cls(npc_reply=reply, reasoning=reasoning)

    @property
    def will_act(self) -> bool:
        return self.agreed and bool(self.action_to_take)
