"""LLM response parsers for reasoning decisions and dialogue replies."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from npcagency.actions.types import Action
from npcagency.cognition.prompts.templates import VALID_ACTIONS
from npcagency.dialogue.types import DialogueIntent, DialogueResponse, PersuasionResult

logger = logging.getLogger(__name__)

DEFAULT_WAIT_DURATION = 60


@dataclass
class ParsedDecision:
    """Parsed LLM decision output.

    Attributes:
        thought: The model's reasoning line
        action: Action type (first word of the ACTION field)
        detail: Free-form specifics for the action
        confidence: Parser confidence (0-1) based on parsing success
        raw_text: Original LLM response for debugging
    """

    thought: str
    action: str
    detail: str = ""
    confidence: float = 1.0
    raw_text: str = ""

    def to_actions(self) -> list[Action]:
        """Convert to the actions of a Decision.

        `Wait` carries a default duration. The detail travels as the
        `detail` parameter when present.
        """
        parameters: dict[str, object] = {}
        if self.detail:
            parameters["detail"] = self.detail
        if self.action.casefold() == "wait":
            parameters.setdefault("duration", DEFAULT_WAIT_DURATION)
        return [Action(self.action, parameters)]


class DecisionParser:
    """Robust parser for THOUGHT/ACTION/DETAIL replies.

    Handles:
    - JSON objects with thought/action/detail keys (optionally fenced)
    - The three-line THOUGHT:/ACTION:/DETAIL: format
    - Prose mentioning a known action name
    """

    LINE_PATTERN = re.compile(
        r"^\s*\**(THOUGHT|ACTION|DETAIL)\**\s*:\**\s*(.*)$", re.IGNORECASE
    )

    def __init__(self, valid_actions: list[str] | None = None):
        self.valid_actions = valid_actions or VALID_ACTIONS

    def parse(self, response_text: str) -> ParsedDecision:
        """Parse an LLM response into a ParsedDecision.

        Strategy:
        1. Try JSON extraction (with/without markdown fences)
        2. Try the line format
        3. Fall back to keyword scanning for action names
        4. Ultimate fallback: "Wait" with low confidence
        """
        result = self._extract_json(response_text) or self._extract_lines(response_text)
        if result:
            result.raw_text = response_text
            return result

        action = self._extract_action_keyword(response_text)
        if action:
            logger.info(f"Extracted action via keyword scan: {action}")
            return ParsedDecision(
                thought=response_text.strip()[:200] or "Extracted from verbose response",
                action=action,
                confidence=0.5,
                raw_text=response_text,
            )

        logger.warning(f"Could not parse LLM response, defaulting to 'Wait': {response_text[:100]}")
        return ParsedDecision(
            thought="Failed to parse response",
            action="Wait",
            confidence=0.1,
            raw_text=response_text,
        )

    def _extract_json(self, text: str) -> ParsedDecision | None:
        cleaned = re.sub(r"```(?:json)?\s*", "", text)
        start = cleaned.find("{")
        end = cleaned.rfind("}") + 1
        if start < 0 or end <= start:
            return None

        try:
            data = json.loads(cleaned[start:end])
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict):
            return None

        action = first_word(str(data.get("action") or ""))
        if not action:
            return None
        thought = str(data.get("thought") or "").strip()
        return ParsedDecision(
            thought=thought or "No reason provided",
            action=action,
            detail=str(data.get("detail") or "").strip(),
            confidence=0.95,
        )

    def _extract_lines(self, text: str) -> ParsedDecision | None:
        fields: dict[str, str] = {}
        for line in text.splitlines():
            match = self.LINE_PATTERN.match(line)
            if match:
                fields[match.group(1).upper()] = match.group(2).strip()

        action = first_word(fields.get("ACTION", ""))
        if not action:
            return None
        return ParsedDecision(
            thought=fields.get("THOUGHT") or "No reason provided",
            action=action,
            detail=fields.get("DETAIL", ""),
            confidence=0.9,
        )

    def _extract_action_keyword(self, text: str) -> str | None:
        for action in self.valid_actions:
            if re.search(rf"\b{re.escape(action)}\b", text, re.IGNORECASE):
                return action
        return None


def first_word(text: str) -> str:
    """First word of an ACTION field with punctuation stripped ("Trade." -> "Trade")."""
    parts = text.strip().split()
    if not parts:
        return ""
    return re.sub(r"[^\w]", "", parts[0])


# Emotion markers: marker -> (emotion, intent)
EMOTION_MARKERS = {
    "*angry*": ("Angry", DialogueIntent.HOSTILE),
    "*smiling*": ("Happy", DialogueIntent.FRIENDLY),
    "*sad*": ("Sad", None),
    "*threatening*": ("Threatening", DialogueIntent.THREATENING),
}

END_PHRASES = ("farewell", "goodbye", "leave me")

_MARKER_PATTERN = re.compile(r"\*[^*]+\*")


def parse_dialogue_reply(text: str) -> DialogueResponse:
    """Turn a raw NPC reply into a DialogueResponse.

    Emotion and intent come from the first recognized `*marker*`; an end
    phrase closes the conversation. All `*...*` markers are stripped from the
    returned text.
    """
    lowered = text.lower()
    emotion = "Neutral"
    intent = DialogueIntent.NEUTRAL
    for marker, (marker_emotion, marker_intent) in EMOTION_MARKERS.items():
        if marker in lowered:
            emotion = marker_emotion
            if marker_intent is not None:
                intent = marker_intent
            break

    should_end = any(phrase in lowered for phrase in END_PHRASES)
    clean = " ".join(_MARKER_PATTERN.sub("", text).split())

    return DialogueResponse(
        text=clean,
        emotion=emotion,
        intent=intent,
        should_end_conversation=should_end,
    )


_PERSUASION_LINE = re.compile(
    r"^\s*\**(DECISION|RESPONSE|ACTION|REASONING)\**\s*:\**\s*(.*)$", re.IGNORECASE
)

MAX_UNPARSED_REPLY = 200


def parse_persuasion_reply(text: str) -> PersuasionResult:
    """Read a DECISION/RESPONSE/ACTION/REASONING reply.

    ACCEPT agrees, NEGOTIATE marks a counter-offer, anything else refuses.
    An ACTION of "None" means no action. When no RESPONSE line is found the
    start of the raw text stands in for the reply.
    """
    fields: dict[str, str] = {}
    for line in text.splitlines():
        match = _PERSUASION_LINE.match(line)
        if match:
            fields.setdefault(match.group(1).upper(), match.group(2).strip())

    decision = fields.get("DECISION", "").upper()
    action = fields.get("ACTION", "")
    if action.casefold() in ("none", "n/a", "-"):
        action = ""

    reply = fields.get("RESPONSE", "")
    if not reply:
        logger.debug("Persuasion reply had no RESPONSE line, using raw text")
        reply = text.strip()[:MAX_UNPARSED_REPLY]

    return PersuasionResult(
        agreed="ACCEPT" in decision,
        negotiating="NEGOTIATE" in decision,
        npc_reply=reply,
        action_to_take=action or None,
        reasoning=fields.get("REASONING", ""),
    )
