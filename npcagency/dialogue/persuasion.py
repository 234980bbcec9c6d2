"""Persuasion: a player asks a lord to act, the lord weighs it in character.

The lord's answer comes from an OpenAI-compatible model prompted with the
lord's personality and relation to the player. An agreed request can be
carried out through the action registry like any decided action.
"""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from npcagency.actions.registry import ActionRegistry
from npcagency.actions.types import Action, ActionResult
from npcagency.agents.personality import PersonalityGenerator
from npcagency.cancellation import CancellationToken
from npcagency.cognition.prompts.parser import first_word, parse_persuasion_reply
from npcagency.cognition.prompts.templates import (
    build_persuasion_system_prompt,
    build_persuasion_user_prompt,
)
from npcagency.config import AgencyConfig
from npcagency.dialogue.types import PersuasionResult
from npcagency.errors import OperationCancelled, ValidationError

logger = logging.getLogger(__name__)

API_ERROR_REPLY = "I cannot discuss this right now."
SILENT_REPLY = "*considers your words in silence*"
CANCELLED_REPLY = "..."


class LLMPersuasionBackend:
    """Lets lords accept, refuse or bargain over player requests.

    Never raises for endpoint trouble: API errors, cancellation and empty
    completions all come back as a refusal with the cause in `reasoning`.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str = "llama-3.1-8b-instant",
        temperature: float = 0.7,
        max_tokens: int = 500,
        personalities: PersonalityGenerator | None = None,
        base_url: str = "",
        api_key: str = "",
        timeout: float = 60.0,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.personalities = personalities if personalities is not None else PersonalityGenerator()
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout

        self._client = client

    @classmethod
    def from_config(
        cls, config: AgencyConfig, personalities: PersonalityGenerator | None = None
    ) -> LLMPersuasionBackend:
        return cls(
            model=config.llm_model,
            temperature=config.persuasion_temperature,
            max_tokens=config.persuasion_max_tokens,
            personalities=personalities,
            base_url=config.llm_base_url,
            api_key=config.require_api_key(),
            timeout=config.llm_timeout,
        )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                base_url=self.base_url or None,
                api_key=self.api_key or "not-set",
                timeout=self.timeout,
            )
        return self._client

    async def try_persuade(
        self,
        npc_id: str,
        npc_name: str,
        player_request: str,
        relation_with_player: int = 0,
        cancel: CancellationToken | None = None,
        kingdom_name: str | None = None,
        is_king: bool = False,
    ) -> PersuasionResult:
        """Put `player_request` to the lord and read back the verdict.

        Raises:
            ValidationError: npc_id or player_request is empty
        """
        if not isinstance(npc_id, str) or not npc_id.strip():
            raise ValidationError("NPC ID cannot be empty")
        if not isinstance(player_request, str) or not player_request.strip():
            raise ValidationError("Persuasion request cannot be empty")
        cancel = cancel or CancellationToken()

        personality = self.personalities.personality_for(
            npc_id, kingdom_name=kingdom_name, is_faction_leader=is_king, is_king=is_king
        )
        messages = [
            {
                "role": "system",
                "content": build_persuasion_system_prompt(
                    npc_name, personality, relation_with_player
                ),
            },
            {"role": "user", "content": build_persuasion_user_prompt(player_request)},
        ]

        try:
            cancel.raise_if_cancelled()
            response = await cancel.race(
                self._get_client().chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
            )
        except OperationCancelled:
            logger.info(f"Persuasion of {npc_name} cancelled")
            return PersuasionResult.refused(CANCELLED_REPLY, "cancelled")
        except openai.APIError as e:
            logger.warning(f"Persuasion API error for {npc_name}: {e}")
            return PersuasionResult.refused(API_ERROR_REPLY, f"API error: {e}")

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        if not text.strip():
            logger.warning(f"Empty persuasion completion for {npc_name}")
            return PersuasionResult.refused(SILENT_REPLY, "empty completion")

        result = parse_persuasion_reply(text)
        verdict = "agreed" if result.agreed else "negotiating" if result.negotiating else "refused"
        logger.info(f"{npc_name} {verdict}: {result.npc_reply}")
        return result


def persuaded_action(result: PersuasionResult) -> Action | None:
    """The action an agreeing lord committed to, or None.

    The first word of ACTION names the action type; the full text travels
    as the `detail` parameter.
    """
    if not result.will_act:
        return None
    action_type = first_word(result.action_to_take)
    if not action_type:
        return None
    return Action(action_type, {"detail": result.action_to_take, "requestedBy": "player"})


async def carry_out(
    result: PersuasionResult,
    agent_id: str,
    actions: ActionRegistry,
    cancel: CancellationToken | None = None,
) -> ActionResult | None:
    """Execute what the lord agreed to. None when there is nothing to do."""
    action = persuaded_action(result)
    if action is None:
        return None
    outcome = await actions.execute(action.with_parameter("agentId", agent_id), cancel)
    if not outcome.success:
        logger.warning(f"{agent_id} agreed to {action.action_type} but it failed: {outcome.message}")
    return outcome
