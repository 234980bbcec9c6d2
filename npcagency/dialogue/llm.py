"""LLM-powered dialogue backend using any OpenAI-compatible endpoint."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from npcagency.agents.identity import AgentCategory, infer_category
from npcagency.agents.personality import LordPersonality, PersonalityGenerator
from npcagency.cancellation import CancellationToken
from npcagency.cognition.prompts import (
    ContextBuilder,
    build_dialogue_system_prompt,
    parse_dialogue_reply,
)
from npcagency.config import AgencyConfig
from npcagency.dialogue.types import DialogueContext, DialogueResponse
from npcagency.errors import OperationCancelled
from npcagency.memory.conversation import ConversationMemory

logger = logging.getLogger(__name__)

THOUGHTFUL_FALLBACK = "*looks at you thoughtfully*"
API_ERROR_FALLBACK = "Hmm... I was going to say something but I forgot."
CANCELLED_REPLY = "..."


class LLMDialogueBackend:
    """Voices NPCs through chat completions.

    Each exchange is stored in conversation memory, and the last few are fed
    back into the prompt so the NPC remembers what was said. Never raises:
    API failures, cancellation and unexpected errors each map to an in-world
    fallback reply.

    With a personality generator, lords also speak with their trait profile.
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str = "llama-3.1-8b-instant",
        temperature: float = 0.8,
        max_tokens: int = 200,
        memory: ConversationMemory | None = None,
        base_url: str = "",
        api_key: str = "",
        timeout: float = 60.0,
        personalities: PersonalityGenerator | None = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.memory = memory if memory is not None else ConversationMemory()
        self.personalities = personalities

        self._client = client
        self._context_builder = ContextBuilder(conversation_memory=self.memory)

    @classmethod
    def from_config(
        cls,
        config: AgencyConfig,
        memory: ConversationMemory | None = None,
        personalities: PersonalityGenerator | None = None,
    ) -> LLMDialogueBackend:
        return cls(
            model=config.llm_model,
            temperature=config.dialogue_temperature,
            max_tokens=config.dialogue_max_tokens,
            memory=memory or ConversationMemory(max_per_npc=config.conversation_memory_size),
            base_url=config.llm_base_url,
            api_key=config.require_api_key(),
            timeout=config.llm_timeout,
            personalities=personalities,
        )

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                base_url=self.base_url or None,
                api_key=self.api_key or "not-set",
                timeout=self.timeout,
            )
        return self._client

    def _personality(
        self, npc_id: str, npc_role: str, context: DialogueContext
    ) -> LordPersonality | None:
        if self.personalities is None:
            return None
        if infer_category(f"{npc_role} {npc_id}") is not AgentCategory.LORD:
            return None
        return self.personalities.personality_for(
            npc_id,
            kingdom_name=context.npc_faction or npc_id,
            is_king="king" in npc_role.lower(),
        )

    async def generate_response(
        self,
        npc_id: str,
        npc_name: str,
        npc_role: str,
        player_message: str,
        context: DialogueContext,
        cancel: CancellationToken,
    ) -> DialogueResponse:
        try:
            cancel.raise_if_cancelled()
            messages = [
                {
                    "role": "system",
                    "content": build_dialogue_system_prompt(
                        npc_name,
                        npc_role,
                        context,
                        self._personality(npc_id, npc_role, context),
                    ),
                },
                {
                    "role": "user",
                    "content": self._context_builder.build_dialogue_prompt(
                        npc_id, player_message, context
                    ),
                },
            ]
            response = await cancel.race(
                self._get_client().chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
            )
        except OperationCancelled:
            logger.info(f"Dialogue with {npc_name} cancelled")
            return DialogueResponse.error(CANCELLED_REPLY)
        except openai.APIError as e:
            logger.warning(f"Dialogue API error for {npc_name}: {e}")
            return DialogueResponse.error(API_ERROR_FALLBACK)
        except Exception as e:
            logger.warning(f"Dialogue generation failed for {npc_name}: {e}")
            return DialogueResponse.error(THOUGHTFUL_FALLBACK)

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        if not text.strip():
            logger.warning(f"Empty dialogue completion for {npc_name}")
            return DialogueResponse.error(THOUGHTFUL_FALLBACK)

        reply = parse_dialogue_reply(text.strip())
        self.memory.remember(npc_id, player_message, reply.text)
        logger.info(f"{npc_name} ({reply.emotion}): {reply.text}")
        return reply
