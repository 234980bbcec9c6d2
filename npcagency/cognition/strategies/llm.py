"""LLM-powered reasoning backend using any OpenAI-compatible endpoint."""

from __future__ import annotations

import logging
import threading

import openai
from openai import AsyncOpenAI

from npcagency.agents.identity import AgentCategory, infer_category
from npcagency.agents.personality import PersonalityGenerator
from npcagency.cancellation import CancellationToken
from npcagency.cognition.prompts import (
    ContextBuilder,
    DecisionParser,
    build_system_prompt,
)
from npcagency.cognition.types import Decision
from npcagency.config import AgencyConfig
from npcagency.errors import LLMError, LLMParseError, LLMTimeoutError
from npcagency.memory.agent_memory import AgentMemory
from npcagency.perception.types import Perception

logger = logging.getLogger(__name__)


class LLMReasoningBackend:
    """Reasoning backend powered by chat completions.

    Works with any provider exposing an OpenAI-compatible API (Groq, OpenAI,
    Ollama, vLLM, LM Studio and so on).

    Features:
    - Persona system prompts keyed by agent id, cached per agent
    - Structured user prompt with perception summary, relation labels and memory
    - Tolerant response parsing (JSON or THOUGHT/ACTION/DETAIL lines)
    - Each decision is remembered so later prompts can stay consistent
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str = "llama-3.1-8b-instant",
        temperature: float = 0.7,
        max_tokens: int = 600,
        memory: AgentMemory | None = None,
        base_url: str = "",
        api_key: str = "",
        timeout: float = 60.0,
        personalities: PersonalityGenerator | None = None,
    ):
        """Initialize the backend.

        Args:
            client: Pre-built async client (tests inject a mock here)
            model: Model name, provider-dependent
            temperature: Sampling temperature
            max_tokens: Completion token limit
            memory: Decision memory; a private one is created when omitted
            base_url: Endpoint used when the client is built lazily
            api_key: API key used when the client is built lazily
            timeout: Request timeout in seconds
            personalities: When set, lords get their trait profile in the system prompt
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.memory = memory if memory is not None else AgentMemory()
        self.personalities = personalities

        self._client = client
        self._context_builder = ContextBuilder(agent_memory=self.memory)
        self._parser = DecisionParser()
        self._system_prompts: dict[str, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: AgencyConfig,
        memory: AgentMemory | None = None,
        personalities: PersonalityGenerator | None = None,
    ) -> LLMReasoningBackend:
        """Build a backend from settings. Requires an API key."""
        return cls(
            model=config.llm_model,
            temperature=config.llm_temperature,
            max_tokens=config.reasoning_max_tokens,
            memory=memory or AgentMemory(max_per_agent=config.agent_memory_size),
            base_url=config.llm_base_url,
            api_key=config.require_api_key(),
            timeout=config.llm_timeout,
            personalities=personalities,
        )

    def _get_client(self) -> AsyncOpenAI:
        """Lazy-init the OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                base_url=self.base_url or None,
                api_key=self.api_key or "not-set",
                timeout=self.timeout,
            )
        return self._client

    def _get_or_build_system_prompt(self, agent_id: str) -> str:
        key = agent_id.casefold()
        with self._lock:
            prompt = self._system_prompts.get(key)
            if prompt is None:
                personality = None
                if self.personalities is not None and infer_category(agent_id) is AgentCategory.LORD:
                    personality = self.personalities.for_agent(agent_id)
                prompt = build_system_prompt(agent_id, personality=personality)
                self._system_prompts[key] = prompt
                logger.debug(f"Built system prompt for {agent_id} (cache miss)")
        return prompt

    async def reason(
        self, agent_id: str, perception: Perception, cancel: CancellationToken
    ) -> Decision:
        """Ask the model what `agent_id` should do.

        Raises:
            LLMTimeoutError: The endpoint timed out
            LLMError: The endpoint returned an API error
            LLMParseError: The completion was empty
            OperationCancelled: The token tripped while waiting
        """
        cancel.raise_if_cancelled()
        messages = [
            {"role": "system", "content": self._get_or_build_system_prompt(agent_id)},
            {
                "role": "user",
                "content": self._context_builder.build_reasoning_prompt(agent_id, perception),
            },
        ]

        text = await self._complete(messages, cancel)
        parsed = self._parser.parse(text)
        decision = Decision(
            agent_id=agent_id,
            reasoning=parsed.thought,
            actions=parsed.to_actions(),
        )

        self.memory.remember(agent_id, perception.location, parsed.thought, parsed.action)
        logger.info(
            f"LLM decision for {agent_id}: {parsed.action} "
            f"(confidence {parsed.confidence:.2f}) - {parsed.thought}"
        )
        return decision

    async def _complete(self, messages: list[dict], cancel: CancellationToken) -> str:
        client = self._get_client()
        try:
            response = await cancel.race(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                )
            )
        except openai.APITimeoutError as e:
            raise LLMTimeoutError(f"LLM request timed out after {self.timeout}s") from e
        except openai.APIError as e:
            raise LLMError(f"LLM request failed: {e}") from e

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        if not text.strip():
            raise LLMParseError(text, "empty completion")
        return text
