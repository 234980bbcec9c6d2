"""Configuration settings for npcagency.

Uses Pydantic Settings for validation and environment variable support.
All settings can be overridden via NPCAGENCY_* environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings

from npcagency.errors import ValidationError


class AgencyConfig(BaseSettings):
    """Global configuration for the NPC agency runtime."""

    # LLM endpoint (any OpenAI-compatible API)
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_api_key: str = ""  # set via --llm-key or NPCAGENCY_LLM_API_KEY
    llm_model: str = "llama-3.1-8b-instant"
    llm_timeout: float = 60.0  # seconds

    # Reasoning
    llm_temperature: float = 0.7
    reasoning_max_tokens: int = 600

    # Dialogue
    dialogue_temperature: float = 0.8
    dialogue_max_tokens: int = 200

    # Persuasion
    persuasion_temperature: float = 0.7
    persuasion_max_tokens: int = 500

    # Memory windows
    agent_memory_size: int = 5  # decisions remembered per agent
    conversation_memory_size: int = 10  # exchanges remembered per NPC

    # Mock world
    sensor_seed: int | None = None
    sensor_delay: float = 0.05  # simulated sensing latency
    action_delay: float = 0.01  # simulated action latency

    # Demo
    default_agents: list[str] = Field(
        default=[
            "king_caladog_Battania",
            "merchant_pravend",
            "commander_derthert",
            "villager_omor",
        ]
    )
    ticks: int = 1

    log_level: str = "INFO"

    model_config = {"env_prefix": "NPCAGENCY_"}

    def require_api_key(self) -> str:
        """Return the API key, or fail if the LLM backend has none to use."""
        if not self.llm_api_key.strip():
            raise ValidationError(
                "LLM API key not configured. Set via:\n"
                "  --llm-key=KEY               (CLI)\n"
                "  NPCAGENCY_LLM_API_KEY=KEY   (.env or environment)"
            )
        return self.llm_api_key
