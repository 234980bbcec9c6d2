"""Memory: rolling windows of past decisions and conversations."""

from npcagency.memory.agent_memory import AgentMemory, MemoryEntry
from npcagency.memory.conversation import ConversationEntry, ConversationMemory

__all__ = [
    "AgentMemory",
    "MemoryEntry",
    "ConversationMemory",
    "ConversationEntry",
]
