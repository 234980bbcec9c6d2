"""Conversation memory: what the player and each NPC said to each other."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field

from npcagency.memory.agent_memory import truncate


@dataclass
class ConversationEntry:
    """One player line and the NPC's reply."""

    player_message: str
    npc_response: str
    timestamp: float = field(default_factory=time.time)


class ConversationMemory:
    """Rolling window of exchanges, per NPC (case-insensitive ids)."""

    def __init__(self, max_per_npc: int = 10, clock=time.time):
        self.max_per_npc = max_per_npc
        self._clock = clock
        self._conversations: dict[str, deque[ConversationEntry]] = {}
        self._lock = threading.Lock()

    def remember(self, npc_id: str, player_message: str, npc_response: str) -> None:
        entry = ConversationEntry(player_message, npc_response, timestamp=self._clock())
        key = npc_id.casefold()
        with self._lock:
            if key not in self._conversations:
                self._conversations[key] = deque(maxlen=self.max_per_npc)
            self._conversations[key].append(entry)

    def entries(self, npc_id: str) -> list[ConversationEntry]:
        with self._lock:
            return list(self._conversations.get(npc_id.casefold(), ()))

    def history_for(self, npc_id: str) -> str:
        """Conversation history formatted for the dialogue prompt."""
        entries = self.entries(npc_id)
        if not entries:
            return "This is your first conversation with this person."

        now = self._clock()
        lines = [f"Your last {len(entries)} exchanges:"]
        for entry in entries:
            lines.append(f"  [{format_time_ago(now - entry.timestamp)}]")
            lines.append(f"    Player: {truncate(entry.player_message, 100)}")
            lines.append(f"    You: {truncate(entry.npc_response, 100)}")
        return "\n".join(lines)

    def last_player_message(self, npc_id: str) -> str | None:
        entries = self.entries(npc_id)
        return entries[-1].player_message if entries else None

    def forget(self, npc_id: str) -> None:
        with self._lock:
            self._conversations.pop(npc_id.casefold(), None)

    def forget_all(self) -> None:
        with self._lock:
            self._conversations.clear()


def format_time_ago(seconds: float) -> str:
    minutes = seconds / 60
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{int(minutes)} minutes ago"
    hours = minutes / 60
    if hours < 24:
        return f"{int(hours)} hours ago"
    return f"{int(hours / 24)} days ago"
