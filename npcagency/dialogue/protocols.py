"""Dialogue backend contract and the caller-side guard around it."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from npcagency.cancellation import CancellationToken
from npcagency.dialogue.types import DialogueContext, DialogueResponse
from npcagency.errors import OperationCancelled

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK = "*looks at you thoughtfully*"


@runtime_checkable
class DialogueBackend(Protocol):
    """Protocol for anything that can voice an NPC."""

    async def generate_response(
        self,
        npc_id: str,
        npc_name: str,
        npc_role: str,
        player_message: str,
        context: DialogueContext,
        cancel: CancellationToken,
    ) -> DialogueResponse:
        """Produce the NPC's reply to one player line."""
        ...


async def converse(
    backend: DialogueBackend,
    npc_id: str,
    npc_name: str,
    npc_role: str,
    player_message: str,
    context: DialogueContext | None = None,
    cancel: CancellationToken | None = None,
    fallback: str = DEFAULT_FALLBACK,
) -> DialogueResponse:
    """Ask `backend` for a reply without ever raising.

    Backend failures and cancellation are logged and turned into
    `DialogueResponse.error(fallback)`.
    """
    context = context or DialogueContext()
    cancel = cancel or CancellationToken()
    try:
        response = await backend.generate_response(
            npc_id, npc_name, npc_role, player_message, context, cancel
        )
    except OperationCancelled:
        logger.info(f"Dialogue with {npc_id} cancelled")
        return DialogueResponse.error(fallback)
    except Exception as e:
        logger.warning(f"Dialogue backend failed for {npc_id}: {e}")
        return DialogueResponse.error(fallback)

    if not isinstance(response, DialogueResponse):
        logger.warning(f"Dialogue backend returned {type(response).__name__} for {npc_id}")
        return DialogueResponse.error(fallback)
    return response
